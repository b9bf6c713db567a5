"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
Recent splits are kept in a JSON file; the audit trail is kept in memory.
"""

from spliteasy.services.storage.interface import (
    AuditStorageInterface,
    NotFoundError,
    SplitStorageInterface,
    StateImportError,
    StorageError,
)
from spliteasy.services.storage.json_file import JsonFileSplitStorage
from spliteasy.services.storage.memory import InMemoryAuditStorage
from spliteasy.services.storage.serialization import (
    export_state,
    generate_split_name,
    import_state,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "SplitStorageInterface",
    # Exceptions
    "NotFoundError",
    "StateImportError",
    "StorageError",
    # Implementations
    "InMemoryAuditStorage",
    "JsonFileSplitStorage",
    # Import / export
    "export_state",
    "generate_split_name",
    "import_state",
]

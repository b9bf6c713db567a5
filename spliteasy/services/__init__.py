"""Services package."""

from spliteasy.services.storage import (
    AuditStorageInterface,
    InMemoryAuditStorage,
    JsonFileSplitStorage,
    NotFoundError,
    SplitStorageInterface,
    StateImportError,
    StorageError,
    export_state,
    generate_split_name,
    import_state,
)

__all__ = [
    "AuditStorageInterface",
    "InMemoryAuditStorage",
    "JsonFileSplitStorage",
    "NotFoundError",
    "SplitStorageInterface",
    "StateImportError",
    "StorageError",
    "export_state",
    "generate_split_name",
    "import_state",
]

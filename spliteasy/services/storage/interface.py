"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Swap the JSON file for a database or browser storage later
2. Use in-memory storage for testing
3. Keep the calculation engine and flows decoupled from storage

The interface is intentionally small: a bounded list of recent splits,
plus an append-only audit trail.
"""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from spliteasy.models.audit import AuditEvent
from spliteasy.models.bill import BillState, StoredSplit


class SplitStorageInterface(ABC):
    """
    Abstract interface for the recent-splits store.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    async def load_recent_splits(self) -> list[StoredSplit]:
        """
        Load the recent splits.

        Entries that are unreadable or fail validation are skipped.

        Returns:
            Splits ordered newest first, at most the configured maximum
        """
        pass

    @abstractmethod
    async def save_split(
        self,
        state: BillState,
        existing_split_id: Optional[str] = None,
    ) -> Optional[str]:
        """
        Save a bill to the recent splits.

        Args:
            state: The bill to save (a deep copy is stored)
            existing_split_id: Update this split instead of adding a new one.
                              If it no longer exists, a new split is added.

        Returns:
            The split ID, or None if the bill is incomplete and was not saved

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def get_split(self, split_id: str) -> Optional[BillState]:
        """
        Retrieve a saved bill by split ID.

        Returns:
            The bill if found, None otherwise
        """
        pass

    @abstractmethod
    async def delete_split(self, split_id: str) -> bool:
        """
        Delete a split by ID.

        Returns:
            True if a split was removed
        """
        pass

    @abstractmethod
    async def clear_splits(self) -> None:
        """Remove all recent splits."""
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a correlation ID (e.g., one calculate-and-save flow).

        Returns:
            List of related events in chronological order
        """
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class StateImportError(StorageError):
    """A bill could not be imported from its serialized form."""

    def __init__(self, message: str, errors: Optional[list[str]] = None):
        super().__init__(message)
        self.errors = errors or []

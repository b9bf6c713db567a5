"""
In-Memory Storage Implementations

Used by default for the audit trail and in tests.
"""

from uuid import UUID

from spliteasy.models.audit import AuditEvent
from spliteasy.services.storage.interface import AuditStorageInterface


class InMemoryAuditStorage(AuditStorageInterface):
    """
    Audit trail kept in memory for the lifetime of the process.

    Events are append-only.
    """

    def __init__(self):
        self._events: list[AuditEvent] = []

    async def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        return [e for e in self._events if e.correlation_id == correlation_id]

    async def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        return list(reversed(self._events))[:limit]

"""
Audit Logger

DESIGN DECISION: Every significant action on a split is logged.
This provides:
1. Traceability of every calculation and rounding correction
2. Debugging capability
3. History of saves, loads and imports

The audit logger:
- Is async so storage backends can do I/O
- Gracefully handles failures (doesn't crash the app if logging fails)
- Supports correlation IDs to trace related events
"""

from typing import Optional
from uuid import UUID, uuid4

from spliteasy.log import get_logger
from spliteasy.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from spliteasy.services.storage.interface import AuditStorageInterface


class AuditLogger:
    """
    Writes the audit trail of bill calculations and stored splits.

    Every event goes to the structlog stream; when an audit storage is
    given it is also appended there.
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        self._storage = storage
        self._logger = get_logger(__name__)

    async def log(self, event: AuditEvent) -> bool:
        """
        Record one event.

        Returns False only when the audit storage rejected the write.
        """
        log_dict = event.to_log_dict()

        log_method = {
            AuditSeverity.ERROR: self._logger.error,
            AuditSeverity.WARNING: self._logger.warning,
        }.get(event.severity, self._logger.info)
        log_method("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_validation_passed(
        self,
        warnings: list[str],
        correlation_id: Optional[UUID],
    ) -> None:
        """Log a bill that passed validation."""
        await self.log(AuditEventBuilder.validation_passed(
            warnings=warnings,
            correlation_id=correlation_id,
        ))

    async def log_validation_failed(
        self,
        issues: list[dict],
        correlation_id: Optional[UUID],
    ) -> None:
        """Log validation failure."""
        await self.log(AuditEventBuilder.validation_failed(
            issues=issues,
            correlation_id=correlation_id,
        ))

    async def log_calculation_completed(
        self,
        grand_total: str,
        share_count: int,
        pennies_adjusted: int,
        correlation_id: Optional[UUID],
    ) -> None:
        """Log a finished calculation."""
        await self.log(AuditEventBuilder.calculation_completed(
            grand_total=grand_total,
            share_count=share_count,
            pennies_adjusted=pennies_adjusted,
            correlation_id=correlation_id,
        ))

    async def log_split_saved(
        self,
        split_id: str,
        name: str,
        correlation_id: Optional[UUID],
    ) -> None:
        """Log split save."""
        await self.log(AuditEventBuilder.split_saved(
            split_id=split_id,
            name=name,
            correlation_id=correlation_id,
        ))

    async def log_split_save_skipped(
        self,
        warnings: list[str],
        correlation_id: Optional[UUID],
    ) -> None:
        """Log an incomplete bill that was not saved."""
        await self.log(AuditEventBuilder.split_save_skipped(
            warnings=warnings,
            correlation_id=correlation_id,
        ))

    async def log_split_loaded(
        self,
        split_id: str,
        correlation_id: Optional[UUID],
    ) -> None:
        """Log split load."""
        await self.log(AuditEventBuilder.split_loaded(
            split_id=split_id,
            correlation_id=correlation_id,
        ))

    async def log_split_deleted(
        self,
        split_id: str,
        correlation_id: Optional[UUID],
    ) -> None:
        """Log split deletion."""
        await self.log(AuditEventBuilder.split_deleted(
            split_id=split_id,
            correlation_id=correlation_id,
        ))

    async def log_splits_cleared(
        self,
        correlation_id: Optional[UUID],
    ) -> None:
        """Log clearing of all recent splits."""
        await self.log(AuditEventBuilder.splits_cleared(
            correlation_id=correlation_id,
        ))

    async def log_state_imported(
        self,
        people_count: int,
        item_count: int,
        correlation_id: Optional[UUID],
    ) -> None:
        """Log a successful import."""
        await self.log(AuditEventBuilder.state_imported(
            people_count=people_count,
            item_count=item_count,
            correlation_id=correlation_id,
        ))

    async def log_state_import_failed(
        self,
        error_message: str,
        correlation_id: Optional[UUID],
    ) -> None:
        """Log a rejected import."""
        await self.log(AuditEventBuilder.state_import_failed(
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    async def log_storage_error(
        self,
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID],
    ) -> None:
        """Log storage failure."""
        await self.log(AuditEventBuilder.storage_error(
            operation=operation,
            error_message=error_message,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a user action (e.g. "calculate and save").
    Pass it through all subsequent operations.
    """
    return uuid4()

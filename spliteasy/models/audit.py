"""
Audit Models for SplitEasy

Every significant action on a split is logged for audit purposes:
1. Which bills failed validation and why
2. What each calculation produced, including penny corrections
3. When splits were saved, loaded, deleted or imported

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Validation
    STATE_VALIDATION_PASSED = "state_validation_passed"
    STATE_VALIDATION_FAILED = "state_validation_failed"

    # Calculation
    CALCULATION_COMPLETED = "calculation_completed"

    # Persistence
    SPLIT_SAVED = "split_saved"
    SPLIT_SAVE_SKIPPED = "split_save_skipped"
    SPLIT_LOADED = "split_loaded"
    SPLIT_DELETED = "split_deleted"
    SPLITS_CLEARED = "splits_cleared"

    # Import / export
    STATE_IMPORTED = "state_imported"
    STATE_IMPORT_FAILED = "state_import_failed"

    # Storage
    STORAGE_ERROR = "storage_error"


class AuditSeverity(str, Enum):
    """How loudly an audit event is logged."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    One entry in the audit trail of a split.

    Events that belong to the same user action (validate, calculate,
    save) share a correlation_id.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="UTC time the event was recorded"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Subject: a bill being calculated or a stored split
    entity_type: Optional[str] = Field(
        default=None,
        description="'bill' or 'split'"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="Split ID, when the event concerns a stored split"
    )

    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., validate + calculate + save)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="One-line summary for humans"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Structured payload, e.g. validation issues"
    )

    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """JSON-safe keyword arguments for a structlog call."""
        return self.model_dump(mode="json")


class AuditEventBuilder:
    """
    Factory methods, one per AuditEventType.

    Usage:
        event = AuditEventBuilder.split_saved(split_id, name, correlation_id)
        event = AuditEventBuilder.calculation_completed(...)
    """

    @staticmethod
    def validation_passed(
        warnings: list[str],
        correlation_id: Optional[UUID],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_VALIDATION_PASSED,
            entity_type="bill",
            correlation_id=correlation_id,
            description="Bill state passed validation",
            details={
                "completeness_warnings": warnings,
            },
        )

    @staticmethod
    def validation_failed(
        issues: list[dict],
        correlation_id: Optional[UUID],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="bill",
            correlation_id=correlation_id,
            description=f"Bill state validation failed with {len(issues)} issues",
            details={
                "issues": issues,
            },
        )

    @staticmethod
    def calculation_completed(
        grand_total: str,
        share_count: int,
        pennies_adjusted: int,
        correlation_id: Optional[UUID],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CALCULATION_COMPLETED,
            entity_type="bill",
            correlation_id=correlation_id,
            description=f"Split calculated: ${grand_total} across {share_count} shares",
            details={
                "grand_total": grand_total,
                "share_count": share_count,
                "pennies_adjusted": pennies_adjusted,
            },
        )

    @staticmethod
    def split_saved(
        split_id: str,
        name: str,
        correlation_id: Optional[UUID],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SPLIT_SAVED,
            entity_type="split",
            entity_id=split_id,
            correlation_id=correlation_id,
            description=f"Split saved: {name}",
            details={
                "name": name,
            },
        )

    @staticmethod
    def split_save_skipped(
        warnings: list[str],
        correlation_id: Optional[UUID],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SPLIT_SAVE_SKIPPED,
            severity=AuditSeverity.WARNING,
            entity_type="split",
            correlation_id=correlation_id,
            description="Split not saved because the bill is incomplete",
            details={
                "warnings": warnings,
            },
        )

    @staticmethod
    def split_loaded(
        split_id: str,
        correlation_id: Optional[UUID],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SPLIT_LOADED,
            entity_type="split",
            entity_id=split_id,
            correlation_id=correlation_id,
            description="Split loaded from recent splits",
        )

    @staticmethod
    def split_deleted(
        split_id: str,
        correlation_id: Optional[UUID],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SPLIT_DELETED,
            entity_type="split",
            entity_id=split_id,
            correlation_id=correlation_id,
            description="Split deleted",
        )

    @staticmethod
    def splits_cleared(
        correlation_id: Optional[UUID],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SPLITS_CLEARED,
            entity_type="split",
            correlation_id=correlation_id,
            description="All recent splits cleared",
        )

    @staticmethod
    def state_imported(
        people_count: int,
        item_count: int,
        correlation_id: Optional[UUID],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_IMPORTED,
            entity_type="bill",
            correlation_id=correlation_id,
            description=f"Bill imported with {people_count} people and {item_count} items",
            details={
                "people_count": people_count,
                "item_count": item_count,
            },
        )

    @staticmethod
    def state_import_failed(
        error_message: str,
        correlation_id: Optional[UUID],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_IMPORT_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="bill",
            correlation_id=correlation_id,
            description="Bill import rejected",
            error_message=error_message,
        )

    @staticmethod
    def storage_error(
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"Storage error during {operation}",
            error_message=error_message,
            details={
                "operation": operation,
            },
            correlation_id=correlation_id,
        )


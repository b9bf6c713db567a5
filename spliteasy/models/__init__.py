"""
Data Models Package

This package contains all Pydantic models used in SplitEasy.
All data flowing through the system must conform to these schemas.
"""

from spliteasy.models.bill import (
    BillState,
    BillTotals,
    CompletenessResult,
    Item,
    Person,
    PersonItemShare,
    PersonTotal,
    SplitwiseOutput,
    SplitwiseShare,
    StoredSplit,
    ValidationIssue,
    ValidationResult,
)
from spliteasy.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Bill models
    "BillState",
    "BillTotals",
    "CompletenessResult",
    "Item",
    "Person",
    "PersonItemShare",
    "PersonTotal",
    "SplitwiseOutput",
    "SplitwiseShare",
    "StoredSplit",
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]

"""Bill state validation package."""

from spliteasy.validation.validator import (
    BillStateValidator,
    is_state_complete,
    validate_bill_state,
)

__all__ = ["BillStateValidator", "is_state_complete", "validate_bill_state"]

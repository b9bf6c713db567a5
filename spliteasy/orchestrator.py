"""
Main Orchestrator for SplitEasy

Ties the components together into the flows a UI calls:
1. Calculate (raw bill -> validate -> compute -> reconcile -> export)
2. Recent splits (save / load / delete / clear)
3. Import (JSON -> validate -> bill)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing reaches the calculation engine without passing validation
- Incomplete bills are calculated but never saved
- Every step is audited
"""

from decimal import Decimal
from typing import Any, Mapping, Optional, Union
from uuid import UUID

from pydantic import BaseModel, Field

from spliteasy.audit import AuditLogger, create_correlation_id
from spliteasy.calculation import (
    CENT,
    build_splitwise_shares,
    compute_totals,
    format_money,
    generate_splitwise_text,
    penny_fix,
)
from spliteasy.log import configure_logging
from spliteasy.models.bill import (
    BillState,
    BillTotals,
    SplitwiseOutput,
    StoredSplit,
    ValidationResult,
)
from spliteasy.services.storage import (
    InMemoryAuditStorage,
    JsonFileSplitStorage,
    NotFoundError,
    SplitStorageInterface,
    StateImportError,
    StorageError,
    generate_split_name,
    import_state,
)
from spliteasy.validation import BillStateValidator


class InvalidBillStateError(ValueError):
    """The bill failed validation and cannot be calculated."""

    def __init__(self, result: ValidationResult):
        super().__init__("; ".join(result.errors) or "Invalid bill state")
        self.result = result


class SplitResult(BaseModel):
    """Everything a UI needs to show a calculated split."""

    state: BillState
    totals: BillTotals
    final_amounts: dict[str, Decimal] = Field(
        default_factory=dict,
        description="Penny-reconciled amount per person ID"
    )
    splitwise: SplitwiseOutput
    splitwise_text: str
    pennies_adjusted: int = 0
    is_complete: bool
    warnings: list[str] = Field(default_factory=list)


class SplitFlow:
    """
    Orchestrates calculation and persistence of splits.

    Flow:
    1. Validate -> reject malformed bills with reasons
    2. Compute -> totals, penny fix, Splitwise shares
    3. Save -> only complete bills are stored
    """

    def __init__(
        self,
        validator: Optional[BillStateValidator] = None,
        split_storage: Optional[SplitStorageInterface] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._validator = validator or BillStateValidator()
        self._split_storage = split_storage
        self._audit_logger = audit_logger

    async def calculate(
        self,
        state_data: Union[BillState, Mapping[str, Any]],
        correlation_id: Optional[UUID] = None,
    ) -> SplitResult:
        """
        Validate and calculate a bill.

        Incomplete bills (zero prices, items without consumers) are still
        calculated; the result carries the completeness warnings.

        Raises:
            InvalidBillStateError: If the bill fails validation
        """
        correlation_id = correlation_id or create_correlation_id()

        validation = self._validator.validate(state_data)
        if not validation.is_valid:
            if self._audit_logger:
                issues = [
                    {"field": i.field, "type": i.issue_type, "message": i.message}
                    for i in validation.issues
                ]
                await self._audit_logger.log_validation_failed(
                    issues=issues,
                    correlation_id=correlation_id,
                )
            raise InvalidBillStateError(validation)

        state = validation.state
        completeness = self._validator.check_completeness(state)

        if self._audit_logger:
            await self._audit_logger.log_validation_passed(
                warnings=completeness.warnings,
                correlation_id=correlation_id,
            )

        totals = compute_totals(state)
        final_amounts = penny_fix(totals.per_person_unrounded, totals.grand_total)
        splitwise = build_splitwise_shares(state, totals, final_amounts)

        pennies_adjusted = int(sum(
            abs(final_amounts[person_id] - rounded)
            for person_id, rounded in totals.per_person_rounded.items()
        ) / CENT)

        if self._audit_logger:
            await self._audit_logger.log_calculation_completed(
                grand_total=format_money(totals.grand_total),
                share_count=len(splitwise.shares),
                pennies_adjusted=pennies_adjusted,
                correlation_id=correlation_id,
            )

        return SplitResult(
            state=state,
            totals=totals,
            final_amounts=final_amounts,
            splitwise=splitwise,
            splitwise_text=generate_splitwise_text(splitwise),
            pennies_adjusted=pennies_adjusted,
            is_complete=completeness.is_complete,
            warnings=completeness.warnings,
        )

    def _require_storage(self) -> SplitStorageInterface:
        if self._split_storage is None:
            raise StorageError("Split storage is not configured")
        return self._split_storage

    async def save(
        self,
        state: BillState,
        existing_split_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> Optional[str]:
        """
        Save a bill to the recent splits.

        Returns:
            The split ID, or None if the bill is incomplete
        """
        correlation_id = correlation_id or create_correlation_id()
        storage = self._require_storage()

        completeness = self._validator.check_completeness(state)
        if not completeness.is_complete:
            if self._audit_logger:
                await self._audit_logger.log_split_save_skipped(
                    warnings=completeness.warnings,
                    correlation_id=correlation_id,
                )
            return None

        try:
            split_id = await storage.save_split(state, existing_split_id)
        except StorageError as e:
            if self._audit_logger:
                await self._audit_logger.log_storage_error(
                    operation="save",
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            raise

        if split_id and self._audit_logger:
            await self._audit_logger.log_split_saved(
                split_id=split_id,
                name=generate_split_name(state),
                correlation_id=correlation_id,
            )

        return split_id

    async def load(
        self,
        split_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> BillState:
        """
        Load a saved bill.

        Raises:
            NotFoundError: If no split has this ID
        """
        correlation_id = correlation_id or create_correlation_id()
        storage = self._require_storage()

        state = await storage.get_split(split_id)
        if state is None:
            raise NotFoundError(f"Split not found: {split_id}")

        if self._audit_logger:
            await self._audit_logger.log_split_loaded(
                split_id=split_id,
                correlation_id=correlation_id,
            )

        return state

    async def delete(
        self,
        split_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        """Delete a saved split. Returns False if it did not exist."""
        correlation_id = correlation_id or create_correlation_id()
        storage = self._require_storage()

        deleted = await storage.delete_split(split_id)

        if deleted and self._audit_logger:
            await self._audit_logger.log_split_deleted(
                split_id=split_id,
                correlation_id=correlation_id,
            )

        return deleted

    async def clear(self, correlation_id: Optional[UUID] = None) -> None:
        """Remove all recent splits."""
        correlation_id = correlation_id or create_correlation_id()
        await self._require_storage().clear_splits()

        if self._audit_logger:
            await self._audit_logger.log_splits_cleared(correlation_id=correlation_id)

    async def recent_splits(self) -> list[StoredSplit]:
        """Recent splits, newest first."""
        return await self._require_storage().load_recent_splits()

    async def import_json(
        self,
        json_string: str,
        correlation_id: Optional[UUID] = None,
    ) -> BillState:
        """
        Import a bill from JSON.

        Raises:
            StateImportError: If the JSON is malformed or the bill is invalid
        """
        correlation_id = correlation_id or create_correlation_id()

        try:
            state = import_state(json_string, self._validator)
        except StateImportError as e:
            if self._audit_logger:
                await self._audit_logger.log_state_import_failed(
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            raise

        if self._audit_logger:
            await self._audit_logger.log_state_imported(
                people_count=len(state.people),
                item_count=len(state.items),
                correlation_id=correlation_id,
            )

        return state


def create_split_flow(
    use_storage: bool = True,
    storage_path: Optional[str] = None,
) -> SplitFlow:
    """
    Factory function to create the application flow.

    Args:
        use_storage: Whether to enable the recent-splits file.
                    Set to False for calculation-only use.
        storage_path: Override the configured storage file.
    """
    configure_logging()

    split_storage = JsonFileSplitStorage(storage_path) if use_storage else None
    audit_logger = AuditLogger(InMemoryAuditStorage())

    return SplitFlow(
        split_storage=split_storage,
        audit_logger=audit_logger,
    )

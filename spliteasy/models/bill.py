"""
Core Data Models for SplitEasy

These models define the schemas for everything flowing through the system:
1. The editable bill (people, items, payer, tax)
2. The derived results of a calculation (never persisted on their own)
3. Validation results
4. Stored splits

DESIGN DECISION: Money is Decimal everywhere. Pydantic normalizes
int/str/float input to Decimal at the boundary, so the calculation
engine never sees a float or a half-typed string price.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# BILL STATE - what the user edits
# =============================================================================

class Person(BaseModel):
    """
    Someone on the bill.

    An external person is a payer who fronted the money but did not
    consume anything (e.g. a friend who paid at the counter).
    """

    id: str = Field(
        ...,
        min_length=1,
        description="Opaque person identifier"
    )
    name: str = Field(
        ...,
        description="Display name"
    )
    is_external: bool = Field(
        default=False,
        description="Payer who is not part of the consuming group"
    )


class Item(BaseModel):
    """
    A priced line on the bill.

    consumer_ids may be empty while the bill is being edited; such an
    item contributes nothing to anyone's share.
    """

    id: str = Field(
        ...,
        min_length=1,
        description="Opaque item identifier"
    )
    name: str = Field(
        ...,
        description="Item name"
    )
    price: Decimal = Field(
        ...,
        ge=0,
        description="Pre-tax price"
    )
    consumer_ids: list[str] = Field(
        default_factory=list,
        description="IDs of the people sharing this item"
    )


class BillState(BaseModel):
    """
    The whole bill as edited by the user.

    Invariants (checked by the validator, not by this model):
    - payer_id resolves to a person
    - every consumer id resolves to a person
    """

    people: list[Person] = Field(default_factory=list)
    payer_id: str = Field(
        ...,
        min_length=1,
        description="ID of the person who paid the bill"
    )
    items: list[Item] = Field(default_factory=list)
    overall_tax: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Tax for the whole bill, split proportionally to price"
    )

    def find_person(self, person_id: str) -> Optional[Person]:
        """Look up a person by ID."""
        return next((p for p in self.people if p.id == person_id), None)

    def find_item(self, item_id: str) -> Optional[Item]:
        """Look up an item by ID."""
        return next((i for i in self.items if i.id == item_id), None)

    @property
    def regular_people(self) -> list[Person]:
        """People who are part of the consuming group."""
        return [p for p in self.people if not p.is_external]


# =============================================================================
# DERIVED RESULTS - recomputed on every query
# =============================================================================

class PersonItemShare(BaseModel):
    """One item's contribution to a person's total."""

    id: str
    name: str
    share: Decimal


class PersonTotal(BaseModel):
    """A person's rounded total with an itemized breakdown."""

    id: str
    name: str
    total: Decimal = Decimal("0")
    items: list[PersonItemShare] = Field(default_factory=list)


class BillTotals(BaseModel):
    """
    Everything the totals computer derives from a bill.

    The per-person mappings keep the order of state.people, which
    the penny reconciler relies on to break ties.
    """

    subtotal: Decimal
    grand_total: Decimal
    per_person_unrounded: dict[str, Decimal] = Field(default_factory=dict)
    per_person_rounded: dict[str, Decimal] = Field(default_factory=dict)
    person_totals: list[PersonTotal] = Field(default_factory=list)


class SplitwiseShare(BaseModel):
    """A single person's amount to enter in Splitwise."""

    name: str
    amount: Decimal


class SplitwiseOutput(BaseModel):
    """Everything needed to enter the bill in Splitwise."""

    shares: list[SplitwiseShare] = Field(default_factory=list)
    grand_total: Decimal
    payer_name: str


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Location of the issue (e.g. 'items.0.price')"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value', 'unknown_reference')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )


class ValidationResult(BaseModel):
    """
    Result of the two-stage bill validation.

    Stage 1: Schema validation (types, required fields, non-negative money)
    Stage 2: Semantic validation (references, names, duplicate ids)
    """

    validated_at: datetime = Field(
        default_factory=datetime.utcnow
    )

    schema_valid: bool
    semantic_valid: bool
    is_valid: bool

    issues: list[ValidationIssue] = Field(default_factory=list)

    # The parsed state, only present when schema validation passed
    state: Optional[BillState] = None

    @property
    def errors(self) -> list[str]:
        """Messages of all error-level issues."""
        return [issue.message for issue in self.issues if issue.severity == "error"]

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")


class CompletenessResult(BaseModel):
    """
    Whether a structurally valid bill is ready for final calculation.

    Incomplete bills can still be edited and calculated; the warnings
    explain what is missing.
    """

    is_complete: bool
    warnings: list[str] = Field(default_factory=list)


# =============================================================================
# STORAGE MODELS
# =============================================================================

class StoredSplit(BaseModel):
    """A saved bill in the recent-splits list."""

    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Split identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the split was last saved (UTC)"
    )
    state: BillState
    name: str = Field(
        ...,
        min_length=1,
        description="Auto-generated description of the split"
    )

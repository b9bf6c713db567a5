"""
Two-Stage Bill Validation

STAGE 1 - SCHEMA VALIDATION:
- People and items are lists, payer ID present
- Prices and tax are numbers and not negative
- This catches malformed imports and half-edited UI state

STAGE 2 - SEMANTIC VALIDATION:
- Payer resolves to a person
- Every consumer resolves to a person
- Names are not blank, IDs are unique

A bill that passes both stages is safe to hand to the calculation engine.
Completeness (zero prices, items nobody consumes) is reported separately
as warnings: incomplete bills are still valid while being edited.

IMPORTANT: Validation NEVER silently fixes issues. It reports them.
"""

from collections import Counter
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError

from spliteasy.config import get_settings
from spliteasy.models.bill import (
    BillState,
    CompletenessResult,
    ValidationIssue,
    ValidationResult,
)


BillStateInput = Union[BillState, Mapping[str, Any]]


def _error(field: str, issue_type: str, message: str) -> ValidationIssue:
    return ValidationIssue(
        field=field,
        issue_type=issue_type,
        message=message,
        severity="error",
    )


def _raw_entry(data: Mapping[str, Any], key: str, index: int) -> Mapping[str, Any]:
    """The raw people/items entry at index, or {} if it isn't a mapping."""
    entries = data.get(key)
    if isinstance(entries, list) and 0 <= index < len(entries):
        entry = entries[index]
        if isinstance(entry, Mapping):
            return entry
    return {}


class BillStateValidator:
    """
    Validates a bill state through a two-stage pipeline.

    Accepts either a BillState or the raw mapping it would be built from
    (e.g. parsed JSON), so malformed input becomes a list of reasons
    instead of an exception.
    """

    def __init__(self):
        self._settings = get_settings().app

    def _issue_from_pydantic(
        self,
        error: dict,
        data: Mapping[str, Any],
    ) -> ValidationIssue:
        """Translate one pydantic error into a user-facing issue."""
        loc = error["loc"]
        field = ".".join(str(part) for part in loc) or "state"
        issue_type = "missing" if error["type"] == "missing" else "invalid_value"

        if loc == ("people",):
            return _error(field, issue_type, "People must be a list")
        if loc == ("items",):
            return _error(field, issue_type, "Items must be a list")
        if loc == ("payer_id",):
            return _error(field, issue_type, "Payer ID is required")
        if loc == ("overall_tax",):
            if error["type"] == "greater_than_equal":
                return _error(field, issue_type, "Tax cannot be negative")
            return _error(field, issue_type, "Overall tax must be a number")

        if len(loc) >= 2 and loc[0] == "people" and isinstance(loc[1], int):
            person = _raw_entry(data, "people", loc[1])
            attribute = loc[2] if len(loc) > 2 else None
            if attribute == "name":
                person_id = person.get("id") or "unknown"
                return _error(field, issue_type, f"Person with ID {person_id} has invalid name")
            if attribute == "id":
                return _error(field, issue_type, "All people must have valid IDs")
            return _error(field, issue_type, f"Person at position {loc[1] + 1} is malformed")

        if len(loc) >= 2 and loc[0] == "items" and isinstance(loc[1], int):
            item = _raw_entry(data, "items", loc[1])
            label = item.get("name") or "unknown"
            attribute = loc[2] if len(loc) > 2 else None
            if attribute == "price":
                return _error(field, issue_type, f'Item "{label}" has invalid price')
            if attribute == "consumer_ids":
                return _error(field, issue_type, f'Item "{label}" has invalid consumer list')
            if attribute == "name":
                return _error(field, issue_type, "All items must have valid names")
            if attribute == "id":
                return _error(field, issue_type, "All items must have valid IDs")
            return _error(field, issue_type, f"Item at position {loc[1] + 1} is malformed")

        return _error(field, issue_type, f"{field}: {error['msg']}")

    def _validate_schema(
        self,
        data: BillStateInput,
    ) -> tuple[Optional[BillState], list[ValidationIssue]]:
        """
        Stage 1: Schema validation.

        Returns: (parsed_state_or_None, list_of_issues)
        """
        if isinstance(data, BillState):
            return data, []

        if not isinstance(data, Mapping):
            return None, [_error("state", "invalid_structure", "Invalid state structure")]

        try:
            return BillState.model_validate(dict(data)), []
        except ValidationError as exc:
            issues = []
            seen = set()
            for error in exc.errors():
                issue = self._issue_from_pydantic(error, data)
                if issue.message not in seen:
                    seen.add(issue.message)
                    issues.append(issue)
            return None, issues

    def _validate_semantic(
        self,
        state: BillState,
    ) -> tuple[bool, list[ValidationIssue]]:
        """
        Stage 2: Semantic validation.

        Returns: (is_valid, list_of_issues)
        """
        issues = []
        person_ids = {person.id for person in state.people}

        for person_id, count in Counter(p.id for p in state.people).items():
            if count > 1:
                issues.append(_error("people", "duplicate_id", f"Duplicate person ID: {person_id}"))

        if state.payer_id not in person_ids:
            issues.append(_error(
                "payer_id",
                "unknown_reference",
                "Payer must be selected from people list",
            ))

        max_name = self._settings.max_person_name_length
        for index, person in enumerate(state.people):
            if not person.name.strip():
                issues.append(_error(
                    f"people.{index}.name",
                    "missing",
                    f"Person with ID {person.id} has invalid name",
                ))
            elif len(person.name.strip()) > max_name:
                issues.append(ValidationIssue(
                    field=f"people.{index}.name",
                    issue_type="too_long",
                    message=f'Name "{person.name.strip()}" is longer than {max_name} characters',
                    severity="warning",
                ))

        for item_id, count in Counter(i.id for i in state.items).items():
            if count > 1:
                issues.append(_error("items", "duplicate_id", f"Duplicate item ID: {item_id}"))

        for index, item in enumerate(state.items):
            label = item.name or "unknown"
            if not item.name.strip():
                issues.append(_error(
                    f"items.{index}.name",
                    "missing",
                    "All items must have valid names",
                ))

            for consumer_id, count in Counter(item.consumer_ids).items():
                if consumer_id not in person_ids:
                    issues.append(_error(
                        f"items.{index}.consumer_ids",
                        "unknown_reference",
                        f'Item "{label}" has invalid consumer ID: {consumer_id}',
                    ))
                elif count > 1:
                    issues.append(_error(
                        f"items.{index}.consumer_ids",
                        "duplicate_id",
                        f'Item "{label}" lists consumer {consumer_id} more than once',
                    ))

        is_valid = not any(issue.severity == "error" for issue in issues)

        return is_valid, issues

    def validate(self, data: BillStateInput) -> ValidationResult:
        """
        Run full two-stage validation.

        Args:
            data: A BillState or a raw mapping (e.g. parsed JSON)

        Returns:
            ValidationResult; result.state holds the parsed BillState
            whenever the schema stage passed.
        """
        state, all_issues = self._validate_schema(data)
        schema_valid = state is not None

        # Only run stage 2 if stage 1 passes
        semantic_valid = False
        if schema_valid:
            semantic_valid, semantic_issues = self._validate_semantic(state)
            all_issues.extend(semantic_issues)

        return ValidationResult(
            schema_valid=schema_valid,
            semantic_valid=semantic_valid,
            is_valid=schema_valid and semantic_valid,
            issues=all_issues,
            state=state,
        )

    def check_completeness(self, data: BillStateInput) -> CompletenessResult:
        """
        Check whether a bill is ready for final calculation.

        Stricter than validate(): every item needs a price and at least
        one consumer, and there must be someone to split with.
        """
        result = self.validate(data)
        if not result.is_valid:
            return CompletenessResult(is_complete=False, warnings=result.errors)

        state = result.state
        warnings = []

        if not state.regular_people:
            warnings.append("At least one person is required")

        if not state.items:
            warnings.append("At least one item is required")

        for item in state.items:
            if item.price == 0:
                warnings.append(f'Item "{item.name}" needs a price')

            if not item.consumer_ids:
                warnings.append(f'Item "{item.name}" needs at least one consumer')

        return CompletenessResult(
            is_complete=not warnings,
            warnings=warnings,
        )

    def summarize(self, result: ValidationResult) -> str:
        """
        Generate a user-friendly summary of validation results.
        """
        warnings = [i.message for i in result.issues if i.severity == "warning"]

        if result.is_valid and not warnings:
            return "✅ All checks passed!"

        lines = []

        if result.has_errors:
            lines.append("❌ This bill can't be calculated yet:")
            for message in result.errors:
                lines.append(f"   • {message}")

        if warnings:
            if lines:
                lines.append("")
            lines.append("⚠️ Please check the following:")
            for message in warnings:
                lines.append(f"   • {message}")

        return "\n".join(lines)


def validate_bill_state(data: BillStateInput) -> ValidationResult:
    """Validate a bill state with the default validator."""
    return BillStateValidator().validate(data)


def is_state_complete(data: BillStateInput) -> CompletenessResult:
    """Check bill completeness with the default validator."""
    return BillStateValidator().check_completeness(data)

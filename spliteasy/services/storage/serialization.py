"""
Bill import/export and split naming.

Bills are exchanged as indented JSON. Imports go through the full
validator, so a file that was hand-edited into an impossible state is
rejected with the same reasons the UI would show.
"""

import json
from datetime import date
from typing import Optional

from spliteasy.calculation.rounding import ZERO, format_money
from spliteasy.models.bill import BillState
from spliteasy.services.storage.interface import StateImportError
from spliteasy.validation import BillStateValidator


EMPTY_SPLIT_NAME = "Empty Split"


def generate_split_name(state: BillState, today: Optional[date] = None) -> str:
    """
    Describe a split for the recent-splits list.

    e.g. "3 people, 4 items, $42.10 - 2024-12-01"
    """
    people_count = len(state.regular_people)
    item_count = len(state.items)

    if people_count == 0 or item_count == 0:
        return EMPTY_SPLIT_NAME

    total = sum((item.price for item in state.items), ZERO) + state.overall_tax
    today = today or date.today()

    return f"{people_count} people, {item_count} items, ${format_money(total)} - {today.isoformat()}"


def export_state(state: BillState) -> str:
    """Serialize a bill as indented JSON."""
    return state.model_dump_json(indent=2)


def import_state(
    json_string: str,
    validator: Optional[BillStateValidator] = None,
) -> BillState:
    """
    Parse and validate a bill exported with export_state.

    Raises:
        StateImportError: If the text is not JSON or the bill is invalid
    """
    try:
        data = json.loads(json_string)
    except json.JSONDecodeError as e:
        raise StateImportError(f"Failed to import state: {e}") from e

    result = (validator or BillStateValidator()).validate(data)
    if not result.is_valid:
        raise StateImportError(
            f"Failed to import state: Invalid state: {', '.join(result.errors)}",
            errors=result.errors,
        )

    return result.state

"""
Bill Editing Operations

Every operation takes a BillState and returns a new one; the input is
never mutated. Rule violations raise BillEditError with a message that
can be shown to the user as-is.

This is also where raw user input (price strings, tax strings) is
parsed into Decimal, so the calculation engine only ever sees clean
numbers.
"""

from decimal import Decimal, InvalidOperation
from typing import Optional, Union
from uuid import uuid4

from spliteasy.calculation.rounding import ZERO, round2
from spliteasy.config import get_settings
from spliteasy.models.bill import BillState, Item, Person


EXTERNAL_PAYER = "external"
EXTERNAL_PAYER_NAME = "External Payer"

AmountInput = Union[str, int, float, Decimal]


class BillEditError(ValueError):
    """An edit was rejected. The message is user-facing."""
    pass


def generate_id() -> str:
    """Generate an opaque identifier for people, items and splits."""
    return uuid4().hex


def parse_amount(value: AmountInput) -> Decimal:
    """
    Parse a user-entered price or tax amount.

    Accepts strings and numbers, rounds to cents. Blanks, garbage,
    infinities, negatives and amounts above the configured maximum are
    rejected.
    """
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise BillEditError("Please enter a price")
        try:
            amount = Decimal(text)
        except InvalidOperation:
            raise BillEditError("Please enter a valid price")
    elif isinstance(value, bool):
        raise BillEditError("Please enter a valid price")
    else:
        amount = Decimal(repr(value)) if isinstance(value, float) else Decimal(value)

    if not amount.is_finite() or not 0 <= amount <= get_settings().app.max_amount:
        raise BillEditError("Please enter a valid price")

    return round2(amount)


def _checked_name(
    name: str,
    existing: list[str],
    max_length: int,
    empty_message: str,
    duplicate_message: str,
) -> str:
    trimmed = name.strip()
    if not trimmed:
        raise BillEditError(empty_message)
    if len(trimmed) > max_length:
        raise BillEditError(f"Name is too long (max {max_length} characters)")
    if trimmed.lower() in (other.strip().lower() for other in existing):
        raise BillEditError(duplicate_message)
    return trimmed


def _replace(state: BillState, **changes) -> BillState:
    """Copy of state with changes applied, sharing nothing with the original."""
    return state.model_copy(update=changes).model_copy(deep=True)


def _require_person(state: BillState, person_id: str) -> Person:
    person = state.find_person(person_id)
    if person is None:
        raise BillEditError(f"Unknown person: {person_id}")
    return person


def _require_item(state: BillState, item_id: str) -> Item:
    item = state.find_item(item_id)
    if item is None:
        raise BillEditError(f"Unknown item: {item_id}")
    return item


# =============================================================================
# PEOPLE
# =============================================================================

def add_person(state: BillState, name: str) -> BillState:
    """Add a regular person at the end of the people list."""
    trimmed = _checked_name(
        name,
        [p.name for p in state.people],
        get_settings().app.max_person_name_length,
        "Please enter a name",
        "This name already exists",
    )
    person = Person(id=generate_id(), name=trimmed)
    return _replace(state, people=[*state.people, person])


def rename_person(state: BillState, person_id: str, name: str) -> BillState:
    """Rename a person; names stay unique regardless of case."""
    _require_person(state, person_id)
    trimmed = _checked_name(
        name,
        [p.name for p in state.people if p.id != person_id],
        get_settings().app.max_person_name_length,
        "Name cannot be empty",
        "This name already exists",
    )
    people = [
        p.model_copy(update={"name": trimmed}) if p.id == person_id else p
        for p in state.people
    ]
    return _replace(state, people=people)


def remove_person(state: BillState, person_id: str) -> BillState:
    """
    Remove a person.

    The payer and anyone who consumes an item must stay.
    """
    _require_person(state, person_id)

    if person_id == state.payer_id:
        raise BillEditError("Can't remove the person who paid the bill")

    if any(person_id in item.consumer_ids for item in state.items):
        raise BillEditError("Can't remove a person who has items assigned to them")

    people = [p for p in state.people if p.id != person_id]
    return _replace(state, people=people)


def set_payer(state: BillState, payer_id: str) -> BillState:
    """
    Choose who paid the bill.

    EXTERNAL_PAYER selects the external payer, creating one if needed.
    Choosing a regular person drops any external payer from the bill.
    """
    if payer_id == EXTERNAL_PAYER:
        external = next((p for p in state.people if p.is_external), None)
        if external is not None:
            return _replace(state, payer_id=external.id)

        external = Person(id=generate_id(), name=EXTERNAL_PAYER_NAME, is_external=True)
        return _replace(state, people=[*state.people, external], payer_id=external.id)

    if not payer_id:
        raise BillEditError("Please select who paid the bill")

    person = _require_person(state, payer_id)
    if person.is_external:
        return _replace(state, payer_id=payer_id)

    people = [p for p in state.people if not p.is_external]
    return _replace(state, people=people, payer_id=payer_id)


# =============================================================================
# ITEMS
# =============================================================================

def add_item(state: BillState, name: str, price: AmountInput) -> BillState:
    """
    Add an item at the top of the list, with no consumers yet.

    The price is required and must be greater than zero.
    """
    if not state.regular_people:
        raise BillEditError("Add people first before adding items")

    trimmed = _checked_name(
        name,
        [i.name for i in state.items],
        get_settings().app.max_item_name_length,
        "Please enter an item name",
        "This item already exists",
    )

    amount = parse_amount(price)
    if amount == 0:
        raise BillEditError("Price must be greater than 0")

    item = Item(id=generate_id(), name=trimmed, price=amount)
    return _replace(state, items=[item, *state.items])


def update_item(
    state: BillState,
    item_id: str,
    name: Optional[str] = None,
    price: Optional[AmountInput] = None,
) -> BillState:
    """
    Rename an item and/or change its price.

    A blank price resets the item to 0 (an incomplete item).
    """
    item = _require_item(state, item_id)
    updates = {}

    if name is not None:
        updates["name"] = _checked_name(
            name,
            [i.name for i in state.items if i.id != item_id],
            get_settings().app.max_item_name_length,
            "Item name cannot be empty",
            "This item name already exists",
        )

    if price is not None:
        if isinstance(price, str) and not price.strip():
            updates["price"] = ZERO
        else:
            updates["price"] = parse_amount(price)

    items = [
        i.model_copy(update=updates) if i.id == item.id else i
        for i in state.items
    ]
    return _replace(state, items=items)


def remove_item(state: BillState, item_id: str) -> BillState:
    """Remove an item."""
    _require_item(state, item_id)
    items = [i for i in state.items if i.id != item_id]
    return _replace(state, items=items)


def toggle_consumer(state: BillState, item_id: str, person_id: str) -> BillState:
    """Add the person to the item's consumers, or remove them if already there."""
    item = _require_item(state, item_id)
    _require_person(state, person_id)

    if person_id in item.consumer_ids:
        consumer_ids = [c for c in item.consumer_ids if c != person_id]
    else:
        consumer_ids = [*item.consumer_ids, person_id]

    items = [
        i.model_copy(update={"consumer_ids": consumer_ids}) if i.id == item_id else i
        for i in state.items
    ]
    return _replace(state, items=items)


def set_overall_tax(state: BillState, value: AmountInput) -> BillState:
    """Set the bill's tax. A blank value means no tax."""
    if isinstance(value, str) and not value.strip():
        tax = ZERO
    else:
        try:
            tax = parse_amount(value)
        except BillEditError:
            raise BillEditError("Please enter a valid tax amount")

    return _replace(state, overall_tax=tax)


# =============================================================================
# STARTING POINTS
# =============================================================================

def create_empty_state() -> BillState:
    """A blank bill, paid by an external payer."""
    external = Person(id=generate_id(), name=EXTERNAL_PAYER_NAME, is_external=True)
    return BillState(people=[external], payer_id=external.id, items=[], overall_tax=ZERO)


def create_sample_state() -> BillState:
    """A small grocery bill to try things out with."""
    alice, bob, cara, dan = (
        Person(id=generate_id(), name=name)
        for name in ("Alice", "Bob", "Cara", "Dan (payer)")
    )

    return BillState(
        people=[alice, bob, cara, dan],
        payer_id=dan.id,
        overall_tax=Decimal("3.72"),
        items=[
            Item(
                id=generate_id(),
                name="Rice",
                price=Decimal("10.00"),
                consumer_ids=[alice.id, bob.id, cara.id, dan.id],
            ),
            Item(
                id=generate_id(),
                name="Milk",
                price=Decimal("4.50"),
                consumer_ids=[bob.id, dan.id],
            ),
            Item(
                id=generate_id(),
                name="Eggs",
                price=Decimal("6.00"),
                consumer_ids=[alice.id],
            ),
        ],
    )

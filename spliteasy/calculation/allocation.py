"""
Tax allocation and per-person totals.

The bill's single tax figure is spread over the items in proportion to
their pre-tax price, then each item's taxed cost is split evenly between
its consumers. Running totals are kept at 4 decimals; only the penny
reconciler turns them into exact cents.
"""

from decimal import Decimal
from typing import Sequence

from spliteasy.calculation.rounding import ZERO, Number, round2, round4, to_decimal
from spliteasy.models.bill import (
    BillState,
    BillTotals,
    Item,
    PersonItemShare,
    PersonTotal,
)


def allocate_item_taxes(items: Sequence[Item], overall_tax: Number) -> list[Decimal]:
    """
    Allocate the overall tax to each item by pre-tax price.

    Returns one tax amount per item, aligned by position. The amounts are
    rounded to 4 decimals and are not renormalized, so their sum can be
    off from overall_tax in the 4th decimal.
    """
    if not items:
        return []

    subtotal = sum((item.price for item in items), ZERO)

    # No basis for a proportional split
    if subtotal == 0:
        return [ZERO for _ in items]

    tax = to_decimal(overall_tax)
    return [round4(tax * item.price / subtotal) for item in items]


def compute_totals(state: BillState) -> BillTotals:
    """
    Calculate per-person totals before and after rounding.

    Everyone in state.people gets an entry, including people who consumed
    nothing (total 0). Items without consumers are left unallocated.
    """
    raw_subtotal = sum((item.price for item in state.items), ZERO)
    grand_total = round2(raw_subtotal + state.overall_tax)

    item_taxes = allocate_item_taxes(state.items, state.overall_tax)

    per_person_unrounded: dict[str, Decimal] = {}
    person_totals: dict[str, PersonTotal] = {}
    for person in state.people:
        per_person_unrounded[person.id] = ZERO
        person_totals[person.id] = PersonTotal(id=person.id, name=person.name)

    for item, item_tax in zip(state.items, item_taxes):
        if not item.consumer_ids:
            continue

        item_total = item.price + item_tax
        share_per_consumer = item_total / len(item.consumer_ids)

        for consumer_id in item.consumer_ids:
            per_person_unrounded[consumer_id] = round4(
                per_person_unrounded.get(consumer_id, ZERO) + share_per_consumer
            )

            breakdown = person_totals.get(consumer_id)
            if breakdown is not None:
                breakdown.items.append(PersonItemShare(
                    id=item.id,
                    name=item.name,
                    share=round2(share_per_consumer),
                ))

    per_person_rounded = {
        person_id: round2(total)
        for person_id, total in per_person_unrounded.items()
    }

    for person_id, breakdown in person_totals.items():
        breakdown.total = per_person_rounded[person_id]

    return BillTotals(
        subtotal=round2(raw_subtotal),
        grand_total=grand_total,
        per_person_unrounded=per_person_unrounded,
        per_person_rounded=per_person_rounded,
        person_totals=list(person_totals.values()),
    )

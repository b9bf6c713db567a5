"""
Penny reconciliation.

Rounding every person's share to cents independently can leave the
shares a cent or two away from the bill total. The reconciler hands the
missing (or surplus) cents to the people whose unrounded share had the
largest sub-cent remainder, so the shares always add up to the total.

Ties are broken by the order of the input mapping, which compute_totals
builds in the order of state.people.
"""

from decimal import ROUND_FLOOR, Decimal
from typing import Mapping, NamedTuple

from spliteasy.calculation.rounding import CENT, ZERO, Number, round2, to_decimal
from spliteasy.log import get_logger


logger = get_logger(__name__)


class _Remainder(NamedTuple):
    person_id: str
    rounded: Decimal
    fractional: Decimal


def _sub_cent_remainder(amount: Decimal) -> Decimal:
    floored = (amount * 100).to_integral_value(rounding=ROUND_FLOOR) / 100
    return abs(amount - floored)


def penny_fix(
    per_person_unrounded: Mapping[str, Decimal],
    grand_total: Number,
) -> dict[str, Decimal]:
    """
    Round each person's amount to cents so the amounts sum to grand_total.

    Returns a new mapping with the same keys, in the same order.
    """
    result = {
        person_id: round2(amount)
        for person_id, amount in per_person_unrounded.items()
    }

    naive_total = sum(result.values(), ZERO)
    discrepancy = round2(round2(grand_total) - naive_total)

    if abs(discrepancy) < CENT:
        return result

    remainders = [
        _Remainder(person_id, result[person_id], _sub_cent_remainder(to_decimal(amount)))
        for person_id, amount in per_person_unrounded.items()
    ]
    # list.sort is stable, so equal remainders keep their input order
    remainders.sort(key=lambda r: r.fractional, reverse=True)

    pennies_needed = int(discrepancy / CENT)
    adjustment = CENT if pennies_needed > 0 else -CENT

    for remainder in remainders[:abs(pennies_needed)]:
        result[remainder.person_id] = round2(remainder.rounded + adjustment)
        logger.debug(
            "penny_adjustment_applied",
            person_id=remainder.person_id,
            adjustment=str(adjustment),
            fractional_remainder=str(remainder.fractional),
        )

    if abs(pennies_needed) > len(remainders):
        logger.warning(
            "penny_discrepancy_unresolved",
            pennies_needed=pennies_needed,
            people=len(remainders),
        )

    return result

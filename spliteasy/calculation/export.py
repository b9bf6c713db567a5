"""
Splitwise export.

Turns a bill into the list of unequal shares to enter in Splitwise and
a copy-ready instruction text.
"""

from decimal import Decimal
from typing import Mapping, Optional

from spliteasy.calculation.allocation import compute_totals
from spliteasy.calculation.reconciliation import penny_fix
from spliteasy.calculation.rounding import ZERO, format_money
from spliteasy.models.bill import BillState, BillTotals, SplitwiseOutput, SplitwiseShare


UNKNOWN_PAYER = "Unknown"

INSTRUCTIONS_HEADER = "How to enter in Splitwise (Splitter)"
INSTRUCTIONS_RULE = "-----------------------------------"
INSTRUCTIONS_SPLIT_MODE = "Split: Unequal shares (by amount)"


def build_splitwise_shares(
    state: BillState,
    totals: Optional[BillTotals] = None,
    fixed_totals: Optional[Mapping[str, Decimal]] = None,
) -> SplitwiseOutput:
    """
    Build the Splitwise shares for a bill.

    Only people who owe something are listed, largest amount first.
    Equal amounts keep the order of state.people.

    Callers that already ran compute_totals and penny_fix for this state
    can pass their results instead of having them recomputed.
    """
    if totals is None:
        totals = compute_totals(state)
    if fixed_totals is None:
        fixed_totals = penny_fix(totals.per_person_unrounded, totals.grand_total)

    payer = state.find_person(state.payer_id)
    payer_name = payer.name if payer else UNKNOWN_PAYER

    shares = [
        SplitwiseShare(name=person.name, amount=fixed_totals[person.id])
        for person in state.people
        if fixed_totals.get(person.id, ZERO) > 0
    ]
    shares.sort(key=lambda share: share.amount, reverse=True)

    return SplitwiseOutput(
        shares=shares,
        grand_total=totals.grand_total,
        payer_name=payer_name,
    )


def generate_splitwise_text(output: SplitwiseOutput) -> str:
    """Render the Splitwise instructions as plain text."""
    lines = [
        INSTRUCTIONS_HEADER,
        INSTRUCTIONS_RULE,
        f"Total: ${format_money(output.grand_total)}",
        f"Paid by: {output.payer_name}",
        INSTRUCTIONS_SPLIT_MODE,
        "",
        "Shares:",
    ]

    for share in output.shares:
        lines.append(f"{share.name}: ${format_money(share.amount)}")

    return "\n".join(lines)

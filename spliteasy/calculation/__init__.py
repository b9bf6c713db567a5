"""
Calculation Engine

Pure functions only: bill state in, fresh results out.

    BillState -> allocate_item_taxes -> compute_totals -> penny_fix
              -> build_splitwise_shares -> generate_splitwise_text
"""

from spliteasy.calculation.allocation import allocate_item_taxes, compute_totals
from spliteasy.calculation.export import build_splitwise_shares, generate_splitwise_text
from spliteasy.calculation.reconciliation import penny_fix
from spliteasy.calculation.rounding import (
    BASIS_POINT,
    CENT,
    format_money,
    round2,
    round4,
    to_decimal,
)

__all__ = [
    "BASIS_POINT",
    "CENT",
    "allocate_item_taxes",
    "build_splitwise_shares",
    "compute_totals",
    "format_money",
    "generate_splitwise_text",
    "penny_fix",
    "round2",
    "round4",
    "to_decimal",
]

"""
Rounding primitives.

All money is rounded half away from zero (ROUND_HALF_UP in decimal
terms): 1.235 -> 1.24, -1.235 -> -1.24, 0.005 -> 0.01.
Floats are converted through their shortest repr so that 1.235 means
the decimal 1.235, not the binary value closest to it.
"""

from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Union

Number = Union[Decimal, int, float, str]

CENT = Decimal("0.01")
BASIS_POINT = Decimal("0.0001")
ZERO = Decimal("0")


def to_decimal(value: Number) -> Decimal:
    """Convert a number to Decimal without binary float artifacts."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def _quantize(value: Number, exponent: Decimal) -> Decimal:
    amount = to_decimal(value)
    if not amount.is_finite():
        return amount

    # quantize needs every integer digit plus the kept decimals in context
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, amount.adjusted() - exponent.as_tuple().exponent + 2)
        return amount.quantize(exponent, rounding=ROUND_HALF_UP)


def round2(value: Number) -> Decimal:
    """Round to whole cents."""
    return _quantize(value, CENT)


def round4(value: Number) -> Decimal:
    """Round to 4 decimal places, for intermediate amounts."""
    return _quantize(value, BASIS_POINT)


def format_money(value: Number) -> str:
    """Render an amount with exactly two decimals, e.g. '12.50'."""
    return str(round2(value))

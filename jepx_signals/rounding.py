"""
Rounding helpers shared by the analytics modules.

Python's built-in round() uses banker's rounding and operates on the binary
float, so 2.5 -> 2 and 123.45 -> 123.4. Billing output needs half away
from zero on the decimal value as written.
"""

import math
from decimal import Decimal, ROUND_HALF_UP

from jepx_signals.constants import ROUNDING_DECIMALS


def round_half_away(value: float, decimals: int = ROUNDING_DECIMALS) -> float:
    """
    Round to a fixed number of decimals, halves away from zero.

    Args:
        value: Number to round
        decimals: Decimal places to keep (0 for whole units)

    Returns:
        Rounded float. Infinities and NaN are returned unchanged.
    """
    if math.isinf(value) or math.isnan(value):
        return value
    quantum = Decimal(1).scaleb(-decimals)
    return float(Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP))


def round_whole(value: float) -> int:
    """Round to a whole unit, halves away from zero."""
    return int(round_half_away(value, 0))

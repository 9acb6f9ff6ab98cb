"""
Unit conversion and display rounding.

Rounding is half-up (2.5 -> 3, 1782.5 -> 1783) rather than Python's
round-half-to-even, so that displayed targets do not flip between
neighbouring values for identical inputs at .5 boundaries.
"""

import math

from .config import CM_PER_INCH, LBS_PER_KG


def lbs_to_kg(lbs: float) -> float:
    return lbs / LBS_PER_KG


def inches_to_cm(inches: float) -> float:
    return inches * CM_PER_INCH


def round_half_up(value: float, ndigits: int = 0) -> float:
    """
    Round to ``ndigits`` decimals with ties going towards +infinity.

    Args:
        value: Number to round
        ndigits: Decimal places to keep

    Returns:
        Rounded value (float; use ``round_int`` for whole numbers)
    """
    factor = 10 ** ndigits
    return math.floor(value * factor + 0.5) / factor


def round_int(value: float) -> int:
    """Round half-up to the nearest integer."""
    return int(math.floor(value + 0.5))


def round_tenth(value: float) -> float:
    """Round half-up to one decimal place (weights shown to 0.1 lb)."""
    return round_half_up(value, 1)

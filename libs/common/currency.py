"""Currency helpers for the SDK.

Internal unit: minor currency units (integer cents or equivalent).
Every monetary value stored in a record or returned by the SDK is an int in
minor units. Floats only appear transiently when applying a rate.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

Number = Union[int, float, Decimal]


# ─── rounding ────────────────────────────────────────────────────────────────


def round_half_up(value: Number, places: int = 0) -> Union[int, float]:
    """Round half away from zero. round_half_up(2.5) == 3, not 2.

    Returns an int when ``places`` is 0, otherwise a float.
    """
    exponent = Decimal(1).scaleb(-places)
    rounded = Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP)
    if places == 0:
        return int(rounded)
    return float(rounded)


def apply_rate(amount: int, rate: Number) -> int:
    """Apply a fractional rate to a minor-unit amount, rounding half up."""
    return round_half_up(Decimal(amount) * Decimal(str(rate)))

"""Decimal rounding applied to bounding box outputs."""

from __future__ import annotations

import math


def round_value(value: float, precision: int | None) -> float:
    """Round ``value`` to ``precision`` decimal digits.

    Halves round toward positive infinity (``2.5 -> 3``, ``-2.5 -> -2``).
    ``precision=None`` returns the value unchanged as a float; ``0`` rounds
    to the nearest integer.

    Raises:
        ValueError: If precision is negative
    """
    if precision is None:
        return float(value)
    if precision < 0:
        raise ValueError(f"Precision must be >= 0, got {precision}")
    value = float(value)
    if not math.isfinite(value):
        return value

    factor = 10.0 ** precision
    scaled = value * factor
    # past 2**52 every float is already an integer at this scale
    if not math.isfinite(scaled) or abs(scaled) >= 2 ** 52:
        return value
    return math.floor(scaled + 0.5) / factor

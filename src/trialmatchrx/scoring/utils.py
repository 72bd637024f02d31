"""Numeric helpers shared by the scorers."""

from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    """Round halves upward (2.5 -> 3, 46.5 -> 47), unlike built-in round()."""
    return math.floor(value + 0.5)


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))

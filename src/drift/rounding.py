"""Rounding helpers shared by the scoring code."""

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 always rounding up (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))

"""Numeric helpers shared by the schedulers and statistics."""

import math
from datetime import datetime

SECONDS_PER_DAY = 86400.0


def clamp(value: float, low: float, high: float) -> float:
    """Clamp into [low, high]; NaN collapses to ``low``."""
    if math.isnan(value):
        return low
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    """
    Round .5 away from zero for positive values.

    Python's ``round`` uses banker's rounding, which would shift intervals
    such as 2.5 -> 2 and reschedule existing cards.
    """
    return math.floor(value + 0.5)


def whole_days_between(start: datetime | None, end: datetime) -> int:
    """Whole elapsed days from ``start`` to ``end``; 0 if unknown or negative."""
    if start is None:
        return 0
    seconds = (end - start).total_seconds()
    return max(0, math.floor(seconds / SECONDS_PER_DAY))


def safe_mean(values: list[float], default: float = 0.0) -> float:
    if not values:
        return default
    return sum(values) / len(values)


def percentage(part: int, whole: int) -> float:
    if whole <= 0:
        return 0.0
    return part / whole * 100

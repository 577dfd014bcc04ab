import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 always going up (2.5 -> 3)."""
    return math.floor(value + 0.5)


def percentage(part: int, whole: int) -> int:
    """Whole-number percentage of part in whole; 0 when whole is empty."""
    if whole <= 0:
        return 0
    return round_half_up(part * 100 / whole)

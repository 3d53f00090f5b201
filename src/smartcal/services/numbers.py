"""Numeric helpers shared by the nutrition calculators."""

import math


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with halves going up, the way nutrition labels are rounded."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def to_quantity(value: object) -> float | None:
    """Parse a user-entered quantity, returning None when it is not a number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number

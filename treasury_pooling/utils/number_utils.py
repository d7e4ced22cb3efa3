"""Lenient numeric parsing for form-driven position data"""

import math
from typing import Any


def parse_non_negative_number(value: Any) -> float:
    """
    Coerce a raw form value into a finite, non-negative float.

    Leniency contract: in-progress form input is the normal case, so this never
    raises. Anything that cannot be read as a number (None, "", "abc", NaN,
    infinities, objects) becomes 0.0, and negative numbers are clamped to 0.0.

    The whole string must parse once thousands separators are removed. A numeric
    prefix is not read on its own, so "12%" is 0.0 rather than 12, and "1,500.5"
    is 1500.5 rather than 1.

    Examples:
        "1,500.5" → 1500.5
        "12%"     → 0.0
        -3        → 0.0
    """
    if value is None or isinstance(value, bool):
        return 0.0

    if isinstance(value, str):
        value = value.strip().replace(",", "")
        if not value:
            return 0.0

    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0

    if math.isnan(number) or math.isinf(number) or number < 0:
        return 0.0

    return number


def clamp_percentage(value: Any) -> float:
    """Parse a percentage leniently and cap it to [0, 100]"""
    return min(parse_non_negative_number(value), 100.0)

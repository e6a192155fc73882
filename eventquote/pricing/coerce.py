"""
Input coercion for the quotation engine.

The engine runs on every keystroke of the quote form, so half-typed values
are normal. Nothing here raises: anything that can't be read as a number
becomes the caller's default, and negatives clamp to zero.
"""

import math


def parse_number(value, default: float = 0.0) -> float:
    """Parse a numeric value from user input. Handles 120, '1.5', ' 4 '."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        try:
            number = float(str(value).strip())
        except (ValueError, TypeError):
            return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def parse_int(value, default: int = 0) -> int:
    """Parse an integer from user input, truncating decimals."""
    number = parse_number(value, default=None)
    if number is None:
        return default
    return int(number)


def parse_money(value) -> int:
    """Whole currency units, never negative. Missing or garbage → 0."""
    return max(0, int(round(parse_number(value, default=0.0))))


def is_blank(value) -> bool:
    """True for the values the quote form treats as 'not entered yet'."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 0
    return False


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from clickengine.errors import InvalidScore

# Same width as a DECIMAL(65, 0) column
MAX_DIGITS = 65


def normalize_score(value: Any) -> str:
    """Convert a submitted score to a plain decimal-digit string.

    Accepts ints, floats and numeric strings (including exponent notation);
    fractions are rounded half up.

    >>> normalize_score(1e21)
    '1000000000000000000000'
    """
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise InvalidScore(f"Score must be a number, got {type(value).__name__}")
    try:
        d = Decimal(value.strip()) if isinstance(value, str) else Decimal(str(value))
    except InvalidOperation:
        raise InvalidScore(f"Score is not numeric: {value!r}") from None
    if not d.is_finite():
        raise InvalidScore(f"Score is not finite: {value!r}")
    if d < 0:
        raise InvalidScore(f"Score is negative: {value!r}")

    if d.adjusted() >= MAX_DIGITS:
        raise InvalidScore(f"Score has more than {MAX_DIGITS} digits")
    d = d.to_integral_value(rounding=ROUND_HALF_UP)
    if d == 0:
        return "0"
    digits = f"{d:f}"
    if not digits.isdigit():
        raise InvalidScore(f"Score could not be normalized: {value!r}")
    digits = digits.lstrip("0") or "0"
    # rounding up can carry into one more digit
    if len(digits) > MAX_DIGITS:
        raise InvalidScore(f"Score has more than {MAX_DIGITS} digits")
    return digits


def compare_scores(a: str, b: str) -> int:
    """Compare two digit strings numerically: -1, 0 or 1."""
    a = a.lstrip("0") or "0"
    b = b.lstrip("0") or "0"
    if len(a) != len(b):
        return 1 if len(a) > len(b) else -1
    if a == b:
        return 0
    return 1 if a > b else -1

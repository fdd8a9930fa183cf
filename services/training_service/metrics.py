"""Decimal percentage helpers for compliance figures.

Displayed percentages are computed in ``Decimal`` and rounded half-to-even
exactly once, so 2/3 is always 66.67 and never 66.66666666666667.
"""

from decimal import ROUND_HALF_EVEN, Decimal
from typing import Iterable, Optional

TWO_PLACES = Decimal("0.01")
WHOLE = Decimal("1")
ZERO = Decimal("0.00")
HUNDRED = Decimal(100)


def raw_percentage(part: Optional[int], whole: Optional[int]) -> Optional[Decimal]:
    """Unrounded ``part / whole * 100``; None when either side is missing or whole <= 0."""
    if part is None or whole is None or whole <= 0:
        return None
    return Decimal(part) / Decimal(whole) * HUNDRED


def to_two_places(value: Decimal) -> Decimal:
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_EVEN)


def percentage(part: int, whole: int) -> Decimal:
    """Two-place percentage; 0 when ``whole`` is 0."""
    value = raw_percentage(part, whole)
    return ZERO if value is None else to_two_places(value)


def quiz_percentage(score: Optional[int], max_score: Optional[int]) -> Optional[Decimal]:
    """Quiz score as a two-place percentage, or None when the quiz was not scored."""
    value = raw_percentage(score, max_score)
    return None if value is None else to_two_places(value)


def whole_percentage(score: Optional[int], max_score: Optional[int]) -> Optional[int]:
    """Quiz score as a whole-number percentage (skills matrix cells)."""
    value = raw_percentage(score, max_score)
    if value is None:
        return None
    return int(value.quantize(WHOLE, rounding=ROUND_HALF_EVEN))


def average(values: Iterable[Decimal]) -> Optional[Decimal]:
    """Two-place mean of unrounded values; None for an empty input."""
    values = list(values)
    if not values:
        return None
    return to_two_places(sum(values, Decimal(0)) / len(values))

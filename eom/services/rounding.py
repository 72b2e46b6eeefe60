from decimal import Decimal, ROUND_HALF_UP
from numbers import Rational
from typing import Union

Number = Union[int, str, Decimal, Rational]


def round_half_away(value: Number) -> int:
    """Round to the nearest integer, halves away from zero (2.5 -> 3, -2.5 -> -3).

    Works in Decimal so that e.g. 10 * 0.15 rounds from 1.5 exactly.
    """
    if isinstance(value, Rational) and not isinstance(value, int):
        value = Decimal(value.numerator) / Decimal(value.denominator)
    return int(Decimal(value).quantize(Decimal(1), rounding=ROUND_HALF_UP))

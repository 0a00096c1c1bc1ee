"""
Normalization of raw cell values into rankable numbers.
"""

from __future__ import annotations

import math
from decimal import Decimal
from enum import Enum
from numbers import Rational, Real
from typing import Any, TypeAlias


class _NoValue(Enum):
    NO_VALUE = "no_value"

    def __repr__(self) -> str:
        return "NO_VALUE"

    __str__ = __repr__


NO_VALUE = _NoValue.NO_VALUE

EffectiveValue: TypeAlias = Real | Decimal | _NoValue


def normalize(raw_value: Any) -> EffectiveValue:
    """
    Reduce a raw cell value to the number it is ranked by.

    Multi-value cells (lists and tuples) are ranked by their first element.
    Anything that is not a finite real number yields ``NO_VALUE``.
    """
    if isinstance(raw_value, (list, tuple)):
        if not raw_value:
            return NO_VALUE
        raw_value = raw_value[0]
    return _scalar(raw_value)


def has_value(value: EffectiveValue) -> bool:
    return value is not NO_VALUE


def _scalar(value: Any) -> EffectiveValue:
    # bool is an int subclass but a checkbox is not a score.
    if isinstance(value, bool):
        return NO_VALUE
    # ints and fractions are always finite, whatever their magnitude.
    if isinstance(value, Rational):
        return value
    if isinstance(value, Decimal):
        return value if value.is_finite() else NO_VALUE
    if not isinstance(value, Real):
        return NO_VALUE
    try:
        finite = math.isfinite(value)
    except (TypeError, ValueError, OverflowError):
        return NO_VALUE
    return value if finite else NO_VALUE

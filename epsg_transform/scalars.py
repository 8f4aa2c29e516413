"""Conversions between caller scalar types and the pipeline's working floats.

Supported scalars are Python floats and ints, numpy floating and integer
types, Decimal and Fraction. Non-finite components (NaN, infinity) are always
rejected. Integers have no fractional part to hold a transformed value, so
integer components come back as floats, matching GeoJSON's untyped numbers.
"""
import math
import numbers
from decimal import Decimal

import numpy as np

from .exceptions import DoubleToScalarConversionError, ScalarToDoubleConversionError


def to_double(value) -> float:
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, (numbers.Real, Decimal)):
        raise ScalarToDoubleConversionError(value)
    try:
        result = float(value)
    except (TypeError, ValueError, OverflowError) as e:
        raise ScalarToDoubleConversionError(value) from e
    if not math.isfinite(result):
        raise ScalarToDoubleConversionError(value)
    return result


def from_double(value: float, like):
    """Convert a working float back to the scalar type of `like`"""
    if not math.isfinite(value):
        raise DoubleToScalarConversionError(value, type(like))

    if isinstance(like, numbers.Integral):
        return float(value)

    if isinstance(like, np.floating):
        with np.errstate(over="ignore"):
            result = like.dtype.type(value)
        if not np.isfinite(result):
            raise DoubleToScalarConversionError(value, type(like))
        return result

    if isinstance(like, Decimal):
        return Decimal(repr(value))

    try:
        return type(like)(value)
    except (TypeError, ValueError, OverflowError) as e:
        raise DoubleToScalarConversionError(value, type(like)) from e

"""Tests for scalar <-> working float conversions."""
import math
from decimal import Decimal
from fractions import Fraction

import numpy as np
import pytest

from epsg_transform.exceptions import DoubleToScalarConversionError, ScalarToDoubleConversionError
from epsg_transform.scalars import from_double, to_double


class TestToDouble:

    @pytest.mark.parametrize("value, expected", [
        (1.5, 1.5),
        (3, 3.0),
        (np.float32(0.5), 0.5),
        (np.int64(7), 7.0),
        (Decimal("2.25"), 2.25),
        (Fraction(1, 4), 0.25),
    ])
    def test_supported_scalars(self, value, expected):
        result = to_double(value)
        assert isinstance(result, float)
        assert result == expected

    @pytest.mark.parametrize("value", [
        float("nan"),
        float("inf"),
        -float("inf"),
        np.float64("nan"),
        Decimal("NaN"),
        Decimal("1e400"),
        True,
        np.bool_(False),
        "1.0",
        None,
        1 + 2j,
    ])
    def test_rejected_values(self, value):
        with pytest.raises(ScalarToDoubleConversionError) as exc_info:
            to_double(value)
        assert str(exc_info.value) == "Could not convert number to f64"


class TestFromDouble:

    def test_float_stays_float(self):
        assert from_double(2.5, 1.0) == 2.5

    def test_integers_widen_to_float(self):
        result = from_double(348528.25, 0)
        assert isinstance(result, float)
        assert result == 348528.25

    def test_numpy_types_preserved(self):
        assert isinstance(from_double(1.25, np.float32(0)), np.float32)
        assert isinstance(from_double(1.25, np.float64(0)), np.float64)

    def test_decimal_uses_shortest_repr(self):
        assert from_double(0.1, Decimal("0")) == Decimal("0.1")

    def test_fraction(self):
        assert from_double(0.5, Fraction(0)) == Fraction(1, 2)

    def test_float32_overflow(self):
        with pytest.raises(DoubleToScalarConversionError) as exc_info:
            from_double(1e300, np.float32(1))
        assert exc_info.value.scalar_type is np.float32

    @pytest.mark.parametrize("value", [math.inf, -math.inf, math.nan])
    def test_non_finite_results(self, value):
        with pytest.raises(DoubleToScalarConversionError):
            from_double(value, 1.0)

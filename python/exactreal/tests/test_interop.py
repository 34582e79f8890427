"""
Tests for conversion between numpy arrays and exact values.

Test Categories:
1. Float Conversion - exact and denominator-limited
2. Arrays In - from_numpy
3. Arrays Out - to_numpy
"""

import math

import numpy as np
import pytest
from fractions import Fraction

from exactreal.cache import SimpleEvaluationCache
from exactreal.constants import E, PI
from exactreal.exceptions import InvalidArgument
from exactreal.interop import float_to_rational, from_numpy, to_numpy


# =============================================================================
# 1. Float Conversion
# =============================================================================

class TestFloatToRational:
    """Tests for float_to_rational."""

    def test_exact_binary_value(self):
        assert float_to_rational(0.5) == Fraction(1, 2)
        assert float_to_rational(0.1) == Fraction(3602879701896397, 36028797018963968)

    def test_limited_denominator(self):
        assert float_to_rational(0.1, max_denom=1000) == Fraction(1, 10)
        assert float_to_rational(math.pi, max_denom=1000) == Fraction(355, 113)

    def test_numpy_scalar(self):
        assert float_to_rational(np.float32(0.25)) == Fraction(1, 4)

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), -float("inf")])
    def test_non_finite(self, value):
        with pytest.raises(InvalidArgument):
            float_to_rational(value)

    def test_invalid_max_denom(self):
        with pytest.raises(InvalidArgument):
            float_to_rational(0.5, max_denom=0)


# =============================================================================
# 2. Arrays In
# =============================================================================

class TestFromNumpy:
    """Tests for from_numpy."""

    def test_float_array(self):
        result = from_numpy(np.array([0.5, -0.25, 2.0]))
        assert result.dtype == object
        assert list(result) == [Fraction(1, 2), Fraction(-1, 4), Fraction(2)]
        assert all(isinstance(v, Fraction) for v in result)

    def test_shape_preserved(self):
        array = np.arange(6).reshape(2, 3)
        result = from_numpy(array)
        assert result.shape == (2, 3)
        assert result[1, 2] == Fraction(5)
        assert isinstance(result[0, 0], Fraction)

    def test_max_denom(self):
        result = from_numpy(np.array([[0.1, 0.2], [0.3, 0.7]]), max_denom=10)
        assert result.tolist() == [
            [Fraction(1, 10), Fraction(1, 5)],
            [Fraction(3, 10), Fraction(7, 10)],
        ]

    def test_accepts_sequences(self):
        assert from_numpy([1, 2]).tolist() == [Fraction(1), Fraction(2)]

    def test_rejects_non_numeric(self):
        with pytest.raises(InvalidArgument):
            from_numpy(np.array(["a", "b"]))


# =============================================================================
# 3. Arrays Out
# =============================================================================

class TestToNumpy:
    """Tests for to_numpy."""

    def test_mixed_values(self):
        result = to_numpy([PI, Fraction(1, 3), 2, E * E])
        assert result.dtype == np.float64
        np.testing.assert_allclose(result, [math.pi, 1 / 3, 2.0, math.e ** 2], rtol=1e-15)

    def test_shared_cache(self):
        cache = SimpleEvaluationCache()
        to_numpy([PI], cache)
        assert PI in cache

    def test_coarse_delta(self):
        result = to_numpy([PI], max_delta=Fraction(1, 100))
        assert abs(result[0] - math.pi) < 0.01

    def test_empty(self):
        assert to_numpy([]).shape == (0,)

"""
Tests for rounding rationals and reals.

Test Categories:
1. Digit Walk - proceed_with_first_digits
2. Rational Rounding - floor, round, ceiling and the tie rule
3. Real Rounding - rounding lazy reals
"""

import pytest
from fractions import Fraction

from exactreal.cache import SimpleEvaluationCache
from exactreal.constants import E, PI
from exactreal.domain import Segment
from exactreal.exceptions import InvalidArgument
from exactreal.real import LazyReal
from exactreal.rounding import (
    ceiling_rational,
    ceiling_to_rational,
    floor_rational,
    floor_to_rational,
    proceed_with_first_digits,
    round_rational,
    round_to_rational,
)


@pytest.fixture
def cache():
    return SimpleEvaluationCache()


def collect(segment, digit):
    return segment, digit


# =============================================================================
# 1. Digit Walk
# =============================================================================

class TestDigitWalk:
    """Tests for proceed_with_first_digits."""

    def test_positive(self):
        segment, digit = proceed_with_first_digits(Fraction(314, 100), 10, 1, collect)
        assert segment == Segment(Fraction(31, 10), Fraction(32, 10))
        assert digit == 4

    def test_negative_extends_away_from_zero(self):
        segment, digit = proceed_with_first_digits(Fraction(-314, 100), 10, 1, collect)
        assert segment == Segment(Fraction(-32, 10), Fraction(-31, 10))
        assert digit == 4

    def test_expansion_ends_early(self):
        segment, digit = proceed_with_first_digits(Fraction(1, 4), 10, 5, collect)
        assert segment == Segment.point(Fraction(1, 4))
        assert digit == 0

    def test_expansion_ends_exactly(self):
        segment, digit = proceed_with_first_digits(Fraction(1, 4), 10, 2, collect)
        assert segment == Segment.point(Fraction(1, 4))
        assert digit == 0

    def test_periodic(self):
        segment, digit = proceed_with_first_digits(Fraction(2, 3), 10, 3, collect)
        assert segment == Segment(Fraction(666, 1000), Fraction(667, 1000))
        assert digit == 6

    def test_binary(self):
        segment, digit = proceed_with_first_digits(Fraction(5, 8), 2, 1, collect)
        assert segment == Segment(Fraction(1, 2), 1)
        assert digit == 0

    def test_proceed_is_called_once(self):
        calls = []
        proceed_with_first_digits(Fraction(1, 7), 10, 4, lambda s, d: calls.append((s, d)))
        assert len(calls) == 1

    def test_negative_digit_count(self):
        with pytest.raises(InvalidArgument):
            proceed_with_first_digits(Fraction(1, 2), 10, -1, collect)

    @pytest.mark.parametrize("radix", [0, 1, 37])
    def test_invalid_radix(self, radix):
        with pytest.raises(InvalidArgument):
            proceed_with_first_digits(Fraction(1, 2), radix, 1, collect)


# =============================================================================
# 2. Rational Rounding
# =============================================================================

class TestRationalRounding:
    """Tests for floor_rational, round_rational and ceiling_rational."""

    @pytest.mark.parametrize("value,floor,rounded,ceiling", [
        (Fraction(3, 2), 1, 2, 2),
        (Fraction(-3, 2), -2, -1, -1),
        (Fraction(7, 5), 1, 1, 2),
        (Fraction(-7, 5), -2, -1, -1),
        (Fraction(8, 5), 1, 2, 2),
        (Fraction(-8, 5), -2, -2, -1),
        (Fraction(3), 3, 3, 3),
        (Fraction(-3), -3, -3, -3),
        (Fraction(0), 0, 0, 0),
    ])
    def test_integer_rounding(self, value, floor, rounded, ceiling):
        assert floor_rational(value) == floor
        assert round_rational(value) == rounded
        assert ceiling_rational(value) == ceiling

    def test_fraction_digits(self):
        assert round_rational(Fraction(1, 4), fraction_digits=1) == Fraction(3, 10)
        assert round_rational(Fraction(-1, 4), fraction_digits=1) == Fraction(-2, 10)
        assert floor_rational(Fraction(-125, 100), fraction_digits=1) == Fraction(-13, 10)
        assert ceiling_rational(Fraction(2, 3), fraction_digits=2) == Fraction(67, 100)
        assert round_rational(Fraction(2, 3), fraction_digits=4) == Fraction(6667, 10000)

    def test_short_expansion_is_unchanged(self):
        assert round_rational(Fraction(1, 2), fraction_digits=3) == Fraction(1, 2)
        assert floor_rational(Fraction(-1, 8), fraction_digits=3) == Fraction(-1, 8)

    def test_binary_radix(self):
        assert round_rational(Fraction(3, 4), radix=2, fraction_digits=1) == 1
        assert floor_rational(Fraction(3, 4), radix=2, fraction_digits=1) == Fraction(1, 2)
        assert round_rational(Fraction(5, 8), radix=2, fraction_digits=1) == Fraction(1, 2)
        assert ceiling_rational(Fraction(5, 8), radix=2, fraction_digits=1) == 1

    def test_accepts_strings(self):
        assert round_rational("2.5") == 3
        assert floor_rational("-0.(3)", fraction_digits=2) == Fraction(-34, 100)

    @pytest.mark.parametrize("value", [
        Fraction(22, 7), Fraction(-22, 7), Fraction(1, 3), Fraction(-5, 9), Fraction(10 ** 20 + 1, 10 ** 10),
    ])
    @pytest.mark.parametrize("digits", [0, 1, 3])
    def test_floor_and_ceiling_enclose(self, value, digits):
        floor = floor_rational(value, fraction_digits=digits)
        ceiling = ceiling_rational(value, fraction_digits=digits)
        rounded = round_rational(value, fraction_digits=digits)
        assert floor <= value <= ceiling
        assert ceiling - floor <= Fraction(1, 10 ** digits)
        assert rounded in (floor, ceiling)


# =============================================================================
# 3. Real Rounding
# =============================================================================

class TestRealRounding:
    """Tests for rounding lazy reals."""

    def test_pi_to_integers(self, cache):
        assert floor_to_rational(PI, cache) == 3
        assert round_to_rational(PI, cache) == 3
        assert ceiling_to_rational(PI, cache) == 4

    def test_pi_to_two_digits(self, cache):
        assert floor_to_rational(PI, cache, fraction_digits=2) == Fraction(314, 100)
        assert ceiling_to_rational(PI, cache, fraction_digits=2) == Fraction(315, 100)

    def test_five_digits(self, cache):
        assert floor_to_rational(PI, cache, fraction_digits=5) == Fraction(314159, 100000)
        assert round_to_rational(E, cache, fraction_digits=5) == Fraction(271828, 100000)

    def test_negative_real(self, cache):
        assert floor_to_rational(-PI, cache, fraction_digits=2) == Fraction(-315, 100)
        assert round_to_rational(-PI, cache, fraction_digits=2) == Fraction(-314, 100)
        assert ceiling_to_rational(-E, cache) == -2

    def test_binary_digits(self, cache):
        # pi = 11.001001...
        assert floor_to_rational(PI, cache, radix=2, fraction_digits=3) == Fraction(25, 8)

    def test_exact_values(self):
        assert round_to_rational(Fraction(5, 2)) == 3
        assert floor_to_rational(7, fraction_digits=2) == 7

    def test_default_cache(self):
        assert floor_to_rational(PI * 100) == 314

    def test_real_ending_in_point(self, cache):
        def rule(cache):
            yield Segment(0, 1)
            yield Segment.point(Fraction(1, 2))

        assert round_to_rational(LazyReal(rule), cache) == 1
        assert floor_to_rational(LazyReal(rule), cache) == 0

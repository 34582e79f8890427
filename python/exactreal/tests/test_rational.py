"""
Tests for the rational boundary helpers.

Test Categories:
1. Conversion - to_fraction over supported input types
2. Parsing - every FractionFormat shape, periodic notation, radixes
3. Formatting - DIVISION, MIXED, DOT, COMMA
4. Digits - integer/fractional parts and lazy digit expansion
5. Field Laws - ring laws and canonical form on large fractions
"""

import random

import numpy as np
import pytest
from fractions import Fraction

from exactreal.exceptions import DivisionByZero, InvalidArgument
from exactreal.rational import (
    FractionFormat,
    digit_sequence,
    format_rational,
    fractional_part,
    integer_part,
    parse_rational,
    periodic_expansion,
    rational_pow,
    to_fraction,
)


# =============================================================================
# Test Fixtures
# =============================================================================

@pytest.fixture
def big_fractions():
    """Random fractions with 200+ digit numerators and denominators."""
    rng = random.Random(20240101)

    def big():
        value = rng.randrange(10 ** 200, 10 ** 230)
        return value if rng.random() < 0.5 else -value

    fractions = []
    for _ in range(12):
        denominator = abs(big()) or 1
        fractions.append(Fraction(big(), denominator))
    return fractions


# =============================================================================
# 1. Conversion
# =============================================================================

class TestToFraction:
    """Tests for to_fraction."""

    def test_integers_and_fractions(self):
        assert to_fraction(5) == Fraction(5)
        assert to_fraction(Fraction(3, 4)) == Fraction(3, 4)

    def test_float_is_exact(self):
        """Floats convert to their exact binary value."""
        assert to_fraction(0.5) == Fraction(1, 2)
        assert to_fraction(0.1) == Fraction(3602879701896397, 36028797018963968)

    def test_numpy_scalars(self):
        assert to_fraction(np.int64(7)) == Fraction(7)
        assert to_fraction(np.float64(0.25)) == Fraction(1, 4)

    def test_string(self):
        assert to_fraction("0.1") == Fraction(1, 10)

    def test_rejects_non_finite(self):
        with pytest.raises(InvalidArgument):
            to_fraction(float("nan"))
        with pytest.raises(InvalidArgument):
            to_fraction(float("inf"))

    def test_rejects_bool_and_objects(self):
        with pytest.raises(InvalidArgument):
            to_fraction(True)
        with pytest.raises(InvalidArgument):
            to_fraction(object())


# =============================================================================
# 2. Parsing
# =============================================================================

class TestParseRational:
    """Tests for parse_rational."""

    def test_division(self):
        assert parse_rational("6/8") == Fraction(3, 4)
        assert parse_rational("-1/3") == Fraction(-1, 3)

    def test_dot_and_comma(self):
        assert parse_rational("-1.25") == Fraction(-5, 4)
        assert parse_rational("1,5") == Fraction(3, 2)
        assert parse_rational(".5") == Fraction(1, 2)
        assert parse_rational("+12") == Fraction(12)

    def test_periodic(self):
        assert parse_rational("0.(3)") == Fraction(1, 3)
        assert parse_rational("1.2(34)") == Fraction(611, 495)
        assert parse_rational("0.(9)") == Fraction(1)

    def test_radix(self):
        assert parse_rational("ff", radix=16) == Fraction(255)
        assert parse_rational("0.1", radix=2) == Fraction(1, 2)
        assert parse_rational("0.(1)", radix=2) == Fraction(1)

    def test_zero_denominator(self):
        with pytest.raises(DivisionByZero):
            parse_rational("1/0")

    @pytest.mark.parametrize("text", ["", "1.2.3", "abc", "1.(", "1.2(3", "--1", "1.(3)4"])
    def test_malformed(self, text):
        with pytest.raises(InvalidArgument):
            parse_rational(text)

    def test_bad_radix(self):
        with pytest.raises(InvalidArgument):
            parse_rational("1", radix=1)
        with pytest.raises(InvalidArgument):
            parse_rational("1", radix=37)


# =============================================================================
# 3. Formatting
# =============================================================================

class TestFormatRational:
    """Tests for format_rational and periodic_expansion."""

    def test_division(self):
        assert format_rational(Fraction(7, 2)) == "7/2"
        assert format_rational(Fraction(5)) == "5"
        assert format_rational(Fraction(-1, 3)) == "-1/3"

    def test_mixed(self):
        assert format_rational(Fraction(-7, 2), FractionFormat.MIXED) == "-3 1/2"
        assert format_rational(Fraction(7, 2), FractionFormat.MIXED) == "3 1/2"
        assert format_rational(Fraction(-1, 2), FractionFormat.MIXED) == "-1/2"
        assert format_rational(Fraction(4), FractionFormat.MIXED) == "4"

    def test_dot(self):
        assert format_rational(Fraction(1, 3), FractionFormat.DOT) == "0.(3)"
        assert format_rational(Fraction(1, 6), FractionFormat.DOT) == "0.1(6)"
        assert format_rational(Fraction(-1, 3), FractionFormat.DOT) == "-0.(3)"
        assert format_rational(Fraction(5, 4), FractionFormat.DOT) == "1.25"
        assert format_rational(Fraction(3), FractionFormat.DOT) == "3"

    def test_comma(self):
        assert format_rational(Fraction(3, 2), FractionFormat.COMMA) == "1,5"

    def test_radix(self):
        assert format_rational(Fraction(255), radix=16) == "ff"
        assert format_rational(Fraction(1, 2), FractionFormat.DOT, radix=2) == "0.1"
        assert format_rational(Fraction(1, 3), FractionFormat.DOT, radix=3) == "0.1"

    def test_periodic_expansion_of_one_seventh(self):
        expansion = periodic_expansion(Fraction(1, 7))
        assert expansion.integer_part == 0
        assert expansion.before_period == ()
        assert expansion.period == (1, 4, 2, 8, 5, 7)

    def test_parse_inverts_format(self):
        """Formatted periodic strings parse back to the same value."""
        for value in [Fraction(1, 7), Fraction(-22, 7), Fraction(611, 495), Fraction(1, 12)]:
            for fmt in FractionFormat:
                if fmt is FractionFormat.MIXED:
                    continue
                assert parse_rational(format_rational(value, fmt)) == value


# =============================================================================
# 4. Digits
# =============================================================================

class TestDigits:
    """Tests for integer_part, fractional_part and digit_sequence."""

    def test_integer_part_truncates_toward_zero(self):
        assert integer_part(Fraction(7, 2)) == 3
        assert integer_part(Fraction(-7, 2)) == -3
        assert integer_part(Fraction(-1, 2)) == 0

    def test_fractional_part_keeps_sign(self):
        assert fractional_part(Fraction(-7, 2)) == Fraction(-1, 2)
        assert fractional_part(Fraction(7, 2)) == Fraction(1, 2)

    def test_terminating_digits(self):
        expansion = digit_sequence(Fraction(1, 4))
        assert expansion.sign == 1
        assert expansion.integer_digits == (0,)
        assert list(expansion.digits) == [2, 5]

    def test_negative_digits(self):
        expansion = digit_sequence(Fraction(-123, 10))
        assert expansion.sign == -1
        assert expansion.integer_digits == (1, 2)
        assert list(expansion.digits) == [3]

    def test_infinite_digits(self):
        digits = digit_sequence(Fraction(1, 3)).digits
        assert [next(digits) for _ in range(10)] == [3] * 10

    def test_zero(self):
        expansion = digit_sequence(0)
        assert expansion.sign == 0
        assert list(expansion.digits) == []


# =============================================================================
# 5. Field Laws
# =============================================================================

class TestFieldLaws:
    """Ring laws and canonical form on very large fractions."""

    def test_commutativity(self, big_fractions):
        for a, b in zip(big_fractions, big_fractions[1:]):
            assert a + b == b + a
            assert a * b == b * a

    def test_associativity_and_distributivity(self, big_fractions):
        for a, b, c in zip(big_fractions, big_fractions[1:], big_fractions[2:]):
            assert (a + b) + c == a + (b + c)
            assert (a * b) * c == a * (b * c)
            assert a * (b + c) == a * b + a * c

    def test_identities_and_inverses(self, big_fractions):
        for a in big_fractions:
            assert a + 0 == a
            assert a * 1 == a
            assert a + (-a) == 0
            assert a * (1 / a) == 1

    def test_canonical_form(self):
        rng = random.Random(7)
        for _ in range(20):
            n = rng.randrange(1, 10 ** 50) * rng.choice([-1, 1])
            d = rng.randrange(1, 10 ** 50)
            k = rng.randrange(1, 10 ** 30) * rng.choice([-1, 1])
            reduced = to_fraction(Fraction(n * k, d * k))
            assert reduced == Fraction(n, d)
            assert reduced.denominator > 0

    def test_rational_pow(self):
        assert rational_pow(Fraction(2, 3), -2) == Fraction(9, 4)
        assert rational_pow(5, 0) == 1
        with pytest.raises(DivisionByZero):
            rational_pow(0, -1)

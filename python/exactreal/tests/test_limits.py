"""
Tests for limit combinators, series and the constants built on them.

Test Categories:
1. Corner Evaluation - limit and limit_monotonic
2. Sequences - sequence_limit with error schedules
3. Series - series_sum and series_product
4. Constants - E and PI
"""

import math
import operator

import pytest
from fractions import Fraction
from itertools import count, islice

from exactreal.cache import SimpleEvaluationCache
from exactreal.constants import E, PI, factorial, naturals, naturals_with_zero
from exactreal.domain import Segment
from exactreal.exceptions import InvalidArgument
from exactreal.limits import (
    limit,
    limit_monotonic,
    sequence_limit,
    series_product,
    series_sum,
)


# =============================================================================
# Test Fixtures
# =============================================================================

@pytest.fixture
def cache():
    return SimpleEvaluationCache()


def halves():
    """1, 1/2, 1/4, ..."""
    return (Fraction(1, 2 ** n) for n in count())


def halving_epsilon(n: int) -> Fraction:
    return Fraction(1, 2 ** n)


# =============================================================================
# 1. Corner Evaluation
# =============================================================================

class TestCornerEvaluation:
    """Tests for limit and limit_monotonic."""

    def test_limit_of_exact_operand_is_exact(self):
        assert limit(Fraction(1, 3), lambda q: 3 * q) == 1

    def test_limit_increasing(self, cache):
        x = limit(PI, lambda q: 2 * q + 1)
        segment = cache.observe_within(x, Fraction(1, 10 ** 9))
        assert float(segment.midpoint()) == pytest.approx(2 * math.pi + 1, abs=1e-8)

    def test_limit_decreasing(self, cache):
        x = limit(PI, lambda q: 1 - q)
        segment = cache.observe_within(x, Fraction(1, 10 ** 9))
        assert float(segment.midpoint()) == pytest.approx(1 - math.pi, abs=1e-8)

    def test_limit_monotonic_mixed_directions(self, cache):
        x = limit_monotonic(PI, E, operator.sub)
        segment = cache.observe_within(x, Fraction(1, 10 ** 9))
        assert float(segment.midpoint()) == pytest.approx(math.pi - math.e, abs=1e-8)

    def test_limit_monotonic_exact_operands(self):
        assert limit_monotonic(Fraction(1, 2), 3, operator.mul) == Fraction(3, 2)

    def test_collapsing_limit_ends(self, cache):
        x = limit(PI, lambda q: Fraction(7))
        assert list(cache.observe(x)) == [Segment.point(7)]


# =============================================================================
# 2. Sequences
# =============================================================================

class TestSequenceLimit:
    """Tests for sequence_limit."""

    def test_fluctuating_sequence(self, cache):
        """(-1)^n / 10^n with error bound 1/10^n converges to 0."""
        x = sequence_limit(
            lambda: (Fraction((-1) ** n, 10 ** n) for n in count()),
            lambda n: Fraction(1, 10 ** n),
        )
        for segment in islice(cache.observe(x), 12):
            assert segment.contains(0)
        assert cache.observe_within(x, Fraction(1, 10 ** 8)).contains(0)

    def test_decreasing_sequence(self, cache):
        x = sequence_limit(halves, halving_epsilon)
        segment = cache.observe_within(x, Fraction(1, 10 ** 6))
        assert segment.contains(0)

    def test_finite_sequence_is_exact(self, cache):
        x = sequence_limit([Fraction(1)], lambda n: 0)
        assert cache.observe_within(x, Fraction(1, 10 ** 20)) == Segment.point(1)

    def test_real_terms(self, cache):
        x = sequence_limit(
            lambda: (PI + Fraction(1, 2 ** n) for n in count()),
            halving_epsilon,
        )
        segment = cache.observe_within(x, Fraction(1, 10 ** 6))
        assert float(segment.midpoint()) == pytest.approx(math.pi, abs=1e-6)

    def test_one_shot_iterator_rejected(self):
        with pytest.raises(InvalidArgument):
            sequence_limit(iter([Fraction(1)]), lambda n: 0)

    def test_negative_epsilon_rejected(self, cache):
        x = sequence_limit([Fraction(1), Fraction(1)], lambda n: -1)
        with pytest.raises(InvalidArgument):
            cache.latest(x)

    def test_segments_are_nested_with_loose_bounds(self, cache):
        """Widening by a non-monotone schedule still yields nested Segments."""
        x = sequence_limit(halves, lambda n: Fraction(1, 2 ** (n // 2)))
        segments = list(islice(cache.observe(x), 20))
        for outer, inner in zip(segments, segments[1:]):
            assert outer.contains_segment(inner)


# =============================================================================
# 3. Series
# =============================================================================

class TestSeries:
    """Tests for series_sum and series_product."""

    def test_geometric_sum(self, cache):
        x = series_sum(halves, halving_epsilon)
        assert cache.observe_within(x, Fraction(1, 10 ** 6)).contains(2)

    def test_geometric_product(self, cache):
        x = series_product(halves, halving_epsilon)
        assert cache.observe_within(x, Fraction(1, 10 ** 6)).contains(0)

    def test_finite_sum(self, cache):
        tails = [Fraction(1, 2), Fraction(1, 6), 0]
        x = series_sum([Fraction(1, 2), Fraction(1, 3), Fraction(1, 6)], tails.__getitem__)
        assert cache.observe_within(x, Fraction(1, 10 ** 9)) == Segment.point(1)


# =============================================================================
# 4. Constants
# =============================================================================

class TestConstants:
    """Tests for E, PI and the integer helpers."""

    def test_e(self, cache):
        segment = cache.observe_within(E, Fraction(1, 10 ** 15))
        assert float(segment.midpoint()) == pytest.approx(math.e, abs=1e-14)

    def test_pi(self, cache):
        segment = cache.observe_within(PI, Fraction(1, 10 ** 15))
        assert float(segment.midpoint()) == pytest.approx(math.pi, abs=1e-14)

    def test_pi_segments_nested(self, cache):
        segments = list(islice(cache.observe(PI), 15))
        for outer, inner in zip(segments, segments[1:]):
            assert outer.contains_segment(inner)

    def test_integer_helpers(self):
        assert list(islice(naturals(), 3)) == [1, 2, 3]
        assert list(islice(naturals_with_zero(), 3)) == [0, 1, 2]
        assert factorial(5) == 120

# ExactReal SDK - Comparators
# Copyright (c) 2024 ExactReal Contributors. All rights reserved.

"""
Comparison of real numbers.

Equality of two reals is undecidable in general, so RealNumber has no
``==`` or ``<``. Comparisons go through a comparator bound to a cache:

- ApproximateComparator treats values closer than ``delta`` as equal and
  always terminates.
- NonEqualComparator is exact but only terminates when the values differ
  (or are both eventually exact).
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from fractions import Fraction
from functools import cmp_to_key
from typing import Callable, Optional

from .cache import EvaluationCache
from .exceptions import InvalidArgument
from .rational import to_fraction
from .real import Real, as_real, is_exact, negate, subtract

__all__ = [
    "RealComparator",
    "ApproximateComparator",
    "NonEqualComparator",
    "natural_compare",
    "sign",
    "absolute",
    "as_key",
]


def natural_compare(a, b) -> int:
    """Three-way comparison of exact rationals."""
    a, b = to_fraction(a), to_fraction(b)
    return (a > b) - (a < b)


class RealComparator(ABC):
    """
    Three-way comparison of reals observed through ``cache``.

    Attributes:
        cache: Cache used for every observation the comparator makes
    """

    def __init__(self, cache: EvaluationCache):
        self.cache = cache

    @property
    def resolution(self) -> Optional[Fraction]:
        """Distance below which two values may compare equal; None when exact."""
        return None

    @abstractmethod
    def compare(self, a: Real, b: Real) -> int:
        """Return -1, 0 or 1."""

    def __call__(self, a: Real, b: Real) -> int:
        return self.compare(a, b)


class ApproximateComparator(RealComparator):
    """
    Compares to a fixed resolution.

    ``compare(a, b)`` observes ``a - b`` to width below ``delta``; it returns
    -1 when the whole Segment lies at or below ``-delta``, 1 when it lies at
    or above ``delta``, and 0 otherwise. Values at distance ``delta`` or more
    are always told apart.
    """

    def __init__(self, cache: EvaluationCache, delta):
        super().__init__(cache)
        delta = to_fraction(delta)
        if delta <= 0:
            raise InvalidArgument(f"Comparator delta must be positive, got {delta}")
        self.delta = delta

    @property
    def resolution(self) -> Fraction:
        return self.delta

    def compare(self, a: Real, b: Real) -> int:
        lo, hi = self.cache.observe_within(subtract(a, b), self.delta)
        if lo <= -self.delta:
            return -1
        if hi >= self.delta:
            return 1
        return 0

    def __repr__(self) -> str:
        return f"ApproximateComparator(delta={self.delta})"


class NonEqualComparator(RealComparator):
    """
    Exact comparison by unbounded refinement.

    Two exact rationals compare directly. Otherwise ``a - b`` is refined
    with ``delta = 1, 1/2, 1/4, ...`` until its Segment excludes zero or
    collapses to a point. Comparing two equal reals that never become exact
    does not terminate.
    """

    def compare(self, a: Real, b: Real) -> int:
        if is_exact(a) and is_exact(b):
            return natural_compare(a, b)
        difference = subtract(a, b)
        delta = Fraction(1)
        while True:
            lo, hi = self.cache.observe_within(difference, delta)
            if lo > 0:
                return 1
            if hi < 0:
                return -1
            if lo == hi:
                return 0
            delta /= 2

    def __repr__(self) -> str:
        return "NonEqualComparator()"


def sign(x: Real, comparator: RealComparator) -> int:
    """Sign of ``x`` as seen by ``comparator``."""
    x = as_real(x)
    if is_exact(x):
        return natural_compare(x, 0)
    return comparator.compare(x, 0)


def absolute(x: Real, comparator: RealComparator) -> Real:
    """``|x|``, choosing the branch with ``comparator``."""
    x = as_real(x)
    if is_exact(x):
        return abs(x)
    return negate(x) if comparator.compare(x, 0) < 0 else x


def as_key(comparator: RealComparator) -> Callable:
    """Sort key wrapping ``comparator``, for ``sorted(reals, key=as_key(cmp))``."""
    return cmp_to_key(comparator.compare)

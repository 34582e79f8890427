# ExactReal SDK - Limits and Series
# Copyright (c) 2024 ExactReal Contributors. All rights reserved.

"""
Combinators that define new real numbers as limits.

- ``limit(x, op)``: unary corner evaluation. ``op`` maps a rational to a
  real and must be monotonic (either direction).
- ``limit_monotonic(a, b, op)``: binary corner evaluation, ``op``
  monotonic in each argument separately. This is how ``+ - * /`` on reals
  are defined.
- ``sequence_limit(terms, get_epsilon)``: the limit of a sequence given an
  a-priori bound on the distance from the k-th term to the limit.
- ``series_sum`` / ``series_product``: the same over running sums and
  products.

Every combinator intersects each new Segment with the previous one, so the
produced Segments are nested even when an error bound is loose.
"""

from __future__ import annotations
from fractions import Fraction
from itertools import accumulate
from typing import Callable, Iterable, Iterator, Optional, Union, TYPE_CHECKING

from .domain import Segment
from .exceptions import InvalidArgument
from .rational import to_fraction
from .real import LazyReal, Real, as_real, is_exact, add, multiply

if TYPE_CHECKING:
    from .cache import EvaluationCache

__all__ = [
    "limit",
    "limit_monotonic",
    "sequence_limit",
    "series_sum",
    "series_product",
]

Terms = Union[Iterable[Real], Callable[[], Iterable[Real]]]
EpsilonSchedule = Callable[[int], Union[Fraction, int]]


def _enclose(values: list, previous: Optional[Segment]) -> Segment:
    segment = Segment(min(values), max(values))
    if previous is not None:
        segment = segment.intersect(previous)
    return segment


def limit(operand: Real, op: Callable[[Fraction], Real], label: Optional[str] = None) -> Real:
    """Apply a monotonic ``op`` to a real number.

    At step k the operand is observed to width below ``2**-k`` and ``op`` is
    evaluated, to the same width, at both ends. The sequence ends once the
    enclosure collapses to a point.

    Args:
        operand: Real argument
        op: Monotonic map from an exact rational to a real
        label: Optional name for the resulting real

    Returns:
        ``op(operand)``; exact when ``operand`` is exact and ``op`` returns
        an exact value
    """
    operand = as_real(operand)
    if is_exact(operand):
        return op(Fraction(operand))

    def rule(cache: 'EvaluationCache') -> Iterator[Segment]:
        delta = Fraction(1)
        previous = None
        while True:
            lo, hi = cache.observe_within(operand, delta)
            values = []
            for corner in {lo, hi}:
                values.extend(cache.observe_within(op(corner), delta))
            segment = _enclose(values, previous)
            yield segment
            if segment.is_point:
                return
            previous = segment
            delta /= 2

    return LazyReal(rule, label)


def limit_monotonic(
    a: Real,
    b: Real,
    op: Callable[[Fraction, Fraction], Real],
    label: Optional[str] = None,
) -> Real:
    """Apply a binary ``op`` monotonic in each argument to two reals.

    At step k both operands are observed to width below ``2**-k``, ``op`` is
    evaluated at the four corners to the same width, and the extremes of
    the eight resulting endpoints form the next Segment.
    """
    a, b = as_real(a), as_real(b)
    if is_exact(a) and is_exact(b):
        return op(Fraction(a), Fraction(b))

    def rule(cache: 'EvaluationCache') -> Iterator[Segment]:
        delta = Fraction(1)
        previous = None
        while True:
            a_lo, a_hi = cache.observe_within(a, delta)
            b_lo, b_hi = cache.observe_within(b, delta)
            values = []
            for x in {a_lo, a_hi}:
                for y in {b_lo, b_hi}:
                    values.extend(cache.observe_within(op(x, y), delta))
            segment = _enclose(values, previous)
            yield segment
            if segment.is_point:
                return
            previous = segment
            delta /= 2

    return LazyReal(rule, label)


def _term_factory(terms: Terms) -> Callable[[], Iterable[Real]]:
    if callable(terms):
        return terms
    if iter(terms) is terms:
        raise InvalidArgument(
            "terms must be re-iterable or a zero-argument factory, not a one-shot iterator"
        )
    return lambda: terms


def sequence_limit(
    terms: Terms,
    get_epsilon: EpsilonSchedule,
    label: Optional[str] = None,
) -> Real:
    """Limit of a sequence of reals.

    Step k observes the k-th term to width below ``2**-k`` and widens that
    Segment by ``get_epsilon(k)`` on both sides. ``get_epsilon(k)`` must
    bound the distance between the k-th term and the limit; the sequence of
    Segments ends with the terms if they are finite.

    Args:
        terms: Re-iterable collection or zero-argument factory of terms
        get_epsilon: Residual error bound for step k
        label: Optional name for the resulting real

    Raises:
        InvalidArgument: If ``terms`` is a one-shot iterator
    """
    factory = _term_factory(terms)

    def rule(cache: 'EvaluationCache') -> Iterator[Segment]:
        previous = None
        max_delta = Fraction(1)
        for k, term in enumerate(factory()):
            lo, hi = cache.observe_within(term, max_delta)
            epsilon = to_fraction(get_epsilon(k))
            if epsilon < 0:
                raise InvalidArgument(f"Epsilon for step {k} is negative: {epsilon}")
            segment = _enclose([lo - epsilon, hi + epsilon], previous)
            yield segment
            previous = segment
            max_delta /= 2

    return LazyReal(rule, label)


def series_sum(terms: Terms, get_epsilon: EpsilonSchedule, label: Optional[str] = None) -> Real:
    """``Σ terms``; ``get_epsilon(k)`` bounds the tail after the k-th partial sum."""
    factory = _term_factory(terms)
    return sequence_limit(lambda: accumulate(factory(), add), get_epsilon, label)


def series_product(terms: Terms, get_epsilon: EpsilonSchedule, label: Optional[str] = None) -> Real:
    """``Π terms``; ``get_epsilon(k)`` bounds the distance from the k-th partial product."""
    factory = _term_factory(terms)
    return sequence_limit(lambda: accumulate(factory(), multiply), get_epsilon, label)

# ExactReal SDK - Real Numbers
# Copyright (c) 2024 ExactReal Contributors. All rights reserved.

"""
Lazy exact real numbers.

A RealNumber is a rule that, under an evaluation cache, produces a sequence
of nested rational Segments converging to its value. The rule is only ever
consumed through an ``EvaluationCache`` so that concurrent and repeated
observation share one traversal.

``Fraction`` and ``int`` are the exact degenerate reals: they interoperate
with every operator here and never go through a cache registry.

Arithmetic is built generically from the corner-evaluation combinators in
``exactreal.limits``: observe the operands to an error bound, apply the
rational operation at every corner, take the extremes.

Example:
    >>> from exactreal.cache import SimpleEvaluationCache
    >>> from exactreal.constants import PI
    >>> cache = SimpleEvaluationCache()
    >>> lo, hi = cache.observe_within(PI * 2 - 1, Fraction(1, 1000))
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from fractions import Fraction
from typing import Callable, Iterator, Optional, Union, TYPE_CHECKING
import numbers
import operator

from .domain import Segment
from .exceptions import DivisionByZero
from .rational import rational_pow, to_fraction

if TYPE_CHECKING:
    from .cache import EvaluationCache

__all__ = [
    "RealNumber",
    "LazyReal",
    "Real",
    "is_exact",
    "as_real",
    "add",
    "subtract",
    "multiply",
    "divide",
    "negate",
    "reciprocal",
    "real_pow",
]


class RealNumber(ABC):
    """
    Base class for lazily refined real numbers.

    Subclasses implement ``_observe(cache)``: a generator of Segments, each
    contained in the previous one, whose widths tend to zero. A sequence may
    end only after reaching a single-point Segment.

    Consumers never call ``_observe`` directly; use ``cache.observe(x)`` or
    ``cache.observe_within(x, max_delta)``.

    RealNumber defines no equality: two reals are compared through a
    comparator from ``exactreal.comparison``. Identity is what the cache
    keys on.
    """

    label: Optional[str] = None

    @abstractmethod
    def _observe(self, cache: 'EvaluationCache') -> Iterator[Segment]:
        ...

    def __add__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return add(self, other)

    def __radd__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return add(other, self)

    def __sub__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return subtract(self, other)

    def __rsub__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return subtract(other, self)

    def __mul__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return multiply(self, other)

    def __rmul__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return multiply(other, self)

    def __truediv__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return divide(self, other)

    def __rtruediv__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return divide(other, self)

    def __neg__(self):
        return negate(self)

    def __pos__(self):
        return self

    def __pow__(self, exponent):
        if isinstance(exponent, bool) or not isinstance(exponent, numbers.Integral):
            return NotImplemented
        return real_pow(self, int(exponent))

    def __repr__(self) -> str:
        name = self.label or f"0x{id(self):x}"
        return f"<{type(self).__name__} {name}>"


class LazyReal(RealNumber):
    """
    A RealNumber defined by a generator function.

    Args:
        rule: Called with the observing cache; returns an iterator of Segments
        label: Optional name used in repr and debug logs
    """

    def __init__(
        self,
        rule: Callable[['EvaluationCache'], Iterator[Segment]],
        label: Optional[str] = None,
    ):
        self._rule = rule
        self.label = label

    def _observe(self, cache: 'EvaluationCache') -> Iterator[Segment]:
        return iter(self._rule(cache))


Real = Union[RealNumber, Fraction, int]


def is_exact(value) -> bool:
    """True for the exact degenerate reals (int and Fraction)."""
    return isinstance(value, (int, Fraction)) and not isinstance(value, bool)


def _is_operand(value) -> bool:
    return isinstance(value, RealNumber) or is_exact(value)


def as_real(value) -> Real:
    """Return a RealNumber unchanged, anything else as an exact Fraction."""
    if isinstance(value, RealNumber):
        return value
    return to_fraction(value)


def _is(value, constant: int) -> bool:
    return is_exact(value) and value == constant


def add(a: Real, b: Real) -> Real:
    a, b = as_real(a), as_real(b)
    if is_exact(a) and is_exact(b):
        return a + b
    if _is(a, 0):
        return b
    if _is(b, 0):
        return a
    from .limits import limit_monotonic
    return limit_monotonic(a, b, operator.add, label="add")


def subtract(a: Real, b: Real) -> Real:
    a, b = as_real(a), as_real(b)
    if is_exact(a) and is_exact(b):
        return a - b
    if _is(b, 0):
        return a
    if _is(a, 0):
        return negate(b)
    from .limits import limit_monotonic
    return limit_monotonic(a, b, operator.sub, label="subtract")


def multiply(a: Real, b: Real) -> Real:
    a, b = as_real(a), as_real(b)
    if is_exact(a) and is_exact(b):
        return a * b
    if is_exact(b):
        a, b = b, a
    if is_exact(a):
        if a == 0:
            return Fraction(0)
        if a == 1:
            return b
        if a == -1:
            return negate(b)
    from .limits import limit_monotonic
    return limit_monotonic(a, b, operator.mul, label="multiply")


def negate(a: Real) -> Real:
    a = as_real(a)
    if is_exact(a):
        return -a
    from .limits import limit
    return limit(a, operator.neg, label="negate")


def reciprocal(a: Real) -> Real:
    """``1 / a``; the divisor is refined until its Segment excludes zero."""
    a = as_real(a)
    if is_exact(a):
        if a == 0:
            raise DivisionByZero("Division by exact zero")
        return 1 / Fraction(a)

    def rule(cache: 'EvaluationCache') -> Iterator[Segment]:
        delta = Fraction(1)
        previous = None
        while True:
            lo, hi = cache.observe_within(a, delta)
            if lo == hi == 0:
                raise DivisionByZero(f"Division by {a!r}, which is exactly zero")
            if lo > 0 or hi < 0:
                segment = Segment(1 / hi, 1 / lo)
                if previous is not None:
                    segment = segment.intersect(previous)
                yield segment
                if segment.is_point:
                    return
                previous = segment
            delta /= 2

    return LazyReal(rule, label="reciprocal")


def divide(a: Real, b: Real) -> Real:
    a, b = as_real(a), as_real(b)
    if is_exact(b):
        if b == 0:
            raise DivisionByZero("Division by exact zero")
        if b == 1:
            return a
        if b == -1:
            return negate(a)
        if is_exact(a):
            return Fraction(a) / b
        return multiply(a, 1 / Fraction(b))
    return multiply(a, reciprocal(b))


def real_pow(x: Real, exponent: int) -> Real:
    """Integer power by squaring; a negative exponent inverts first."""
    x = as_real(x)
    if is_exact(x):
        return rational_pow(x, exponent)
    if exponent == 0:
        return Fraction(1)
    if exponent == 1:
        return x
    if exponent < 0:
        return real_pow(reciprocal(x), -exponent)
    if exponent % 2 == 0:
        half = real_pow(x, exponent // 2)
        return multiply(half, half)
    return multiply(x, real_pow(x, exponent - 1))

# ExactReal SDK - Derived Operations
# Copyright (c) 2024 ExactReal Contributors. All rights reserved.

"""
Roots, powers, exponentials and logarithms of real numbers.

All of these are thin clients of the search engine and the limit
combinators:

- ``root(x, n)`` inverts ``t -> t**n``: by bisection for a rational ``x``,
  by exact ternary search for a real one.
- ``exp`` sums its power series after halving a positive argument into
  ``(0, 1/2]`` and squares the result back; ``exp(-q)`` is ``1 / exp(q)``.
- ``ln`` inverts ``exp`` after splitting off a power of two; ``log``
  divides two natural logarithms.
- ``power`` dispatches on the exponent: integer, rational or real.

Preconditions are checked up front and raise InvalidArgument.

Example:
    >>> cube_root = root(2, 3)
    >>> floor_to_rational(cube_root, fraction_digits=5)
    Fraction(15749, 12500)
"""

from __future__ import annotations
from fractions import Fraction
from typing import Iterator, Optional
import logging
import numbers

from .comparison import RealComparator
from .config import EvaluationConfig
from .constants import LN2
from .domain import Bounds, Segment
from .exceptions import InvalidArgument
from .limits import limit
from .rational import to_fraction
from .real import (
    LazyReal, Real, RealNumber, add, as_real, divide, is_exact, multiply, real_pow, reciprocal,
)
from .search import binary_search, reverse_value, search

logger = logging.getLogger(__name__)

__all__ = [
    "square",
    "root",
    "rational_power",
    "power",
    "exp",
    "ln",
    "log",
]

_HALF = Fraction(1, 2)


def _comparator_or_default(comparator: Optional[RealComparator]) -> RealComparator:
    if comparator is not None:
        return comparator
    config = EvaluationConfig()
    return config.make_comparator(config.make_cache())


def _sign(x: Real, comparator: RealComparator) -> int:
    if is_exact(x):
        return (x > 0) - (x < 0)
    return comparator.compare(x, 0)


def square(x: Real) -> Real:
    """``x * x``."""
    x = as_real(x)
    if is_exact(x):
        return x * x
    return multiply(x, x)


def root(x: Real, n: int, comparator: Optional[RealComparator] = None) -> Real:
    """The real ``n``-th root of ``x``.

    Args:
        x: Radicand; must be non-negative for even ``n``
        n: Positive root index
        comparator: Used to check the sign of a real ``x``; its cache also
            serves the search

    Returns:
        The root; exact when it is rational and reached by a probe

    Raises:
        InvalidArgument: For ``n <= 0`` or an even root of a negative number
    """
    if isinstance(n, bool) or not isinstance(n, numbers.Integral) or n <= 0:
        raise InvalidArgument(f"Root index must be a positive integer, got {n!r}")
    n = int(n)
    x = as_real(x)
    if n == 1:
        return x

    even = n % 2 == 0
    comparator = _comparator_or_default(comparator)
    if even and _sign(x, comparator) < 0:
        raise InvalidArgument(f"Even root of negative number {x!r}")
    bounds = Bounds.at_least(0) if even else Bounds.whole_line()

    def nth_power(t: Fraction) -> Fraction:
        return t ** n

    if is_exact(x):
        result = binary_search(x, nth_power, bounds)
    else:
        result = reverse_value(x, nth_power, bounds, comparator.cache)
    if result is None:
        raise InvalidArgument(f"{x!r} has no real root of index {n}")
    return result


def rational_power(base: Real, exponent, comparator: Optional[RealComparator] = None) -> Real:
    """``base ** (p/q)`` computed as the ``q``-th root of ``base ** p``."""
    exponent = to_fraction(exponent)
    powered = real_pow(as_real(base), exponent.numerator)
    if exponent.denominator == 1:
        return powered
    return root(powered, exponent.denominator, comparator)


def power(x: Real, exponent, comparator: Optional[RealComparator] = None) -> Real:
    """``x ** exponent`` for an integer, rational or real exponent.

    A real (non-rational) exponent requires ``exponent >= 0`` and
    ``x >= 0`` and is computed as ``exp(exponent * ln(x))``.

    Raises:
        InvalidArgument: For a negative base or negative real exponent
    """
    x = as_real(x)
    if not isinstance(exponent, RealNumber):
        exponent = to_fraction(exponent)
        if exponent.denominator == 1:
            return real_pow(x, exponent.numerator)
        return rational_power(x, exponent, comparator)

    comparator = _comparator_or_default(comparator)
    if comparator.compare(exponent, 0) < 0:
        raise InvalidArgument(f"Real exponent {exponent!r} must be non-negative")
    if _sign(x, comparator) < 0:
        raise InvalidArgument(f"Base {x!r} of a real power must be non-negative")
    if is_exact(x) and x == 0:
        return Fraction(0)
    return exp(multiply(exponent, ln(x, comparator)))


def _round_outward(lo: Fraction, hi: Fraction, bits: int):
    scale = 1 << bits
    lo_scaled = lo.numerator * scale // lo.denominator
    hi_scaled = -(-hi.numerator * scale // hi.denominator)
    return Fraction(lo_scaled, scale), Fraction(hi_scaled, scale)


def _exp_rational(q: Fraction) -> Real:
    q = to_fraction(q)
    if q == 0:
        return Fraction(1)
    if q < 0:
        return reciprocal(_exp_rational(-q))

    halvings = 0
    r = q
    while r > _HALF:
        r /= 2
        halvings += 1
    squarings = 1 << halvings
    logger.debug("exp(%s) reduced by %d halvings", q, halvings)

    def rule(cache) -> Iterator[Segment]:
        partial = Fraction(1)
        next_term = r
        k = 0
        previous = None
        while True:
            # Terms are positive and, for r <= 1/2, the tail is below twice its first term.
            bits = 2 * k + 16
            lo, hi = _round_outward(partial, partial + 2 * next_term, bits)
            lo, hi = _round_outward(lo ** squarings, hi ** squarings, bits)
            segment = Segment(lo, hi)
            if previous is not None:
                segment = segment.intersect(previous)
            yield segment
            previous = segment
            k += 1
            partial += next_term
            next_term = next_term * r / (k + 1)

    return LazyReal(rule, label=f"exp({q})")


def exp(x: Real) -> Real:
    """The exponential function."""
    x = as_real(x)
    if is_exact(x):
        return _exp_rational(x)
    return limit(x, _exp_rational, label="exp")


def _binary_exponent(q: Fraction) -> int:
    """``k`` with ``2**k <= q < 2**(k + 1)`` for a positive rational ``q``."""
    k = q.numerator.bit_length() - q.denominator.bit_length()
    if Fraction(2) ** k > q:
        k -= 1
    return k


def _split_binary(x: Real, comparator: RealComparator):
    """Write a positive ``x`` as ``2**k * m`` with ``1 <= m < 4``."""
    if is_exact(x):
        k = _binary_exponent(Fraction(x))
    else:
        delta = Fraction(1)
        while True:
            lo, hi = comparator.cache.observe_within(x, delta)
            if hi <= 0:
                raise InvalidArgument(f"Logarithm of non-positive number {x!r}")
            if lo > 0 and hi < 2 * lo:
                break
            delta /= 2
        k = _binary_exponent(lo)
    return k, multiply(x, Fraction(2) ** -k)


def ln(x: Real, comparator: Optional[RealComparator] = None) -> Real:
    """Natural logarithm.

    ``x`` is split as ``2**k * m`` with ``1 <= m < 4``; ``ln(m)`` is found by
    inverting ``exp`` on ``[0, +∞)``, where it lies in ``[0, 2)``, and
    ``k * LN2`` is added back.

    Raises:
        InvalidArgument: If ``x`` is not positive
    """
    x = as_real(x)
    if is_exact(x):
        if x <= 0:
            raise InvalidArgument(f"Logarithm of non-positive number {x}")
        if x == 1:
            return Fraction(0)
    comparator = _comparator_or_default(comparator)
    if not is_exact(x) and comparator.compare(x, 0) < 0:
        raise InvalidArgument(f"Logarithm of negative number {x!r}")

    k, m = _split_binary(x, comparator)
    logger.debug("ln(%r) split with binary exponent %d", x, k)
    if is_exact(m) and m == 1:
        return multiply(k, LN2)
    result = search(m, _exp_rational, Bounds.at_least(0), comparator)
    if result is None:
        raise InvalidArgument(f"Logarithm of {x!r} is undefined")
    return add(multiply(k, LN2), result)


def log(x: Real, base: Real, comparator: Optional[RealComparator] = None) -> Real:
    """Logarithm of ``x`` to ``base``, as ``ln(x) / ln(base)``.

    Raises:
        InvalidArgument: If ``x`` or ``base`` is not positive, or ``base == 1``
    """
    x = as_real(x)
    base = as_real(base)
    comparator = _comparator_or_default(comparator)
    if is_exact(base):
        if base <= 0 or base == 1:
            raise InvalidArgument(f"Logarithm base must be positive and not 1, got {base}")
    elif comparator.compare(base, 0) < 0:
        raise InvalidArgument(f"Logarithm base {base!r} must be positive")
    if is_exact(x):
        if x <= 0:
            raise InvalidArgument(f"Logarithm of non-positive number {x}")
        if x == 1:
            return Fraction(0)
        if is_exact(base) and x == base:
            return Fraction(1)
    return divide(ln(x, comparator), ln(base, comparator))

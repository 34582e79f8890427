# ExactReal SDK - Rounding
# Copyright (c) 2024 ExactReal Contributors. All rights reserved.

"""
Rounding rationals and reals to a number of fraction digits.

The rational operations walk the first ``fraction_digits`` digits of the
expansion, which yields the enclosing Segment
``[truncated, truncated ± radix**-fraction_digits]`` and the next digit. Floor
takes the lower edge, ceiling the upper edge, and round picks an edge from
the next digit alone:

- ``value >= 0``: the upper edge iff ``2 * digit >= radix``
- ``value < 0``: the upper edge (toward zero) iff ``2 * digit <= radix``

so ``round(1.5) == 2`` and ``round(-1.5) == -1``.

Reals are rounded by applying the rational operation to both ends of ever
tighter Segments until the two answers agree. For a real sitting exactly on
a rounding boundary without ever becoming exact this does not terminate.
"""

from __future__ import annotations
from fractions import Fraction
from typing import Callable, Optional, TypeVar

from .cache import EvaluationCache, SimpleEvaluationCache
from .domain import Segment
from .exceptions import InvalidArgument, PrecisionUnattainable
from .rational import check_radix, digit_sequence, integer_part, to_fraction
from .real import Real, as_real, is_exact

__all__ = [
    "proceed_with_first_digits",
    "round_rational",
    "floor_rational",
    "ceiling_rational",
    "round_to_rational",
    "floor_to_rational",
    "ceiling_to_rational",
]

T = TypeVar("T")


def proceed_with_first_digits(
    value,
    radix: int,
    fraction_digits: int,
    proceed: Callable[[Segment, int], T],
) -> T:
    """Walk the first fraction digits of a rational.

    Calls ``proceed(segment, next_digit)`` exactly once, where ``segment``
    holds ``value`` between its truncation to ``fraction_digits`` digits and
    the next representable number away from zero, and ``next_digit`` is the
    following digit. When the expansion ends within ``fraction_digits``
    digits, ``segment`` is the single point ``value`` and ``next_digit`` is 0.

    Args:
        value: Exact rational
        radix: Radix of the expansion
        fraction_digits: Number of fraction digits kept
        proceed: Continuation receiving the Segment and the next digit

    Returns:
        Whatever ``proceed`` returns
    """
    radix = check_radix(radix)
    if fraction_digits < 0:
        raise InvalidArgument(f"Fraction digit count must be non-negative, got {fraction_digits}")
    value = to_fraction(value)
    direction = -1 if value < 0 else 1

    truncated = Fraction(integer_part(value))
    digits = digit_sequence(value, radix).digits
    scale = Fraction(1)
    for _ in range(fraction_digits):
        digit = next(digits, None)
        if digit is None:
            return proceed(Segment.point(value), 0)
        scale /= radix
        truncated += direction * digit * scale

    next_digit = next(digits, None)
    if next_digit is None:
        return proceed(Segment.point(value), 0)
    step = Fraction(direction, radix ** fraction_digits)
    other = truncated + step
    return proceed(Segment(min(truncated, other), max(truncated, other)), next_digit)


def round_rational(value, radix: int = 10, fraction_digits: int = 0) -> Fraction:
    """Round a rational to ``fraction_digits`` digits (see module docstring for ties)."""
    value = to_fraction(value)

    def choose(segment: Segment, digit: int) -> Fraction:
        if value >= 0:
            return segment.hi if 2 * digit >= radix else segment.lo
        return segment.hi if 2 * digit <= radix else segment.lo

    return proceed_with_first_digits(value, radix, fraction_digits, choose)


def floor_rational(value, radix: int = 10, fraction_digits: int = 0) -> Fraction:
    """Largest ``fraction_digits``-digit number not above ``value``."""
    return proceed_with_first_digits(value, radix, fraction_digits, lambda s, _: s.lo)


def ceiling_rational(value, radix: int = 10, fraction_digits: int = 0) -> Fraction:
    """Smallest ``fraction_digits``-digit number not below ``value``."""
    return proceed_with_first_digits(value, radix, fraction_digits, lambda s, _: s.hi)


def _round_real(
    x: Real,
    cache: Optional[EvaluationCache],
    rational_op: Callable[[Fraction], Fraction],
) -> Fraction:
    x = as_real(x)
    if is_exact(x):
        return rational_op(Fraction(x))
    cache = cache or SimpleEvaluationCache()
    for segment in cache.observe(x):
        lower = rational_op(segment.lo)
        if segment.is_point:
            return lower
        if lower == rational_op(segment.hi):
            return lower
    raise PrecisionUnattainable(f"{x!r} ended before its rounding was decided")


def round_to_rational(
    x: Real,
    cache: Optional[EvaluationCache] = None,
    radix: int = 10,
    fraction_digits: int = 0,
) -> Fraction:
    """Round a real to ``fraction_digits`` digits in ``radix``."""
    return _round_real(x, cache, lambda q: round_rational(q, radix, fraction_digits))


def floor_to_rational(
    x: Real,
    cache: Optional[EvaluationCache] = None,
    radix: int = 10,
    fraction_digits: int = 0,
) -> Fraction:
    """Floor a real to ``fraction_digits`` digits in ``radix``."""
    return _round_real(x, cache, lambda q: floor_rational(q, radix, fraction_digits))


def ceiling_to_rational(
    x: Real,
    cache: Optional[EvaluationCache] = None,
    radix: int = 10,
    fraction_digits: int = 0,
) -> Fraction:
    """Ceiling of a real to ``fraction_digits`` digits in ``radix``."""
    return _round_real(x, cache, lambda q: ceiling_rational(q, radix, fraction_digits))

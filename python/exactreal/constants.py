# ExactReal SDK - Constants
# Copyright (c) 2024 ExactReal Contributors. All rights reserved.

"""
Named constants defined as series over the exact engine.

E is ``Σ 1/n!``, PI uses Machin's formula
``π = 16·atan(1/5) - 4·atan(1/239)`` and LN2 is ``Σ 1/(n·2**n)``. All are
ordinary RealNumbers; share a cache between uses to avoid recomputing their
partial sums.
"""

from __future__ import annotations
from fractions import Fraction
from itertools import count
from typing import Iterator
import math

from .limits import series_sum

__all__ = [
    "naturals",
    "naturals_with_zero",
    "factorial",
    "E",
    "PI",
    "LN2",
]


def naturals() -> Iterator[int]:
    """1, 2, 3, ..."""
    return count(1)


def naturals_with_zero() -> Iterator[int]:
    """0, 1, 2, ..."""
    return count(0)


def factorial(n: int) -> int:
    return math.factorial(n)


def _e_terms() -> Iterator[Fraction]:
    return (Fraction(1, factorial(n)) for n in naturals_with_zero())


def _e_tail(n: int) -> Fraction:
    # Σ_{i>n} 1/i! <= 1/(n·n!) for n >= 1
    if n == 0:
        return Fraction(2)
    return Fraction(1, n * factorial(n))


def _atan_term(n: int, inverse: int) -> Fraction:
    power = 2 * n + 1
    return Fraction((-1) ** n, power * inverse ** power)


def _pi_terms() -> Iterator[Fraction]:
    return (16 * _atan_term(n, 5) - 4 * _atan_term(n, 239) for n in naturals_with_zero())


def _pi_tail(n: int) -> Fraction:
    # Alternating series: the tail is bounded by the first omitted terms.
    power = 2 * n + 3
    return Fraction(16, power * 5 ** power) + Fraction(4, power * 239 ** power)


def _ln2_terms() -> Iterator[Fraction]:
    return (Fraction(1, n * 2 ** n) for n in naturals())


def _ln2_tail(n: int) -> Fraction:
    # Terms after the n-th partial sum start at 1/((n+2)·2**(n+2)) and at least halve.
    return Fraction(1, (n + 2) * 2 ** (n + 1))


E = series_sum(_e_terms, _e_tail, label="e")
PI = series_sum(_pi_terms, _pi_tail, label="pi")
LN2 = series_sum(_ln2_terms, _ln2_tail, label="ln2")

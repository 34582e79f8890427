# ExactReal SDK - Bounds and Segments
# Copyright (c) 2024 ExactReal Contributors. All rights reserved.

"""
Bound and interval value types.

A Bound is one edge of a range: ``Inclusive(v)``, ``Exclusive(v)``,
``MINUS_INFINITY`` or ``PLUS_INFINITY``. ``Bounds`` pairs two edges and is
used to describe search domains. ``Segment`` is the closed rational
interval ``[lo, hi]``; it is the only interval type ever returned by
observing a real number.

Example:
    >>> b = Bounds.at_least(0)
    >>> str(b)
    '[0, +∞)'
    >>> lo, hi = Segment(1, 2)
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from fractions import Fraction
from typing import Optional, Union

from .exceptions import InvalidArgument, InvalidInterval
from .rational import FractionFormat, format_rational, to_fraction

__all__ = [
    "Inclusive",
    "Exclusive",
    "Infinity",
    "MINUS_INFINITY",
    "PLUS_INFINITY",
    "Bound",
    "Bounds",
    "Segment",
    "normalize_bounds",
]


class Infinity(Enum):
    """The two infinite edges. MINUS may only be a lower edge, PLUS only an upper one."""
    MINUS = "-∞"
    PLUS = "+∞"

    @property
    def is_finite(self) -> bool:
        return False

    @property
    def is_inclusive(self) -> bool:
        return False

    @property
    def can_be_lower(self) -> bool:
        return self is Infinity.MINUS

    @property
    def can_be_upper(self) -> bool:
        return self is Infinity.PLUS

    def format(self, fraction_format: FractionFormat = FractionFormat.DIVISION, radix: int = 10) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value


MINUS_INFINITY = Infinity.MINUS
PLUS_INFINITY = Infinity.PLUS


@dataclass(frozen=True)
class _FiniteBound:
    value: Fraction

    def __post_init__(self):
        object.__setattr__(self, "value", to_fraction(self.value))

    @property
    def is_finite(self) -> bool:
        return True

    @property
    def can_be_lower(self) -> bool:
        return True

    @property
    def can_be_upper(self) -> bool:
        return True

    def format(self, fraction_format: FractionFormat = FractionFormat.DIVISION, radix: int = 10) -> str:
        return format_rational(self.value, fraction_format, radix)


@dataclass(frozen=True)
class Inclusive(_FiniteBound):
    """Closed edge: the value itself belongs to the range."""

    @property
    def is_inclusive(self) -> bool:
        return True


@dataclass(frozen=True)
class Exclusive(_FiniteBound):
    """Open edge: the range gets arbitrarily close to the value but excludes it."""

    @property
    def is_inclusive(self) -> bool:
        return False


Bound = Union[Inclusive, Exclusive, Infinity]


@dataclass(frozen=True)
class Segment:
    """
    Closed rational interval ``[lo, hi]``.

    Attributes:
        lo: Lower endpoint (exact)
        hi: Upper endpoint (exact), ``hi >= lo``
    """
    lo: Fraction
    hi: Fraction

    def __post_init__(self):
        lo = to_fraction(self.lo)
        hi = to_fraction(self.hi)
        if lo > hi:
            raise InvalidInterval(f"Segment lower end {lo} exceeds upper end {hi}", lo, hi)
        object.__setattr__(self, "lo", lo)
        object.__setattr__(self, "hi", hi)

    @classmethod
    def point(cls, value) -> 'Segment':
        """Single-point Segment ``[value, value]``."""
        value = to_fraction(value)
        return cls(value, value)

    @property
    def diff(self) -> Fraction:
        return self.hi - self.lo

    @property
    def is_point(self) -> bool:
        return self.lo == self.hi

    def width(self) -> Fraction:
        return self.hi - self.lo

    def midpoint(self) -> Fraction:
        return (self.lo + self.hi) / 2

    def contains(self, value) -> bool:
        value = to_fraction(value)
        return self.lo <= value <= self.hi

    def contains_segment(self, other: 'Segment') -> bool:
        return self.lo <= other.lo and other.hi <= self.hi

    def intersect(self, other: 'Segment') -> 'Segment':
        """Common part of two Segments; raises InvalidInterval when disjoint."""
        lo = max(self.lo, other.lo)
        hi = min(self.hi, other.hi)
        if lo > hi:
            raise InvalidInterval(f"Segments {self} and {other} are disjoint", lo, hi)
        if lo == self.lo and hi == self.hi:
            return self
        return Segment(lo, hi)

    def to_bounds(self) -> 'Bounds':
        return Bounds(Inclusive(self.lo), Inclusive(self.hi))

    def format(self, fraction_format: FractionFormat = FractionFormat.DIVISION, radix: int = 10) -> str:
        return (
            f"[{format_rational(self.lo, fraction_format, radix)}, "
            f"{format_rational(self.hi, fraction_format, radix)}]"
        )

    def __iter__(self):
        yield self.lo
        yield self.hi

    def __str__(self) -> str:
        return self.format()


@dataclass(frozen=True)
class Bounds:
    """
    A validated pair of edges describing a search domain.

    The lower edge must be able to serve as a lower edge (anything but
    PLUS_INFINITY) and likewise for the upper one. Finite edges must satisfy
    ``lower <= upper``, strictly when either edge is exclusive.

    Attributes:
        lower: Lower edge
        upper: Upper edge
    """
    lower: Bound
    upper: Bound

    def __post_init__(self):
        if not self.lower.can_be_lower:
            raise InvalidInterval(f"{self.lower} cannot be a lower edge", self.lower, self.upper)
        if not self.upper.can_be_upper:
            raise InvalidInterval(f"{self.upper} cannot be an upper edge", self.lower, self.upper)
        if self.lower.is_finite and self.upper.is_finite:
            lo, hi = self.lower.value, self.upper.value
            if lo > hi:
                raise InvalidInterval(
                    f"Lower edge {lo} exceeds upper edge {hi}", self.lower, self.upper
                )
            if lo == hi and not (self.lower.is_inclusive and self.upper.is_inclusive):
                raise InvalidInterval(
                    f"Empty range at {lo}: equal edges must both be inclusive",
                    self.lower, self.upper,
                )

    @classmethod
    def closed(cls, lo, hi) -> 'Bounds':
        return cls(Inclusive(lo), Inclusive(hi))

    @classmethod
    def open(cls, lo, hi) -> 'Bounds':
        return cls(Exclusive(lo), Exclusive(hi))

    @classmethod
    def at_least(cls, lo) -> 'Bounds':
        return cls(Inclusive(lo), PLUS_INFINITY)

    @classmethod
    def at_most(cls, hi) -> 'Bounds':
        return cls(MINUS_INFINITY, Inclusive(hi))

    @classmethod
    def greater_than(cls, lo) -> 'Bounds':
        return cls(Exclusive(lo), PLUS_INFINITY)

    @classmethod
    def less_than(cls, hi) -> 'Bounds':
        return cls(MINUS_INFINITY, Exclusive(hi))

    @classmethod
    def whole_line(cls) -> 'Bounds':
        return cls(MINUS_INFINITY, PLUS_INFINITY)

    @property
    def diff(self) -> Optional[Fraction]:
        """``upper - lower`` when both edges are finite, else None."""
        if self.lower.is_finite and self.upper.is_finite:
            return self.upper.value - self.lower.value
        return None

    @property
    def is_segment(self) -> bool:
        return self.lower.is_inclusive and self.upper.is_inclusive

    def to_segment(self) -> Segment:
        if not self.is_segment:
            raise InvalidArgument(f"{self} is not a closed segment")
        return Segment(self.lower.value, self.upper.value)

    def format(self, fraction_format: FractionFormat = FractionFormat.DIVISION, radix: int = 10) -> str:
        left = "[" if self.lower.is_inclusive else "("
        right = "]" if self.upper.is_inclusive else ")"
        return (
            f"{left}{self.lower.format(fraction_format, radix)}, "
            f"{self.upper.format(fraction_format, radix)}{right}"
        )

    def __str__(self) -> str:
        return self.format()


def _as_bound(value, infinity: Infinity) -> Bound:
    if value is None:
        return infinity
    if isinstance(value, (Inclusive, Exclusive, Infinity)):
        return value
    return Inclusive(value)


def normalize_bounds(obj) -> Bounds:
    """Normalize a search domain to Bounds.

    Accepts Bounds, a Segment, a ``(lo, hi)`` tuple whose items are bounds,
    rationals, or None for an infinite side, and None for the whole line.
    """
    if obj is None:
        return Bounds.whole_line()
    if isinstance(obj, Bounds):
        return obj
    if isinstance(obj, Segment):
        return obj.to_bounds()
    if isinstance(obj, tuple) and len(obj) == 2:
        return Bounds(_as_bound(obj[0], MINUS_INFINITY), _as_bound(obj[1], PLUS_INFINITY))
    raise InvalidArgument(f"Cannot interpret {obj!r} as bounds")

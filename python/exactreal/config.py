# ExactReal SDK - Configuration
# Copyright (c) 2024 ExactReal Contributors. All rights reserved.

"""
Evaluation defaults shared by comparators, rounding and the examples.

Example:
    >>> config = EvaluationConfig(fraction_digits=2)
    >>> config.floor(PI)
    Fraction(157, 50)
"""

from __future__ import annotations
from dataclasses import dataclass
from fractions import Fraction
from typing import Optional, TYPE_CHECKING

from .exceptions import InvalidArgument

if TYPE_CHECKING:
    from .cache import EvaluationCache
    from .comparison import ApproximateComparator


@dataclass(frozen=True)
class EvaluationConfig:
    """
    Configuration for observing and comparing real numbers.

    Attributes:
        precision_digits: Comparator resolution as a count of radix digits,
            i.e. two reals closer than radix**-precision_digits compare equal
        radix: Radix used for rounding and comparator resolution
        fraction_digits: Fraction digits kept by ``round``, ``floor`` and
            ``ceiling``
    """
    precision_digits: int = 5
    radix: int = 10
    fraction_digits: int = 5

    def __post_init__(self):
        if self.radix < 2:
            raise InvalidArgument(f"Radix must be at least 2, got {self.radix}")
        if self.precision_digits < 0:
            raise InvalidArgument(
                f"Precision digits must be non-negative, got {self.precision_digits}"
            )
        if self.fraction_digits < 0:
            raise InvalidArgument(
                f"Fraction digits must be non-negative, got {self.fraction_digits}"
            )

    @property
    def comparator_delta(self) -> Fraction:
        """Resolution of comparators built from this config."""
        return Fraction(1, self.radix ** self.precision_digits)

    @classmethod
    def quick(cls) -> 'EvaluationConfig':
        """Coarse comparisons, useful for interactive exploration."""
        return cls(precision_digits=2, fraction_digits=2)

    @classmethod
    def precise(cls) -> 'EvaluationConfig':
        """Fine comparisons for inverting functions near flat regions."""
        return cls(precision_digits=20, fraction_digits=10)

    def make_cache(self) -> 'EvaluationCache':
        """Create a fresh shared cache."""
        from .cache import SimpleEvaluationCache
        return SimpleEvaluationCache()

    def make_comparator(self, cache: 'EvaluationCache') -> 'ApproximateComparator':
        """Create an approximate comparator bound to ``cache``."""
        from .comparison import ApproximateComparator
        return ApproximateComparator(cache, self.comparator_delta)

    def round(self, x, cache: Optional['EvaluationCache'] = None) -> Fraction:
        """Round ``x`` to ``fraction_digits`` digits in ``radix``."""
        from .rounding import round_to_rational
        return round_to_rational(x, cache, self.radix, self.fraction_digits)

    def floor(self, x, cache: Optional['EvaluationCache'] = None) -> Fraction:
        """Floor of ``x`` to ``fraction_digits`` digits in ``radix``."""
        from .rounding import floor_to_rational
        return floor_to_rational(x, cache, self.radix, self.fraction_digits)

    def ceiling(self, x, cache: Optional['EvaluationCache'] = None) -> Fraction:
        """Ceiling of ``x`` to ``fraction_digits`` digits in ``radix``."""
        from .rounding import ceiling_to_rational
        return ceiling_to_rational(x, cache, self.radix, self.fraction_digits)

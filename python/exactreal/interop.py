# ExactReal SDK - NumPy Interop
# Copyright (c) 2024 ExactReal Contributors. All rights reserved.

"""
Conversion between numpy arrays and exact values.

Floats carry binary rounding error, so ``from_numpy`` keeps each element's
exact binary value unless a ``max_denom`` asks for the simplest nearby
fraction instead. ``to_numpy`` goes the other way, observing every real to
a requested width and returning float64 midpoints.
"""

from __future__ import annotations
from fractions import Fraction
from typing import Iterable, Optional

import numpy as np

from .cache import EvaluationCache, SimpleEvaluationCache
from .exceptions import InvalidArgument
from .rational import to_fraction
from .real import Real

__all__ = [
    "float_to_rational",
    "from_numpy",
    "to_numpy",
]

DEFAULT_MAX_DELTA = Fraction(1, 2 ** 60)


def float_to_rational(x: float, max_denom: Optional[int] = None) -> Fraction:
    """Convert a float to a Fraction.

    Args:
        x: Float value (numpy floating scalars included)
        max_denom: If given, the closest fraction with at most this
            denominator; otherwise the float's exact value

    Returns:
        The Fraction
    """
    value = to_fraction(float(x))
    if max_denom is not None:
        if max_denom < 1:
            raise InvalidArgument(f"max_denom must be at least 1, got {max_denom}")
        value = value.limit_denominator(max_denom)
    return value


def from_numpy(array, max_denom: Optional[int] = None) -> np.ndarray:
    """Convert a numeric array to an object array of Fractions of the same shape."""
    array = np.asarray(array)
    if array.dtype.kind not in "biuf":
        raise InvalidArgument(f"Expected a numeric array, got dtype {array.dtype}")
    if array.dtype.kind == "f":
        converted = [float_to_rational(v, max_denom) for v in array.ravel()]
    else:
        converted = [Fraction(int(v)) for v in array.ravel()]
    return np.array(converted, dtype=object).reshape(array.shape)


def to_numpy(
    values: Iterable[Real],
    cache: Optional[EvaluationCache] = None,
    max_delta=DEFAULT_MAX_DELTA,
) -> np.ndarray:
    """Approximate reals as a float64 array.

    Each value is observed to a Segment narrower than ``max_delta`` and
    replaced by that Segment's midpoint.

    Args:
        values: Reals or exact rationals
        cache: Cache to observe through (a fresh one by default)
        max_delta: Width the Segments must get below

    Returns:
        1-D float64 array
    """
    cache = cache or SimpleEvaluationCache()
    midpoints = [float(cache.observe_within(v, max_delta).midpoint()) for v in values]
    return np.array(midpoints, dtype=np.float64)

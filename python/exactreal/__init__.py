# ExactReal SDK
# Copyright (c) 2024 ExactReal Contributors. All rights reserved.

"""
ExactReal: exact, lazily refined real numbers.

A real number is a rule producing nested rational Segments that shrink
toward its value. Observation goes through a shared, thread-safe
evaluation cache; monotonic functions are inverted by a generic search
engine that also backs roots and logarithms.

Quick start:
    >>> from exactreal import PI, SimpleEvaluationCache, floor_to_rational
    >>> cache = SimpleEvaluationCache()
    >>> floor_to_rational(PI, cache, fraction_digits=5)
    Fraction(314159, 100000)
"""

from .exceptions import (
    ExactRealError,
    InvalidArgument,
    InvalidInterval,
    DivisionByZero,
    NonMonotonicFunction,
    PrecisionUnattainable,
)
from .rational import (
    FractionFormat,
    to_fraction,
    parse_rational,
    format_rational,
    periodic_expansion,
    digit_sequence,
    integer_part,
    fractional_part,
    rational_pow,
)
from .domain import (
    Inclusive,
    Exclusive,
    Infinity,
    MINUS_INFINITY,
    PLUS_INFINITY,
    Bounds,
    Segment,
    normalize_bounds,
)
from .real import (
    RealNumber,
    LazyReal,
    Real,
    is_exact,
    add,
    subtract,
    multiply,
    divide,
    negate,
    reciprocal,
    real_pow,
)
from .cache import (
    EvaluationCache,
    NoCache,
    SimpleEvaluationCache,
    CacheStats,
    iterate_until_diff_below,
)
from .limits import (
    limit,
    limit_monotonic,
    sequence_limit,
    series_sum,
    series_product,
)
from .comparison import (
    RealComparator,
    ApproximateComparator,
    NonEqualComparator,
    natural_compare,
    sign,
    absolute,
    as_key,
)
from .config import EvaluationConfig
from .search import (
    Found,
    NotFound,
    Position,
    SearchState,
    binary_search,
    search,
    reverse_value,
    reverse,
)
from .analysis import (
    square,
    root,
    rational_power,
    power,
    exp,
    ln,
    log,
)
from .rounding import (
    proceed_with_first_digits,
    round_rational,
    floor_rational,
    ceiling_rational,
    round_to_rational,
    floor_to_rational,
    ceiling_to_rational,
)
from .constants import (
    naturals,
    naturals_with_zero,
    factorial,
    E,
    PI,
    LN2,
)
from .interop import (
    float_to_rational,
    from_numpy,
    to_numpy,
)

__version__ = "0.1.0"

__all__ = [
    # Errors
    "ExactRealError",
    "InvalidArgument",
    "InvalidInterval",
    "DivisionByZero",
    "NonMonotonicFunction",
    "PrecisionUnattainable",
    # Rationals
    "FractionFormat",
    "to_fraction",
    "parse_rational",
    "format_rational",
    "periodic_expansion",
    "digit_sequence",
    "integer_part",
    "fractional_part",
    "rational_pow",
    # Bounds
    "Inclusive",
    "Exclusive",
    "Infinity",
    "MINUS_INFINITY",
    "PLUS_INFINITY",
    "Bounds",
    "Segment",
    "normalize_bounds",
    # Reals
    "RealNumber",
    "LazyReal",
    "Real",
    "is_exact",
    "add",
    "subtract",
    "multiply",
    "divide",
    "negate",
    "reciprocal",
    "real_pow",
    # Cache
    "EvaluationCache",
    "NoCache",
    "SimpleEvaluationCache",
    "CacheStats",
    "iterate_until_diff_below",
    # Limits
    "limit",
    "limit_monotonic",
    "sequence_limit",
    "series_sum",
    "series_product",
    # Comparison
    "RealComparator",
    "ApproximateComparator",
    "NonEqualComparator",
    "natural_compare",
    "sign",
    "absolute",
    "as_key",
    # Config
    "EvaluationConfig",
    # Search
    "Found",
    "NotFound",
    "Position",
    "SearchState",
    "binary_search",
    "search",
    "reverse_value",
    "reverse",
    # Analysis
    "square",
    "root",
    "rational_power",
    "power",
    "exp",
    "ln",
    "log",
    # Rounding
    "proceed_with_first_digits",
    "round_rational",
    "floor_rational",
    "ceiling_rational",
    "round_to_rational",
    "floor_to_rational",
    "ceiling_to_rational",
    # Constants
    "naturals",
    "naturals_with_zero",
    "factorial",
    "E",
    "PI",
    "LN2",
    # NumPy
    "float_to_rational",
    "from_numpy",
    "to_numpy",
]

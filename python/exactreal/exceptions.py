# ExactReal SDK - Exceptions
# Copyright (c) 2024 ExactReal Contributors. All rights reserved.

"""
Exception hierarchy for exact real arithmetic.

Every error raised by the library derives from ExactRealError and also from
the closest built-in exception, so callers can catch either.

A value proven to lie outside a search range is not an error: the search
functions return None for it.
"""


class ExactRealError(Exception):
    """Base class for all ExactReal errors."""


class InvalidArgument(ExactRealError, ValueError):
    """
    An argument violates a documented precondition.

    Examples: non-positive radix, root index or max_delta, a negative
    fraction digit count, the even root of a negative number.
    """


class InvalidInterval(InvalidArgument):
    """
    Bounds were constructed with lower > upper, or with lower == upper while
    one of the edges is exclusive, or with an infinity on the wrong side.
    """

    def __init__(self, message: str, lower=None, upper=None):
        super().__init__(message)
        self.lower = lower
        self.upper = upper


class DivisionByZero(ExactRealError, ZeroDivisionError):
    """Division by zero, or by a real whose Segments collapse to zero."""


class NonMonotonicFunction(ExactRealError, ValueError):
    """
    A function handed to the search engine produced probe values that break
    the monotonicity it was detected (or declared) to have.
    """


class PrecisionUnattainable(ExactRealError, RuntimeError):
    """
    A real number ran out of Segments before reaching the requested
    precision.

    Raised by the search engine's flat-result escape hatch, and by the cache
    when a finite Segment sequence never gets below max_delta.
    """

# ExactReal SDK - Rational Numbers
# Copyright (c) 2024 ExactReal Contributors. All rights reserved.

"""
Exact rational helpers on top of ``fractions.Fraction``.

Fraction already keeps numerator and denominator coprime with a positive
denominator, so this module only adds what the engine needs at its
boundary: canonical conversion, radix-aware parsing and formatting
(including periodic notation such as ``0.(3)``), and lazy digit expansion.

Example:
    >>> to_fraction("1.2(34)")
    Fraction(611, 495)
    >>> format_rational(Fraction(-7, 2), FractionFormat.MIXED)
    '-3 1/2'
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum
from fractions import Fraction
from typing import Iterator, List, Union
import math
import numbers
import re

from .exceptions import DivisionByZero, InvalidArgument

__all__ = [
    "FractionFormat",
    "PeriodicExpansion",
    "DigitExpansion",
    "to_fraction",
    "parse_rational",
    "format_rational",
    "periodic_expansion",
    "digit_sequence",
    "integer_part",
    "fractional_part",
    "rational_pow",
    "check_radix",
]

RationalLike = Union[int, Fraction, float, str, numbers.Rational]

_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


class FractionFormat(Enum):
    """String forms understood by format_rational and parse_rational."""
    DIVISION = "division"  # 7/2
    MIXED = "mixed"  # 3 1/2
    DOT = "dot"  # 3.5, 0.(3)
    COMMA = "comma"  # 3,5, 0,(3)


def check_radix(radix: int) -> int:
    """Validate a radix, returning it unchanged."""
    if not isinstance(radix, numbers.Integral) or not 2 <= radix <= 36:
        raise InvalidArgument(f"Radix must be an integer from 2 to 36, got {radix!r}")
    return int(radix)


def to_fraction(value: RationalLike, radix: int = 10) -> Fraction:
    """Convert a value to an exact Fraction.

    Floats are converted exactly (0.1 becomes 3602879701896397/36028797018963968);
    pass a string to get the decimal reading instead.

    Args:
        value: int, Fraction, float, numpy scalar, Decimal or string
        radix: Radix used when ``value`` is a string

    Returns:
        The equal Fraction

    Raises:
        InvalidArgument: For non-finite floats, malformed strings and
            unsupported types
        DivisionByZero: For strings such as ``"1/0"``
    """
    if isinstance(value, Fraction):
        return value
    if isinstance(value, bool):
        raise InvalidArgument("Booleans are not rational numbers")
    if isinstance(value, numbers.Integral):
        return Fraction(int(value))
    if isinstance(value, numbers.Rational):
        return Fraction(int(value.numerator), int(value.denominator))
    if isinstance(value, str):
        return parse_rational(value, radix)
    if isinstance(value, numbers.Real):
        as_float = float(value)
        if not math.isfinite(as_float):
            raise InvalidArgument(f"Cannot convert non-finite value {value!r} to a rational")
        return Fraction(as_float)
    try:
        return Fraction(value)
    except (TypeError, ValueError) as e:
        raise InvalidArgument(f"Cannot convert {value!r} to a rational") from e


def _parse_integer(text: str, radix: int) -> int:
    try:
        return int(text, radix)
    except ValueError as e:
        raise InvalidArgument(f"Invalid integer {text!r} in radix {radix}") from e


def parse_rational(text: str, radix: int = 10) -> Fraction:
    """Parse a rational from any FractionFormat string.

    Accepted shapes: ``"a/b"``, ``"-12"``, ``"1.25"``, ``"1,25"``, ``".5"``
    and periodic fractions with the repeating block in parentheses,
    ``"0.(3)"`` or ``"1.2(34)"``. Letters are digits above 9 for radix > 10.

    Args:
        text: String to parse
        radix: Radix of the digits, 2 to 36

    Returns:
        The parsed Fraction
    """
    radix = check_radix(radix)
    text = text.strip()
    if not text:
        raise InvalidArgument("Cannot parse an empty string")

    if "/" in text:
        numerator_text, denominator_text = text.split("/", 1)
        numerator = _parse_integer(numerator_text.strip(), radix)
        denominator = _parse_integer(denominator_text.strip(), radix)
        if denominator == 0:
            raise DivisionByZero(f"Zero denominator in {text!r}")
        return Fraction(numerator, denominator)

    negative = text.startswith("-")
    body = text[1:] if text[:1] in ("-", "+") else text
    parts = re.split(r"[.,]", body)
    if len(parts) > 2:
        raise InvalidArgument(f"Too many separators in {text!r}")

    integer_text = parts[0] or "0"
    after_separator = parts[1] if len(parts) == 2 else ""
    if after_separator.endswith(")"):
        head, paren, period = after_separator[:-1].partition("(")
        if not paren or not period:
            raise InvalidArgument(f"Malformed period in {text!r}")
    else:
        head, period = after_separator, ""
    if "(" in head or ")" in head:
        raise InvalidArgument(f"Malformed period in {text!r}")
    if integer_text.startswith(("-", "+")):
        raise InvalidArgument(f"Misplaced sign in {text!r}")

    value = Fraction(_parse_integer(integer_text, radix))
    head_scale = radix ** len(head)
    if head:
        value += Fraction(_parse_integer(head, radix), head_scale)
    if period:
        period_scale = (radix ** len(period) - 1) * head_scale
        value += Fraction(_parse_integer(period, radix), period_scale)
    return -value if negative else value


def integer_part(value: RationalLike) -> int:
    """Integer part, truncated toward zero."""
    value = to_fraction(value)
    quotient = abs(value.numerator) // value.denominator
    return -quotient if value < 0 else quotient


def fractional_part(value: RationalLike) -> Fraction:
    """``value - integer_part(value)``; carries the sign of ``value``."""
    value = to_fraction(value)
    return value - integer_part(value)


def rational_pow(base: RationalLike, exponent: int) -> Fraction:
    """Exact integer power of a rational."""
    base = to_fraction(base)
    if base == 0 and exponent < 0:
        raise DivisionByZero("Zero cannot be raised to a negative power")
    return base ** int(exponent)


def _integer_to_string(value: int, radix: int) -> str:
    if value == 0:
        return "0"
    sign = "-" if value < 0 else ""
    value = abs(value)
    chars = []
    while value:
        value, digit = divmod(value, radix)
        chars.append(_DIGITS[digit])
    return sign + "".join(reversed(chars))


@dataclass(frozen=True)
class PeriodicExpansion:
    """
    Positional expansion of a rational with an eventually periodic tail.

    Attributes:
        negative: Whether a minus sign is printed
        integer_part: Absolute integer part
        before_period: Fraction digits before the repeating block
        period: Repeating block (empty for terminating expansions)
        radix: Radix of the digits
    """
    negative: bool
    integer_part: int
    before_period: tuple
    period: tuple
    radix: int = 10

    def to_string(self, separator: str = ".") -> str:
        parts = ["-" if self.negative else "", _integer_to_string(self.integer_part, self.radix)]
        if self.before_period or self.period:
            parts.append(separator)
            parts.extend(_DIGITS[d] for d in self.before_period)
            if self.period:
                parts.append("(" + "".join(_DIGITS[d] for d in self.period) + ")")
        return "".join(parts)

    def __str__(self) -> str:
        return self.to_string()


def periodic_expansion(value: RationalLike, radix: int = 10) -> PeriodicExpansion:
    """Compute the (pre-period, period) digit expansion of a rational.

    The repeating block is found by remembering at which digit each
    remainder first appeared.
    """
    radix = check_radix(radix)
    value = to_fraction(value)
    if value < 0:
        return replace(periodic_expansion(-value, radix), negative=True)

    denominator = value.denominator
    whole, remainder = divmod(value.numerator, denominator)
    seen: dict[int, int] = {}
    digits: List[int] = []
    while remainder and remainder not in seen:
        seen[remainder] = len(digits)
        digit, remainder = divmod(remainder * radix, denominator)
        digits.append(digit)

    if not remainder:
        return PeriodicExpansion(False, whole, tuple(digits), (), radix)
    start = seen[remainder]
    return PeriodicExpansion(False, whole, tuple(digits[:start]), tuple(digits[start:]), radix)


def format_rational(
    value: RationalLike,
    fraction_format: FractionFormat = FractionFormat.DIVISION,
    radix: int = 10,
) -> str:
    """Render a rational in the requested format and radix."""
    radix = check_radix(radix)
    value = to_fraction(value)
    if fraction_format == FractionFormat.DOT:
        return periodic_expansion(value, radix).to_string(".")
    if fraction_format == FractionFormat.COMMA:
        return periodic_expansion(value, radix).to_string(",")
    if fraction_format == FractionFormat.DIVISION:
        if value.denominator == 1:
            return _integer_to_string(value.numerator, radix)
        return (
            f"{_integer_to_string(value.numerator, radix)}"
            f"/{_integer_to_string(value.denominator, radix)}"
        )
    if fraction_format == FractionFormat.MIXED:
        whole = integer_part(value)
        rest = abs(value - whole)
        if rest == 0:
            return _integer_to_string(whole, radix)
        fraction_text = format_rational(rest, FractionFormat.DIVISION, radix)
        if whole == 0:
            return ("-" if value < 0 else "") + fraction_text
        return f"{_integer_to_string(whole, radix)} {fraction_text}"
    raise InvalidArgument(f"Unknown fraction format: {fraction_format!r}")


@dataclass(frozen=True)
class DigitExpansion:
    """
    Lazy positional expansion of a rational.

    Attributes:
        sign: -1, 0 or 1
        integer_digits: Digits of the absolute integer part, most significant first
        digits: Iterator over fraction digits of the absolute value; it stops
            when the expansion terminates and is infinite otherwise
    """
    sign: int
    integer_digits: tuple
    digits: Iterator[int]


def _fraction_digits(remainder: int, denominator: int, radix: int) -> Iterator[int]:
    while remainder:
        digit, remainder = divmod(remainder * radix, denominator)
        yield digit


def digit_sequence(value: RationalLike, radix: int = 10) -> DigitExpansion:
    """Expand a rational into its integer digits and a lazy fraction digit stream."""
    radix = check_radix(radix)
    value = to_fraction(value)
    sign = (value > 0) - (value < 0)
    whole, remainder = divmod(abs(value.numerator), value.denominator)
    integer_digits = tuple(_DIGITS.index(c) for c in _integer_to_string(whole, radix))
    return DigitExpansion(
        sign=sign,
        integer_digits=integer_digits,
        digits=_fraction_digits(remainder, value.denominator, radix),
    )

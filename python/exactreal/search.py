# ExactReal SDK - Monotonic Search
# Copyright (c) 2024 ExactReal Contributors. All rights reserved.

"""
Inversion of monotonic functions.

Given a monotonic ``f`` from rationals to reals and a target value, find the
real ``x`` with ``f(x) == expected`` inside some bounds, or prove that the
target lies outside the range of ``f`` there (the result is then None).

The search runs in three stages:
1. Bracketing: unbounded sides are explored by doubling steps from a finite
   anchor (0 for the whole line, which is first split there).
2. Open edges: a finite range with exclusive edges is cut into closed
   Segments that approach the open edge without reaching it.
3. Narrowing: on a closed Segment whose image brackets the target, the
   bracket shrinks by bisection (exact rational values) or by discarding
   thirds (real values under a comparator).

Monotonicity direction is detected once per bracket and then asserted on
every probe; a violation raises NonMonotonicFunction.

The search may not terminate: the target can sit exactly at an open edge,
or beyond the supremum of a bounded function on an unbounded domain.

Example:
    >>> root = binary_search(2, lambda x: x * x, Bounds.at_least(0))
    >>> cache.observe_within(root, Fraction(1, 1000))  # sqrt(2)
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from fractions import Fraction
from typing import Callable, Dict, Iterable, Iterator, Optional, Union
import logging

from .cache import EvaluationCache, NoCache, SimpleEvaluationCache
from .comparison import NonEqualComparator, RealComparator, natural_compare
from .config import EvaluationConfig
from .domain import Bounds, Inclusive, Segment, normalize_bounds
from .exceptions import NonMonotonicFunction, PrecisionUnattainable
from .rational import to_fraction
from .real import LazyReal, Real, as_real, is_exact

logger = logging.getLogger(__name__)

__all__ = [
    "Position",
    "Found",
    "NotFound",
    "SearchResult",
    "SearchState",
    "compare_to_pair",
    "binary_search",
    "search",
    "reverse_value",
    "reverse",
]


class Position(Enum):
    """Where a value lies relative to two distinct values ``lower < upper``."""
    BEFORE_LOWER = "before_lower"  # x < lower
    AFTER_LOWER = "after_lower"  # lower < x < upper, x known to be above lower
    BEFORE_UPPER = "before_upper"  # lower < x < upper, x known to be below upper
    AFTER_UPPER = "after_upper"  # x > upper


@dataclass(frozen=True)
class Found:
    """A search located its answer."""
    value: Real


class NotFound(Enum):
    """
    A search step did not locate the answer.

    BEFORE and AFTER mean the answer lies before the lower / after the upper
    edge of the range searched; SOMEWHERE means the step could not tell.
    """
    SOMEWHERE = "somewhere"
    BEFORE = "before"
    AFTER = "after"


SearchResult = Union[Found, NotFound]


@dataclass(frozen=True)
class SearchState:
    """
    A bracket ``[lower, upper]`` with the function values at its ends.

    Attributes:
        lower: Lower argument
        lower_value: f(lower)
        upper: Upper argument
        upper_value: f(upper)
    """
    lower: Fraction
    lower_value: Real
    upper: Fraction
    upper_value: Real


def compare_to_pair(cache: EvaluationCache, x: Real, lower: Real, upper: Real) -> Position:
    """Locate ``x`` relative to ``lower < upper``.

    Refines all three values with ``delta = 1, 1/2, ...`` until one of the
    four positions is certain. Terminates whenever ``lower < upper``.
    """
    delta = Fraction(1)
    while True:
        x_lo, x_hi = cache.observe_within(x, delta)
        lower_lo, lower_hi = cache.observe_within(lower, delta)
        upper_lo, upper_hi = cache.observe_within(upper, delta)
        if x_lo > upper_hi:
            return Position.AFTER_UPPER
        if x_hi < lower_lo:
            return Position.BEFORE_LOWER
        if x_lo > lower_hi:
            return Position.AFTER_LOWER
        if x_hi < upper_lo:
            return Position.BEFORE_UPPER
        delta /= 2


def _doubling_anchors(start: Fraction, direction: int) -> Iterator[Fraction]:
    yield start
    step = Fraction(1)
    while True:
        yield start + direction * step
        step *= 2


def _flat_result(lower: Fraction, upper: Fraction) -> LazyReal:
    def rule(cache):
        yield Segment(lower, upper)
        raise PrecisionUnattainable(
            f"Function is flat on [{lower}, {upper}] at the resolution of the comparator"
        )

    return LazyReal(rule, label="flat")


class _MonotonicSearch:
    """
    One inversion of ``f`` at ``expected``.

    Function values are memoized per argument so that the reals they produce
    keep their identity, and with it their cache entries, across probes.

    Args:
        expected: Target value
        f: Monotonic function of an exact rational
        compare: Three-way comparison of function values
        cache: Cache used to locate the target between probe values
        ternary: Narrow by thirds instead of halves
        tie_delta: Refinement width at which a target still touching an end
            value of a bracket is taken to equal it; None refines without end
    """

    def __init__(
        self,
        expected: Real,
        f: Callable[[Fraction], Real],
        compare: Callable[[Real, Real], int],
        cache: EvaluationCache,
        ternary: bool,
        tie_delta: Optional[Fraction] = None,
    ):
        self.expected = expected
        self.f = f
        self.compare = compare
        self.cache = cache
        self.ternary = ternary
        self.tie_delta = tie_delta
        self._values: Dict[Fraction, Real] = {}

    def value_at(self, x: Fraction) -> Real:
        value = self._values.get(x)
        if value is None:
            value = as_real(self.f(x))
            self._values[x] = value
        return value

    def run(self, bounds: Bounds) -> Optional[Real]:
        result = self._search_bounds(bounds)
        if isinstance(result, Found):
            return result.value
        logger.debug("No solution for %r in %s: %s", self.expected, bounds, result.value)
        return None

    # =========================================================================
    # Bracketing
    # =========================================================================

    def _search_bounds(self, bounds: Bounds) -> SearchResult:
        lower, upper = bounds.lower, bounds.upper
        if lower.is_finite and upper.is_finite:
            return self._search_finite(lower, upper)

        if lower.is_finite:
            return self._search_outward(lower, +1)
        if upper.is_finite:
            return self._search_outward(upper, -1)

        left = self._search_bounds(Bounds(bounds.lower, Inclusive(0)))
        if isinstance(left, Found) or left is NotFound.BEFORE:
            return left
        right = self._search_bounds(Bounds(Inclusive(0), bounds.upper))
        if right is NotFound.BEFORE:
            raise NonMonotonicFunction(
                f"Target {self.expected!r} lies after 0 for the negative half "
                f"and before 0 for the positive half"
            )
        return right

    def _search_outward(self, edge, direction: int) -> SearchResult:
        """Search from a finite edge toward the infinite side in doubling steps."""
        # Walking away from the edge, the target is "further out" when it is
        # AFTER (rightward) or BEFORE (leftward) the current piece.
        further = NotFound.AFTER if direction > 0 else NotFound.BEFORE
        anchors = _doubling_anchors(edge.value, direction)
        previous = next(anchors)
        first = True
        for anchor in anchors:
            near = edge if first else Inclusive(previous)
            far = Inclusive(anchor)
            if direction > 0:
                result = self._search_finite(near, far)
            else:
                result = self._search_finite(far, near)
            if isinstance(result, Found):
                return result
            if result is not further and result is not NotFound.SOMEWHERE:
                return result
            logger.debug("Target %r beyond %s, extending to %s", self.expected, previous, anchor)
            previous = anchor
            first = False
        return NotFound.SOMEWHERE

    def _search_finite(self, lower, upper) -> SearchResult:
        if not lower.is_inclusive and not upper.is_inclusive:
            middle = Inclusive((lower.value + upper.value) / 2)
            left = self._search_finite(lower, middle)
            if isinstance(left, Found) or left is NotFound.BEFORE:
                return left
            right = self._search_finite(middle, upper)
            if right is NotFound.BEFORE:
                raise NonMonotonicFunction(
                    f"Target {self.expected!r} lies after {middle.value} on the left "
                    f"and before it on the right"
                )
            return right

        if not lower.is_inclusive:
            return self._consume(
                self._toward_lower(lower.value, upper.value),
                continue_on=NotFound.BEFORE,
            )
        if not upper.is_inclusive:
            return self._consume(
                self._toward_upper(lower.value, upper.value),
                continue_on=NotFound.AFTER,
            )
        return self._consume([Segment(lower.value, upper.value)], continue_on=None)

    @staticmethod
    def _toward_lower(lo: Fraction, hi: Fraction) -> Iterator[Segment]:
        """Closed pieces ``[lo + d/2, lo + d]`` covering ``(lo, hi]``."""
        diff = hi - lo
        while True:
            yield Segment(lo + diff / 2, lo + diff)
            diff /= 2

    @staticmethod
    def _toward_upper(lo: Fraction, hi: Fraction) -> Iterator[Segment]:
        """Closed pieces ``[hi - d, hi - d/2]`` covering ``[lo, hi)``."""
        diff = hi - lo
        while True:
            yield Segment(hi - diff, hi - diff / 2)
            diff /= 2

    # =========================================================================
    # Segment processing
    # =========================================================================

    def _consume(self, segments: Iterable[Segment], continue_on: Optional[NotFound]) -> SearchResult:
        """Search consecutive closed pieces sharing one monotonicity direction.

        A piece that proves the target lies on the ``continue_on`` side moves
        the search to the next piece; any other proof ends it.
        """
        increasing: Optional[bool] = None
        for segment in segments:
            lo, hi = segment
            lower_value = self.value_at(lo)
            upper_value = self.value_at(hi)

            if increasing is None:
                c = self.compare(lower_value, upper_value)
                if c != 0:
                    increasing = c < 0
                    logger.debug(
                        "f is %s on %s", "increasing" if increasing else "decreasing", segment
                    )
            else:
                c = self.compare(upper_value, lower_value)
                if (increasing and c < 0) or (not increasing and c > 0):
                    raise NonMonotonicFunction(
                        f"f({lo}) and f({hi}) break the "
                        f"{'increasing' if increasing else 'decreasing'} order"
                    )

            if increasing is not None:
                outcome = self._outside(lower_value, upper_value, increasing)
                if outcome is not None:
                    if outcome is continue_on:
                        continue
                    return outcome

            result = self._search_segment(lo, hi, lower_value, upper_value)
            if isinstance(result, Found):
                return result
            if result is not NotFound.SOMEWHERE and result is not continue_on:
                return result
        return NotFound.SOMEWHERE

    def _outside(self, lower_value: Real, upper_value: Real, increasing: bool) -> Optional[NotFound]:
        below_lower = self.compare(self.expected, lower_value)
        if (increasing and below_lower < 0) or (not increasing and below_lower > 0):
            return NotFound.BEFORE
        above_upper = self.compare(self.expected, upper_value)
        if (increasing and above_upper > 0) or (not increasing and above_upper < 0):
            return NotFound.AFTER
        return None

    def _on_flat(self, lo: Fraction, hi: Fraction, lower_value: Real, upper_value: Real) -> SearchResult:
        if self.compare(lower_value, self.expected) != 0:
            return NotFound.SOMEWHERE
        if lo == hi:
            return Found(lo)
        if is_exact(lower_value) and is_exact(upper_value) and lower_value == upper_value:
            return Found(lo)
        return Found(_flat_result(lo, hi))

    def _prove_bracketed(
        self, lo: Fraction, hi: Fraction, lower_value: Real, upper_value: Real, ascending: bool
    ) -> Optional[SearchResult]:
        """Refine until the target is proven inside ``[f(lo), f(hi)]`` or outside it.

        Returns None once it is inside. With a tie resolution set, a target
        still inseparable from an end value after refining below it is taken
        to equal that value and found at its argument.
        """
        if ascending:
            low_arg, smaller, high_arg, larger = lo, lower_value, hi, upper_value
        else:
            low_arg, smaller, high_arg, larger = hi, upper_value, lo, lower_value
        delta = Fraction(1)
        while True:
            x_lo, x_hi = self.cache.observe_within(self.expected, delta)
            smaller_lo, smaller_hi = self.cache.observe_within(smaller, delta)
            larger_lo, larger_hi = self.cache.observe_within(larger, delta)
            if x_hi < smaller_lo:
                return NotFound.BEFORE if ascending else NotFound.AFTER
            if x_lo > larger_hi:
                return NotFound.AFTER if ascending else NotFound.BEFORE
            above_smaller = x_lo >= smaller_hi
            below_larger = x_hi <= larger_lo
            if above_smaller and below_larger:
                return None
            if self.tie_delta is not None and delta < self.tie_delta:
                edge = high_arg if above_smaller else low_arg
                logger.debug("Target %r taken to equal f(%s)", self.expected, edge)
                return Found(edge)
            delta /= 2

    def _search_segment(
        self, lo: Fraction, hi: Fraction, lower_value: Real, upper_value: Real
    ) -> SearchResult:
        if lo == hi:
            return self._on_flat(lo, hi, lower_value, upper_value)
        c = self.compare(lower_value, upper_value)
        if c == 0:
            return self._on_flat(lo, hi, lower_value, upper_value)
        ascending = c < 0

        if not self.ternary:
            if self.compare(lower_value, self.expected) == 0:
                return Found(lo)
            if self.compare(upper_value, self.expected) == 0:
                return Found(hi)

        outcome = self._prove_bracketed(lo, hi, lower_value, upper_value, ascending)
        if outcome is not None:
            return outcome

        logger.debug("Target %r bracketed by [%s, %s]", self.expected, lo, hi)
        initial = SearchState(lo, lower_value, hi, upper_value)
        step = self._ternary_step if self.ternary else self._binary_step

        def rule(cache):
            state = initial
            while True:
                yield Segment(state.lower, state.upper)
                if state.lower == state.upper:
                    return
                state = step(state, ascending)

        return Found(LazyReal(rule, label="search"))

    # =========================================================================
    # Narrowing
    # =========================================================================

    def _binary_step(self, state: SearchState, ascending: bool) -> SearchState:
        middle = (state.lower + state.upper) / 2
        value = self.value_at(middle)
        c = self.compare(value, self.expected)
        if c == 0:
            return SearchState(middle, value, middle, value)
        if (c < 0) == ascending:
            return SearchState(middle, value, state.upper, state.upper_value)
        return SearchState(state.lower, state.lower_value, middle, value)

    def _ternary_step(self, state: SearchState, ascending: bool) -> SearchState:
        lo, hi = state.lower, state.upper
        mid1 = (2 * lo + hi) / 3
        mid2 = (lo + 2 * hi) / 3
        value1 = self.value_at(mid1)
        value2 = self.value_at(mid2)

        probes = [state.lower_value, value1, value2, state.upper_value]
        for left, right in zip(probes, probes[1:]):
            c = self.compare(left, right)
            if (ascending and c > 0) or (not ascending and c < 0):
                raise NonMonotonicFunction(
                    f"f is not {'increasing' if ascending else 'decreasing'} "
                    f"on [{lo}, {hi}] at probes {mid1}, {mid2}"
                )

        if is_exact(value1) and is_exact(value2) and value1 == value2:
            if self.compare(self.expected, value1) == 0:
                return SearchState(mid1, value1, mid2, value2)

        lower_state = (lo, state.lower_value)
        first = (mid1, value1)
        second = (mid2, value2)
        upper_state = (hi, state.upper_value)

        if ascending:
            position = compare_to_pair(self.cache, self.expected, value1, value2)
            bracket = {
                Position.BEFORE_LOWER: (lower_state, first),
                Position.AFTER_LOWER: (first, upper_state),
                Position.BEFORE_UPPER: (lower_state, second),
                Position.AFTER_UPPER: (second, upper_state),
            }[position]
        else:
            position = compare_to_pair(self.cache, self.expected, value2, value1)
            bracket = {
                Position.BEFORE_LOWER: (second, upper_state),
                Position.AFTER_LOWER: (lower_state, second),
                Position.BEFORE_UPPER: (first, upper_state),
                Position.AFTER_UPPER: (lower_state, first),
            }[position]
        (new_lo, new_lo_value), (new_hi, new_hi_value) = bracket
        return SearchState(new_lo, new_lo_value, new_hi, new_hi_value)


# =============================================================================
# Public API
# =============================================================================


def binary_search(
    expected,
    f: Callable[[Fraction], Fraction],
    bounds=None,
    cache: Optional[EvaluationCache] = None,
) -> Optional[Real]:
    """Invert a monotonic function with exact rational values.

    Args:
        expected: Exact rational target
        f: Monotonic function from Fraction to Fraction (or int)
        bounds: Search domain (Bounds, Segment, ``(lo, hi)`` tuple or None
            for the whole line)
        cache: Cache used by the returned real's consumers

    Returns:
        The solution as an exact Fraction when it sits on an edge of the
        bracket that first encloses it, otherwise a real narrowing by
        bisection, which collapses to a single point if a midpoint hits it;
        None when ``expected`` is provably outside the range of ``f`` over
        ``bounds``
    """
    engine = _MonotonicSearch(
        expected=to_fraction(expected),
        f=f,
        compare=natural_compare,
        cache=cache or NoCache(),
        ternary=False,
    )
    return engine.run(normalize_bounds(bounds))


def search(
    expected: Real,
    f: Callable[[Fraction], Real],
    bounds=None,
    comparator: Optional[RealComparator] = None,
) -> Optional[Real]:
    """Invert a monotonic function with real values.

    Values are compared with ``comparator``; the default is an
    ApproximateComparator from ``EvaluationConfig()`` over a fresh cache.
    The comparator's resolution decides when a bracket looks flat. Whether
    the target lies inside a bracket is proven by exact refinement; a target
    that stays inseparable from an end value down to the square of the
    resolution is taken to equal it. The returned real is refined exactly.

    Args:
        expected: Target value
        f: Monotonic function from Fraction to a real
        bounds: Search domain, as for binary_search
        comparator: Comparator for function values

    Returns:
        The solution as a real narrowing by thirds (an exact Fraction when it
        is taken to equal an end value), or None when ``expected`` is
        provably outside the range of ``f`` over ``bounds``

    Raises:
        NonMonotonicFunction: If probe values contradict monotonicity
    """
    if comparator is None:
        config = EvaluationConfig()
        comparator = config.make_comparator(config.make_cache())
    engine = _MonotonicSearch(
        expected=as_real(expected),
        f=f,
        compare=comparator.compare,
        cache=comparator.cache,
        ternary=True,
        tie_delta=None if comparator.resolution is None else comparator.resolution ** 2,
    )
    return engine.run(normalize_bounds(bounds))


def reverse_value(
    expected: Real,
    f: Callable[[Fraction], Real],
    bounds=None,
    cache: Optional[EvaluationCache] = None,
) -> Optional[Real]:
    """Invert a strictly monotonic function using exact comparisons.

    Does not terminate if ``expected`` equals ``f`` at a probe point without
    either value becoming exact.
    """
    comparator = NonEqualComparator(cache or SimpleEvaluationCache())
    return search(expected, f, bounds, comparator)


def reverse(
    f: Callable[[Fraction], Real],
    bounds=None,
    cache: Optional[EvaluationCache] = None,
) -> Callable[[Real], Optional[Real]]:
    """Turn a strictly monotonic function into its inverse."""
    def inverse(expected: Real) -> Optional[Real]:
        return reverse_value(expected, f, bounds, cache)

    return inverse

# ExactReal SDK - Evaluation Cache
# Copyright (c) 2024 ExactReal Contributors. All rights reserved.

"""
Shared, thread-safe memoization of real-number observations.

Every consumer reads a real number through an EvaluationCache. The
SimpleEvaluationCache keeps one cursor per real number, so however many
threads observe the same number, its rule is advanced at most once per
precision level:

- New cursors are installed by optimistic compare-and-swap of an immutable
  registry snapshot; a thread that loses the race drops its own cursor and
  uses the winner's.
- Advancing a cursor is serialized by that cursor's lock.
- A request that the most recent Segment already satisfies is answered
  without taking any lock.

Example:
    >>> cache = SimpleEvaluationCache()
    >>> segment = cache.observe_within(PI, Fraction(1, 10**6))
    >>> segment.diff < Fraction(1, 10**6)
    True
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from fractions import Fraction
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Optional
import logging
import threading

from .domain import Segment
from .exceptions import InvalidArgument, PrecisionUnattainable
from .rational import to_fraction
from .real import RealNumber, Real, is_exact

logger = logging.getLogger(__name__)

__all__ = [
    "EvaluationCache",
    "NoCache",
    "SimpleEvaluationCache",
    "CacheStats",
    "iterate_until_diff_below",
]


def _check_delta(max_delta) -> Fraction:
    max_delta = to_fraction(max_delta)
    if max_delta <= 0:
        raise InvalidArgument(f"max_delta must be positive, got {max_delta}")
    return max_delta


def iterate_until_diff_below(segments: Iterable[Segment], max_delta) -> Segment:
    """Return the first Segment narrower than ``max_delta``.

    Raises:
        InvalidArgument: If ``max_delta <= 0``
        PrecisionUnattainable: If the sequence ends first
    """
    max_delta = _check_delta(max_delta)
    last = None
    for segment in segments:
        if segment.diff < max_delta:
            return segment
        last = segment
    raise PrecisionUnattainable(
        f"Segment sequence ended at {last} before reaching width < {max_delta}"
    )


class EvaluationCache(ABC):
    """Context through which real numbers are observed."""

    @abstractmethod
    def observe(self, number: Real) -> Iterator[Segment]:
        """Iterate over the shrinking Segments of ``number``."""

    def observe_within(self, number: Real, max_delta) -> Segment:
        """First Segment of ``number`` with ``diff < max_delta``."""
        return iterate_until_diff_below(self.observe(number), max_delta)

    def latest(self, number: Real) -> Segment:
        """The most recently produced Segment of ``number``."""
        for segment in self.observe(number):
            return segment
        raise PrecisionUnattainable(f"{number!r} produced no Segments")


class NoCache(EvaluationCache):
    """
    Cache that shares nothing: every observation runs the rule from scratch.

    Useful as a reference when testing that a cached evaluation matches an
    uncached one, and for purely rational computations.
    """

    def observe(self, number: Real) -> Iterator[Segment]:
        if is_exact(number):
            return iter((Segment.point(number),))
        return number._observe(self)


class _Cursor:
    """One shared position in a real number's Segment sequence."""

    __slots__ = ("number", "segments", "lock", "last", "exhausted", "error")

    def __init__(self, number: RealNumber, segments: Iterator[Segment]):
        # Holding the number keeps its id() unique for the registry's lifetime.
        self.number = number
        self.segments = segments
        self.lock = threading.RLock()
        self.last: Optional[Segment] = None
        self.exhausted = False
        self.error: Optional[Exception] = None


@dataclass(frozen=True)
class CacheStats:
    """
    Counters describing a SimpleEvaluationCache.

    Attributes:
        entries: Number of registered real numbers
        advances: Total Segments produced by underlying rules
        retries: Registry compare-and-swap conflicts
    """
    entries: int
    advances: int
    retries: int


class SimpleEvaluationCache(EvaluationCache):
    """
    Thread-safe cache sharing one traversal per real number.

    Entries live as long as the cache; nothing is evicted.
    """

    def __init__(self):
        self._registry: Mapping[int, _Cursor] = MappingProxyType({})
        self._swap_lock = threading.Lock()
        self._stats_lock = threading.Lock()
        self._advances = 0
        self._retries = 0

    def _compare_and_set(self, expected: Mapping[int, _Cursor], updated: Mapping[int, _Cursor]) -> bool:
        with self._swap_lock:
            if self._registry is not expected:
                return False
            self._registry = updated
            return True

    def _cursor_for(self, number: RealNumber) -> _Cursor:
        key = id(number)
        while True:
            snapshot = self._registry
            cursor = snapshot.get(key)
            if cursor is not None:
                return cursor
            candidate = _Cursor(number, number._observe(self))
            updated = dict(snapshot)
            updated[key] = candidate
            if self._compare_and_set(snapshot, MappingProxyType(updated)):
                logger.debug("Registered cursor for %r (%d entries)", number, len(updated))
                return candidate
            with self._stats_lock:
                self._retries += 1
            logger.debug("Registry changed while registering %r, retrying", number)

    def _advance(self, cursor: _Cursor) -> Optional[Segment]:
        # Caller holds cursor.lock. A failed rule replays its error to every later caller.
        if cursor.error is not None:
            raise cursor.error
        if cursor.exhausted:
            return None
        try:
            segment = next(cursor.segments)
        except StopIteration:
            cursor.exhausted = True
            return None
        except Exception as error:
            cursor.error = error
            logger.debug("Rule of %r raised %r", cursor.number, error)
            raise
        cursor.last = segment
        with self._stats_lock:
            self._advances += 1
        return segment

    def observe(self, number: Real) -> Iterator[Segment]:
        if is_exact(number):
            yield Segment.point(number)
            return
        cursor = self._cursor_for(number)
        previous = None
        while True:
            with cursor.lock:
                segment = cursor.last
                if segment is None or segment is previous:
                    segment = self._advance(cursor)
            if segment is None:
                return
            yield segment
            previous = segment

    def observe_within(self, number: Real, max_delta) -> Segment:
        max_delta = _check_delta(max_delta)
        if is_exact(number):
            return Segment.point(number)
        cursor = self._cursor_for(number)

        last = cursor.last
        if last is not None and last.diff < max_delta:
            return last

        with cursor.lock:
            last = cursor.last
            if last is not None and last.diff < max_delta:
                return last
            while True:
                segment = self._advance(cursor)
                if segment is None:
                    raise PrecisionUnattainable(
                        f"{number!r} ended at {cursor.last} before reaching width < {max_delta}"
                    )
                if segment.diff < max_delta:
                    return segment

    def latest(self, number: Real) -> Segment:
        if is_exact(number):
            return Segment.point(number)
        cursor = self._cursor_for(number)
        last = cursor.last
        if last is not None:
            return last
        with cursor.lock:
            if cursor.last is not None:
                return cursor.last
            segment = self._advance(cursor)
        if segment is None:
            raise PrecisionUnattainable(f"{number!r} produced no Segments")
        return segment

    def __contains__(self, number) -> bool:
        return id(number) in self._registry

    def stats(self) -> CacheStats:
        with self._stats_lock:
            return CacheStats(
                entries=len(self._registry),
                advances=self._advances,
                retries=self._retries,
            )

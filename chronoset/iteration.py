"""Lazy enumeration of points inside bounded intervals.

Sequences are restartable: each `iter()` call walks the ranges afresh, so a
sequence can be shared and consumed any number of times.
"""

import logging
from collections.abc import Callable, Iterable, Iterator
from typing import Any, Generic, TypeVar

from chronoset.errors import UnboundedIntervalError
from chronoset.range import Range
from chronoset.temporal import chronology_of
from chronoset.util import Unit

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

RangeGenerator = Callable[[Any, Any], Iterable[R]]


def require_bounded(ranges: tuple[Range[Any], ...], operation: str) -> None:
    for rng in ranges:
        if not rng.is_bounded:
            raise UnboundedIntervalError(
                f"{operation}() requires a bounded interval, got range {rng}.\n"
                f"Enumerating an unbounded range would never finish.\n"
                f"Fix: intersect with explicit bounds first:\n"
                f"  bounded = interval & Interval.closed(first, last)\n"
                f"  bounded.{operation}(...)"
            )


def count(ranges: tuple[Range[Any], ...], unit: Unit) -> int:
    """Number of unit steps in the ranges, computed from endpoint distances."""
    require_bounded(ranges, "count")
    total = 0
    for rng in ranges:
        total += chronology_of(rng.start).distance(rng.start, rng.end, unit) + 1
    return total


class UnitSequence(Generic[T]):
    """Points `start + k * unit` for k = 0, 1, ... while `<= end`, per range.

    Each point is computed from the range start rather than from the previous
    point, so month steps from the 31st do not drift to the 28th.
    """

    def __init__(self, ranges: tuple[Range[T], ...], unit: Unit):
        require_bounded(ranges, "iterate")
        for rng in ranges:
            chronology_of(rng.start).check_unit(rng.start, unit)
        self.ranges: tuple[Range[T], ...] = ranges
        self.unit: Unit = unit

    def __iter__(self) -> Iterator[T]:
        logger.debug(f"iterate: walking {len(self.ranges)} range(s) by {self.unit}")
        for rng in self.ranges:
            chronology = chronology_of(rng.start)
            point = rng.start
            steps = 0
            while point <= rng.end:
                yield point
                steps += 1
                try:
                    point = chronology.step(rng.start, self.unit, steps)
                except OverflowError:
                    break

    def __len__(self) -> int:
        return count(self.ranges, self.unit)

    def __repr__(self) -> str:
        spans = ", ".join(str(rng) for rng in self.ranges)
        return f"UnitSequence({{{spans}}} by {self.unit})"


class GeneratedSequence(Generic[R]):
    """Values produced by `generator(start, end)` for each range, in order."""

    def __init__(
        self, ranges: tuple[Range[Any], ...], generator: RangeGenerator[R]
    ):
        require_bounded(ranges, "generate")
        self.ranges: tuple[Range[Any], ...] = ranges
        self.generator: RangeGenerator[R] = generator

    def __iter__(self) -> Iterator[R]:
        for rng in self.ranges:
            yield from self.generator(rng.start, rng.end)

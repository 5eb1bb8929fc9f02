"""Set algebra over canonical range tuples.

Every function takes and returns tuples of `Range` in canonical form:
sorted by start, pairwise disjoint and non-touching. Two closed ranges touch
when the later one starts at the successor of the earlier one's end, as
defined by the points' chronology (one day for dates, one microsecond for
datetimes).
"""

import heapq
import logging
from collections.abc import Iterable, Sequence
from typing import Any, TypeVar

from chronoset.range import Range, earlier_end, later_end, later_start
from chronoset.temporal import chronology_of
from chronoset.util import Unit

logger = logging.getLogger(__name__)

T = TypeVar("T")

Ranges = tuple[Range[Any], ...]


def _sort_key(rng: Range[Any]) -> tuple[Any, ...]:
    return (rng.start_key, rng.end_key)


def _connected(current: Range[T], following: Range[T]) -> bool:
    """True if `following` (sorted after `current`) overlaps or touches it."""
    if current.end is None or following.start is None:
        return True
    if following.start <= current.end:
        return True
    # following.start > current.end, so it has a predecessor
    before = chronology_of(following.start).predecessor(following.start)
    return before is not None and before <= current.end


def _sweep(ordered: Iterable[Range[T]]) -> Ranges:
    merged: list[Range[T]] = []
    current: Range[T] | None = None

    for rng in ordered:
        if current is None:
            current = rng
        elif _connected(current, rng):
            end = later_end(current.end, rng.end)
            if end is not current.end:
                current = Range(start=current.start, end=end)
        else:
            merged.append(current)
            current = rng

    if current is not None:
        merged.append(current)
    return tuple(merged)


def merge(ranges: Iterable[Range[T]]) -> Ranges:
    """Canonicalize arbitrary ranges: sort, then merge overlapping or touching ones."""
    return _sweep(sorted(ranges, key=_sort_key))


def union(sources: Sequence[Ranges]) -> Ranges:
    """Union of canonical range tuples.

    Each source is already sorted, so a k-way heap merge yields one sorted
    stream for the merge sweep.
    """
    if len(sources) == 1:
        return sources[0]
    logger.debug(f"union: merging {len(sources)} range sets")
    return _sweep(heapq.merge(*sources, key=_sort_key))


def intersect(left: Ranges, right: Ranges) -> Ranges:
    """Intersection of two canonical range tuples.

    Advances one cursor per side in lockstep. Whenever the current ranges
    overlap, the overlap `(later start, earlier end)` is emitted; then the
    range that ends first is advanced (both when they end together).
    """
    result: list[Range[Any]] = []
    i = j = 0

    while i < len(left) and j < len(right):
        a, b = left[i], right[j]
        start = later_start(a.start, b.start)
        end = earlier_end(a.end, b.end)

        if start is None or end is None or start <= end:
            result.append(Range(start=start, end=end))

        a_end, b_end = a.end_key, b.end_key
        if a_end <= b_end:
            i += 1
        if b_end <= a_end:
            j += 1

    return tuple(result)


def intersection(sources: Sequence[Ranges]) -> Ranges:
    """Fold `intersect` over the sources, left to right."""
    result = sources[0]
    for other in sources[1:]:
        if not result:
            break
        result = intersect(result, other)
    return result


def _ends_before(hole: Range[T], rng: Range[T]) -> bool:
    return hole.end is not None and rng.start is not None and hole.end < rng.start


def subtract(source: Ranges, subtractors: Ranges) -> Ranges:
    """Remove every point of `subtractors` from `source`.

    Sweep-line: for each source range a cursor tracks the first point not yet
    emitted or removed. Each overlapping subtractor emits the fragment before
    it (ending at the predecessor of its start) and moves the cursor to the
    successor of its end. Subtractors are consumed in order across all source
    ranges; one that extends past the current source range is kept for the
    next.
    """
    if not source or not subtractors:
        return source

    result: list[Range[Any]] = []
    k = 0

    for rng in source:
        # Skip subtractors that end before this range starts
        while k < len(subtractors) and _ends_before(subtractors[k], rng):
            k += 1

        cursor = rng.start
        exhausted = False
        m = k
        while m < len(subtractors):
            hole = subtractors[m]
            # Hole begins after this range
            if hole.start is not None and rng.end is not None and hole.start > rng.end:
                break

            if hole.start is not None and (cursor is None or hole.start > cursor):
                before = chronology_of(hole.start).predecessor(hole.start)
                # None: the hole starts at the first point of the calendar
                if before is not None:
                    result.append(Range(start=cursor, end=before))

            if hole.end_key >= rng.end_key:
                exhausted = True
                break
            cursor = chronology_of(hole.end).successor(hole.end)
            if cursor is None:
                # Hole ends at the last point of the calendar
                exhausted = True
                break
            m += 1

        if not exhausted:
            result.append(Range(start=cursor, end=rng.end))
        k = m

    return tuple(result)


def _within_one_unit(end: Any, start: Any, unit: Unit) -> bool:
    try:
        reach = chronology_of(end).step(end, unit, 1)
    except OverflowError:
        # One unit past `end` lies beyond the calendar, and so beyond `start`
        return True
    return reach >= start


def coalesce(ranges: Ranges, unit: Unit) -> Ranges:
    """Close gaps that hold less than one `unit` of points.

    Consecutive ranges `x`, `y` merge when stepping `x.end` forward by one
    unit reaches `y.start`.
    """
    if len(ranges) < 2:
        return ranges

    merged: list[Range[Any]] = []
    current = ranges[0]
    for rng in ranges[1:]:
        # Canonical input: only the outermost sides can be unbounded
        if _within_one_unit(current.end, rng.start, unit):
            current = Range(start=current.start, end=rng.end)
        else:
            merged.append(current)
            current = rng
    merged.append(current)

    if len(merged) < len(ranges):
        logger.debug(
            f"coalesce: closed {len(ranges) - len(merged)} gap(s) below one {unit}"
        )
    return tuple(merged)


def complement(ranges: Ranges) -> Ranges:
    """Every point not covered by `ranges`.

    Gaps lie before the first range, between consecutive ranges and after
    the last one; a bounded outer side leaves an unbounded gap beyond it.
    """
    if not ranges:
        return (Range(),)

    gaps: list[Range[Any]] = []
    first = ranges[0]
    if first.start is not None:
        before = chronology_of(first.start).predecessor(first.start)
        if before is not None:
            gaps.append(Range(end=before))

    for current, following in zip(ranges, ranges[1:]):
        # Canonical ranges are separated by at least one point
        after = chronology_of(current.end).successor(current.end)
        before = chronology_of(following.start).predecessor(following.start)
        gaps.append(Range(start=after, end=before))

    last = ranges[-1]
    if last.end is not None:
        after = chronology_of(last.end).successor(last.end)
        if after is not None:
            gaps.append(Range(start=after))

    return tuple(gaps)


def is_canonical(ranges: Sequence[Range[Any]]) -> bool:
    """True if ranges are sorted, disjoint and non-touching."""
    for current, following in zip(ranges, ranges[1:]):
        if _sort_key(following) <= _sort_key(current):
            return False
        if _connected(current, following):
            return False
    return True

import bisect
import logging
from collections.abc import Callable, Iterable, Iterator
from datetime import date, datetime
from typing import Any, Generic, TypeVar, overload

from chronoset import algebra
from chronoset.convert import convert_lower, convert_upper
from chronoset.errors import InvalidArgumentError
from chronoset.iteration import (
    GeneratedSequence,
    RangeGenerator,
    UnitSequence,
    count,
)
from chronoset.range import Range, start_key
from chronoset.temporal import chronology_of
from chronoset.util import DAYS, MONTHS, Unit
from chronoset.yearmonth import YearMonth

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")
V = TypeVar("V")

Mapper = Callable[[T], R]


def _required(value: T | None, name: str, factory: str) -> T:
    if value is None:
        raise InvalidArgumentError(
            f"Interval.{factory}() requires a {name}, got None.\n"
            f"Hint: use Interval.between() when either endpoint may be missing:\n"
            f"  Interval.between(start, None)  # [start..+inf)"
        )
    return value


def _check_unit(ranges: tuple[Range[Any], ...], unit: Unit) -> None:
    """Raise if the point type of `ranges` cannot step by `unit`."""
    for rng in ranges:
        for point in (rng.start, rng.end):
            if point is not None:
                chronology_of(point).check_unit(point, unit)
                return


class Interval(Generic[T]):
    """An immutable set of points made of disjoint closed ranges.

    Ranges are kept sorted and merged whenever they overlap or touch, so two
    intervals holding the same points compare equal. Every operation returns
    a new interval.

    Example:
        >>> march = Interval.closed(date(2018, 3, 15), date(2018, 3, 25))
        >>> april = Interval.closed(date(2018, 4, 4), date(2018, 4, 14))
        >>> both = march | april
        >>> len(both)  # two ranges, gap preserved
        2
        >>> both.count_days()
        22
    """

    __slots__ = ("_ranges",)

    def __init__(self, ranges: Iterable[Range[T]] = ()):
        self._ranges: tuple[Range[T], ...] = algebra.merge(ranges)

    @classmethod
    def _wrap(cls, ranges: tuple[Range[T], ...]) -> "Interval[T]":
        """Wrap ranges already in canonical form, skipping the merge pass."""
        interval = cls.__new__(cls)
        interval._ranges = ranges
        return interval

    # Factories

    @classmethod
    def of(cls, *ranges: Range[T]) -> "Interval[T]":
        return cls(ranges)

    @classmethod
    def between(cls, start: T | None = None, end: T | None = None) -> "Interval[T]":
        """[start..end], with a missing endpoint meaning unbounded on that side."""
        return cls._wrap((Range(start=start, end=end),))

    @classmethod
    def from_(cls, start: T | None) -> "Interval[T]":
        """[start..+inf), or all points when start is None."""
        return cls.between(start, None)

    @classmethod
    def to(cls, end: T | None) -> "Interval[T]":
        """(-inf..end], or all points when end is None."""
        return cls.between(None, end)

    @classmethod
    def at_least(cls, start: T) -> "Interval[T]":
        return cls.between(_required(start, "start", "at_least"), None)

    @classmethod
    def at_most(cls, end: T) -> "Interval[T]":
        return cls.between(None, _required(end, "end", "at_most"))

    @classmethod
    def closed(cls, start: T, end: T) -> "Interval[T]":
        return cls.between(
            _required(start, "start", "closed"), _required(end, "end", "closed")
        )

    @classmethod
    def all(cls) -> "Interval[T]":
        return cls._wrap((Range(),))

    @classmethod
    def none(cls) -> "Interval[T]":
        return cls._wrap(())

    # Algebra

    def union(self, *others: "Interval[T]") -> "Interval[T]":
        return Interval._wrap(
            algebra.union([self._ranges, *(other._ranges for other in others)])
        )

    def intersection(self, *others: "Interval[T]") -> "Interval[T]":
        return Interval._wrap(
            algebra.intersection([self._ranges, *(other._ranges for other in others)])
        )

    def difference(
        self, other: "Interval[T]", unit: Unit | None = None
    ) -> "Interval[T]":
        """Points of this interval that are not in `other`.

        With `unit`, fragments separated by less than one unit are joined
        back together, so subtracting e.g. a few hours from a datetime
        interval does not split it when reasoning in days.

        Example:
            >>> may = Interval.closed(date(2018, 5, 1), date(2018, 5, 10))
            >>> hole = Interval.closed(date(2018, 5, 3), date(2018, 5, 6))
            >>> may.difference(hole)
            Interval({[2018-05-01..2018-05-02], [2018-05-07..2018-05-10]})
        """
        if unit is not None:
            _check_unit(self._ranges + other._ranges, unit)
        ranges = algebra.subtract(self._ranges, other._ranges)
        if unit is not None:
            ranges = algebra.coalesce(ranges, unit)
        return Interval._wrap(ranges)

    def complement(self) -> "Interval[T]":
        return Interval._wrap(algebra.complement(self._ranges))

    def __or__(self, other: object) -> "Interval[T]":
        if not isinstance(other, Interval):
            return NotImplemented
        return self.union(other)

    def __and__(self, other: object) -> "Interval[T]":
        if not isinstance(other, Interval):
            return NotImplemented
        return self.intersection(other)

    def __sub__(self, other: object) -> "Interval[T]":
        if not isinstance(other, Interval):
            return NotImplemented
        return self.difference(other)

    def __invert__(self) -> "Interval[T]":
        return self.complement()

    # Granularity mapping

    def map(
        self, lower_mapper: Mapper[T, R], upper_mapper: Mapper[T, R] | None = None
    ) -> "Interval[R]":
        """Apply `lower_mapper` to range starts and `upper_mapper` to range ends.

        Unbounded sides stay unbounded. Mapped ranges that now overlap or
        touch are merged. `upper_mapper` defaults to `lower_mapper`.
        """
        if upper_mapper is None:
            upper_mapper = lower_mapper
        mapped = [
            Range(
                start=None if rng.start is None else lower_mapper(rng.start),
                end=None if rng.end is None else upper_mapper(rng.end),
            )
            for rng in self._ranges
        ]
        result: Interval[R] = Interval(mapped)
        logger.debug(f"map: {len(self._ranges)} range(s) -> {len(result)} range(s)")
        return result

    def to_months_interval(self) -> "Interval[YearMonth]":
        return self.map(
            lambda t: convert_lower(t, YearMonth), lambda t: convert_upper(t, YearMonth)
        )

    def to_days_interval(self) -> "Interval[date]":
        return self.map(
            lambda t: convert_lower(t, date), lambda t: convert_upper(t, date)
        )

    def to_time_interval(self) -> "Interval[datetime]":
        return self.map(
            lambda t: convert_lower(t, datetime), lambda t: convert_upper(t, datetime)
        )

    # Enumeration

    @overload
    def iterate(self, unit: Unit) -> UnitSequence[T]: ...

    @overload
    def iterate(
        self,
        unit: Unit,
        lower_mapper: Mapper[T, R],
        upper_mapper: Mapper[T, R] | None = None,
    ) -> UnitSequence[R]: ...

    def iterate(
        self,
        unit: Unit,
        lower_mapper: Mapper[T, Any] | None = None,
        upper_mapper: Mapper[T, Any] | None = None,
    ) -> UnitSequence[Any]:
        """Lazily walk every range by `unit`, optionally after mapping endpoints.

        Raises:
            UnboundedIntervalError: If any range is unbounded
        """
        source: Interval[Any] = self
        if lower_mapper is not None:
            source = self.map(lower_mapper, upper_mapper)
        elif upper_mapper is not None:
            raise InvalidArgumentError(
                "iterate() got upper_mapper without lower_mapper.\n"
                "Pass a single mapper for both sides: interval.iterate(unit, mapper)"
            )
        return UnitSequence(source._ranges, unit)

    def generate(self, generator: RangeGenerator[R]) -> GeneratedSequence[R]:
        """Chain `generator(start, end)` over every range, in order."""
        return GeneratedSequence(self._ranges, generator)

    def days(self) -> UnitSequence[date]:
        return self.iterate(
            DAYS, lambda t: convert_lower(t, date), lambda t: convert_upper(t, date)
        )

    def months(self) -> UnitSequence[YearMonth]:
        return self.iterate(
            MONTHS,
            lambda t: convert_lower(t, YearMonth),
            lambda t: convert_upper(t, YearMonth),
        )

    def count(self, unit: Unit) -> int:
        """Number of points `iterate(unit)` would yield, without walking them."""
        return count(self._ranges, unit)

    def count_days(self) -> int:
        return self.count(DAYS)

    # Queries

    @property
    def ranges(self) -> tuple[Range[T], ...]:
        return self._ranges

    def contains(self, value: T) -> bool:
        index = bisect.bisect_right(
            self._ranges, start_key(value), key=lambda rng: rng.start_key
        )
        return index > 0 and self._ranges[index - 1].contains(value)

    def has_lower_bound(self) -> bool:
        return bool(self._ranges) and self._ranges[0].start is not None

    def has_upper_bound(self) -> bool:
        return bool(self._ranges) and self._ranges[-1].end is not None

    def find_lower_endpoint(self) -> T | None:
        return self._ranges[0].start if self._ranges else None

    def find_upper_endpoint(self) -> T | None:
        return self._ranges[-1].end if self._ranges else None

    def is_present(self) -> bool:
        return bool(self._ranges)

    def not_none(self) -> "Interval[T] | None":
        """This interval if it holds any point, else None."""
        return self if self._ranges else None

    def sub_intervals(self) -> tuple["Interval[T]", ...]:
        return tuple(Interval._wrap((rng,)) for rng in self._ranges)

    def __contains__(self, value: object) -> bool:
        return self.contains(value)  # type: ignore[arg-type]

    def __bool__(self) -> bool:
        return bool(self._ranges)

    def __len__(self) -> int:
        return len(self._ranges)

    def __iter__(self) -> Iterator[Range[T]]:
        return iter(self._ranges)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Interval):
            return NotImplemented
        return self._ranges == other._ranges

    def __hash__(self) -> int:
        return hash(self._ranges)

    def __repr__(self) -> str:
        spans = ", ".join(str(rng) for rng in self._ranges)
        return f"Interval({{{spans}}})"


def union(*intervals: Interval[T]) -> Interval[T]:
    """Union of one or more intervals (equivalent to chaining `|`)."""

    if not intervals:
        raise InvalidArgumentError(
            "union() requires at least one interval argument.\n"
            "Example: union(interval_a, interval_b, interval_c)\n"
            "Hint: union_of(intervals) accepts an empty collection"
        )
    return intervals[0].union(*intervals[1:])


def intersection(*intervals: Interval[T]) -> Interval[T]:
    """Intersection of one or more intervals (equivalent to chaining `&`)."""

    if not intervals:
        raise InvalidArgumentError(
            "intersection() requires at least one interval argument.\n"
            "Example: intersection(interval_a, interval_b, interval_c)"
        )
    return intervals[0].intersection(*intervals[1:])


@overload
def union_of(intervals: Iterable[Interval[T]]) -> Interval[T]: ...


@overload
def union_of(
    intervals: Iterable[V], key: Callable[[V], Interval[T]]
) -> Interval[T]: ...


def union_of(
    intervals: Iterable[Any], key: Callable[[Any], Interval[T]] | None = None
) -> Interval[T]:
    """Union of a collection of intervals; empty collections give `Interval.none()`.

    `key`, when given, extracts the interval from each item:
        >>> union_of(bookings, key=lambda booking: booking.period)
    """
    items = intervals if key is None else map(key, intervals)
    return Interval._wrap(algebra.union([interval.ranges for interval in items]))


def intersection_of(intervals: Iterable[Interval[T]]) -> Interval[T]:
    """Intersection of a non-empty collection of intervals."""
    return intersection(*intervals)

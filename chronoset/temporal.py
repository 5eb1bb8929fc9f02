"""Calendar arithmetic adapters for interval point types.

An interval only needs a handful of operations from its points: total
ordering (native comparison), stepping by a unit, counting whole units
between two points, and the successor/predecessor at the type's
resolution. `Chronology` bundles the last three; one instance is
registered per point type.

Built-in adapters cover `datetime.date`, `datetime.datetime` and
`YearMonth`. Other types can be plugged in with `register()`:

    >>> class QuarterChronology(Chronology[Quarter]):
    ...     resolution = MONTHS
    ...     ...
    >>> register(Quarter, QuarterChronology())
"""

from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta
from typing import Any, Generic, TypeVar

from dateutil.relativedelta import relativedelta
from typing_extensions import override

from chronoset.util import Unit
from chronoset.yearmonth import YearMonth

T = TypeVar("T")
D = TypeVar("D", bound=date)


class Chronology(ABC, Generic[T]):
    """Unit arithmetic for one point type."""

    resolution: Unit
    units: frozenset[Unit] = frozenset(Unit)

    @abstractmethod
    def step(self, value: T, unit: Unit, amount: int = 1) -> T:
        """Return the point `amount` units away from `value`."""
        pass

    @abstractmethod
    def distance(self, start: T, end: T, unit: Unit) -> int:
        """Return the number of whole units from `start` to `end`."""
        pass

    def successor(self, value: T) -> T | None:
        """The next point at this resolution, or None past the last one."""
        try:
            return self.step(value, self.resolution, 1)
        except OverflowError:
            return None

    def predecessor(self, value: T) -> T | None:
        """The previous point at this resolution, or None before the first one."""
        try:
            return self.step(value, self.resolution, -1)
        except OverflowError:
            return None

    def supports(self, unit: Unit) -> bool:
        return unit in self.units

    def check_unit(self, value: T, unit: Unit) -> None:
        if unit not in self.units:
            valid = ", ".join(sorted(u.value for u in self.units))
            raise ValueError(
                f"Unit {unit.value!r} is not supported for "
                f"{type(value).__name__} values.\n"
                f"Supported units: {valid}"
            )


def _truncate(amount: int, size: int) -> int:
    whole = abs(amount) // size
    return whole if amount >= 0 else -whole


def _shift(value: D, unit: Unit, amount: int) -> D:
    try:
        return value + unit.delta(amount)
    except ValueError as exc:
        # relativedelta reports a year outside 1..9999 as ValueError
        name = type(value).__name__
        raise OverflowError(f"{name} value out of range: {exc}") from exc


def _month_distance(start: date, end: date) -> int:
    delta = relativedelta(end, start)
    return delta.years * 12 + delta.months


class DateChronology(Chronology[date]):
    resolution = Unit.DAYS
    units = frozenset({Unit.DAYS, Unit.WEEKS, Unit.MONTHS, Unit.YEARS})

    @override
    def step(self, value: date, unit: Unit, amount: int = 1) -> date:
        self.check_unit(value, unit)
        return _shift(value, unit, amount)

    @override
    def distance(self, start: date, end: date, unit: Unit) -> int:
        self.check_unit(start, unit)
        if unit.months:
            return _truncate(_month_distance(start, end), unit.months)
        days = (end - start).days
        return _truncate(days, 7) if unit is Unit.WEEKS else days


class DateTimeChronology(Chronology[datetime]):
    resolution = Unit.MICROSECONDS

    @override
    def step(self, value: datetime, unit: Unit, amount: int = 1) -> datetime:
        return _shift(value, unit, amount)

    @override
    def distance(self, start: datetime, end: datetime, unit: Unit) -> int:
        fixed = unit.fixed
        if fixed is None:
            return _truncate(_month_distance(start, end), unit.months)
        elapsed = end - start
        whole = abs(elapsed) // fixed
        return whole if elapsed >= timedelta(0) else -whole


_MIN_ORDINAL = YearMonth(1, 1).ordinal
_MAX_ORDINAL = YearMonth(9999, 12).ordinal


class YearMonthChronology(Chronology[YearMonth]):
    resolution = Unit.MONTHS
    units = frozenset({Unit.MONTHS, Unit.YEARS})

    @override
    def step(self, value: YearMonth, unit: Unit, amount: int = 1) -> YearMonth:
        self.check_unit(value, unit)
        ordinal = value.ordinal + amount * unit.months
        if not _MIN_ORDINAL <= ordinal <= _MAX_ORDINAL:
            raise OverflowError(
                f"YearMonth value out of range: {value} + {amount} {unit}"
            )
        return YearMonth.from_ordinal(ordinal)

    @override
    def distance(self, start: YearMonth, end: YearMonth, unit: Unit) -> int:
        self.check_unit(start, unit)
        return _truncate(end.ordinal - start.ordinal, unit.months)


_REGISTRY: dict[type, Chronology[Any]] = {
    date: DateChronology(),
    datetime: DateTimeChronology(),
    YearMonth: YearMonthChronology(),
}


def register(cls: type[T], chronology: Chronology[T]) -> None:
    """Make `cls` usable as an interval point type."""
    _REGISTRY[cls] = chronology


def chronology_of(value: T) -> Chronology[T]:
    """Return the chronology for a point value, searching its type's MRO."""
    for cls in type(value).__mro__:
        chronology = _REGISTRY.get(cls)
        if chronology is not None:
            return chronology
    raise TypeError(
        f"No chronology registered for {type(value).__name__!r}: {value!r}\n"
        f"Built-in point types: date, datetime, YearMonth\n"
        f"Hint: register your own type:\n"
        f"  from chronoset.temporal import register\n"
        f"  register({type(value).__name__}, MyChronology())"
    )

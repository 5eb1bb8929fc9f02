"""Tests for chronologies, YearMonth, units and converters."""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

import pytest
from typing_extensions import override

from chronoset import (
    DAYS,
    HOURS,
    MICROSECONDS,
    MONTHS,
    WEEKS,
    YEARS,
    Chronology,
    Interval,
    Unit,
    YearMonth,
    chronology_of,
    convert_lower,
    convert_upper,
    register,
)
from chronoset.temporal import DateChronology, DateTimeChronology, YearMonthChronology


class TestChronologyLookup:
    def test_builtin_types(self):
        assert isinstance(chronology_of(date(2018, 1, 1)), DateChronology)
        assert isinstance(chronology_of(YearMonth(2018, 1)), YearMonthChronology)

    def test_datetime_resolves_before_date(self):
        assert isinstance(chronology_of(datetime(2018, 1, 1)), DateTimeChronology)

    def test_unknown_type(self):
        with pytest.raises(TypeError, match="No chronology registered"):
            chronology_of(object())

    def test_resolutions(self):
        assert chronology_of(date(2018, 1, 1)).resolution is DAYS
        assert chronology_of(YearMonth(2018, 1)).resolution is MONTHS
        assert chronology_of(datetime(2018, 1, 1)).resolution is MICROSECONDS


class TestDateChronology:
    chronology = DateChronology()

    def test_successor_and_predecessor(self):
        assert self.chronology.successor(date(2018, 2, 28)) == date(2018, 3, 1)
        assert self.chronology.predecessor(date(2018, 1, 1)) == date(2017, 12, 31)

    def test_step(self):
        start = date(2018, 1, 31)
        assert self.chronology.step(start, DAYS, 3) == date(2018, 2, 3)
        assert self.chronology.step(start, WEEKS, 2) == date(2018, 2, 14)
        assert self.chronology.step(start, MONTHS, 1) == date(2018, 2, 28)
        assert self.chronology.step(start, YEARS, -1) == date(2017, 1, 31)

    def test_distance(self):
        start = date(2018, 1, 31)
        assert self.chronology.distance(start, date(2018, 2, 13), DAYS) == 13
        assert self.chronology.distance(start, date(2018, 2, 13), WEEKS) == 1
        assert self.chronology.distance(start, date(2018, 2, 28), MONTHS) == 1
        assert self.chronology.distance(start, date(2019, 1, 30), YEARS) == 0
        assert self.chronology.distance(date(2018, 2, 13), start, WEEKS) == -1

    def test_no_neighbours_beyond_the_calendar(self):
        assert self.chronology.successor(date.max) is None
        assert self.chronology.predecessor(date.min) is None

        with pytest.raises(OverflowError):
            self.chronology.step(date.max, DAYS)
        with pytest.raises(OverflowError):
            self.chronology.step(date(9999, 12, 1), MONTHS)
        with pytest.raises(OverflowError):
            self.chronology.step(date.min, YEARS, -1)

    def test_unsupported_unit(self):
        with pytest.raises(ValueError, match="'hours' is not supported"):
            self.chronology.step(date(2018, 1, 1), HOURS)
        assert not self.chronology.supports(HOURS)


class TestDateTimeChronology:
    chronology = DateTimeChronology()

    def test_successor_is_one_microsecond(self):
        moment = datetime(2018, 1, 1, 23, 59, 59, 999999)
        assert self.chronology.successor(moment) == datetime(2018, 1, 2)
        assert self.chronology.predecessor(datetime(2018, 1, 2)) == moment

    def test_distance_counts_whole_units(self):
        start = datetime(2018, 1, 1, 6)
        assert self.chronology.distance(start, datetime(2018, 1, 2, 18), DAYS) == 1
        assert self.chronology.distance(start, datetime(2018, 1, 2, 18), HOURS) == 36
        assert self.chronology.distance(start, datetime(2018, 3, 1, 5), MONTHS) == 1
        assert self.chronology.distance(datetime(2018, 1, 2, 18), start, DAYS) == -1

    def test_no_neighbours_beyond_the_calendar(self):
        assert self.chronology.successor(datetime.max) is None
        assert self.chronology.predecessor(datetime.min) is None

    def test_step_months(self):
        moment = datetime(2018, 1, 31, 12)
        assert self.chronology.step(moment, MONTHS) == datetime(2018, 2, 28, 12)


class TestYearMonthChronology:
    chronology = YearMonthChronology()

    def test_step_across_years(self):
        step = self.chronology.step
        assert step(YearMonth(2018, 12), MONTHS) == YearMonth(2019, 1)
        assert step(YearMonth(2018, 1), MONTHS, -1) == YearMonth(2017, 12)
        assert step(YearMonth(2018, 5), YEARS, 2) == YearMonth(2020, 5)

    def test_distance(self):
        start = YearMonth(2018, 11)
        assert self.chronology.distance(start, YearMonth(2019, 2), MONTHS) == 3
        assert self.chronology.distance(start, YearMonth(2019, 10), YEARS) == 0

    def test_no_neighbours_beyond_the_calendar(self):
        assert self.chronology.successor(YearMonth(9999, 12)) is None
        assert self.chronology.predecessor(YearMonth(1, 1)) is None
        assert self.chronology.successor(YearMonth(9999, 11)) == YearMonth(9999, 12)

        with pytest.raises(OverflowError):
            self.chronology.step(YearMonth(9990, 1), YEARS, 10)

    def test_days_are_not_supported(self):
        with pytest.raises(ValueError, match="not supported"):
            self.chronology.step(YearMonth(2018, 1), DAYS)


class TestYearMonth:
    def test_ordering(self):
        assert YearMonth(2018, 12) < YearMonth(2019, 1)
        assert max(YearMonth(2018, 3), YearMonth(2017, 11)) == YearMonth(2018, 3)

    def test_invalid_month(self):
        with pytest.raises(ValueError, match="1-12"):
            YearMonth(2018, 13)

    def test_parse_and_str(self):
        assert YearMonth.parse("2018-03") == YearMonth(2018, 3)
        assert str(YearMonth(2018, 3)) == "2018-03"

        with pytest.raises(ValueError, match="YYYY-MM"):
            YearMonth.parse("March 2018")

    def test_days(self):
        assert YearMonth(2018, 2).first_day() == date(2018, 2, 1)
        assert YearMonth(2018, 2).last_day() == date(2018, 2, 28)
        assert YearMonth(2020, 2).length() == 29

    def test_of(self):
        assert YearMonth.of(date(2018, 3, 15)) == YearMonth(2018, 3)
        assert YearMonth.of(datetime(2018, 3, 15, 10)) == YearMonth(2018, 3)


class TestConverters:
    def test_lower(self):
        moment = datetime(2018, 3, 15, 10, 30)
        assert convert_lower(moment, date) == date(2018, 3, 15)
        assert convert_lower(moment, YearMonth) == YearMonth(2018, 3)
        assert convert_lower(date(2018, 3, 15), datetime) == datetime(2018, 3, 15)
        assert convert_lower(YearMonth(2018, 3), date) == date(2018, 3, 1)
        assert convert_lower(YearMonth(2018, 3), datetime) == datetime(2018, 3, 1)

    def test_upper(self):
        assert convert_upper(date(2018, 3, 15), datetime) == datetime.combine(
            date(2018, 3, 15), time.max
        )
        assert convert_upper(YearMonth(2018, 3), date) == date(2018, 3, 31)
        assert convert_upper(YearMonth(2018, 3), datetime) == datetime(
            2018, 3, 31, 23, 59, 59, 999999
        )
        assert convert_upper(datetime(2018, 3, 15, 10), date) == date(2018, 3, 15)

    def test_identity(self):
        moment = datetime(2018, 3, 15, 10, 30)
        assert convert_lower(moment, datetime) is moment
        assert convert_upper(date(2018, 3, 15), date) == date(2018, 3, 15)

    def test_unsupported(self):
        with pytest.raises(TypeError, match="Cannot convert"):
            convert_lower(42, date)
        with pytest.raises(TypeError, match="Cannot convert"):
            convert_upper(date(2018, 1, 1), str)


class TestUnit:
    def test_fixed_lengths(self):
        assert DAYS.fixed == timedelta(days=1)
        assert HOURS.fixed == timedelta(hours=1)
        assert MONTHS.fixed is None
        assert YEARS.fixed is None

    def test_months(self):
        assert YEARS.months == 12
        assert MONTHS.months == 1
        assert WEEKS.months == 0

    def test_delta(self):
        assert date(2018, 1, 31) + MONTHS.delta(1) == date(2018, 2, 28)
        assert Unit("days") is DAYS
        assert str(WEEKS) == "weeks"


@dataclass(frozen=True, order=True)
class Quarter:
    year: int
    quarter: int

    @property
    def ordinal(self) -> int:
        return self.year * 4 + self.quarter - 1


class QuarterChronology(Chronology[Quarter]):
    resolution = MONTHS
    units = frozenset({MONTHS, YEARS})

    @override
    def step(self, value: Quarter, unit: Unit, amount: int = 1) -> Quarter:
        self.check_unit(value, unit)
        quarters = amount * 4 if unit is YEARS else amount
        year, index = divmod(value.ordinal + quarters, 4)
        return Quarter(year, index + 1)

    @override
    def distance(self, start: Quarter, end: Quarter, unit: Unit) -> int:
        self.check_unit(start, unit)
        quarters = end.ordinal - start.ordinal
        return quarters // 4 if unit is YEARS else quarters


def test_registered_type_works_with_intervals() -> None:
    """A registered point type gets adjacency, algebra and enumeration."""
    register(Quarter, QuarterChronology())

    first_half = Interval.closed(Quarter(2018, 1), Quarter(2018, 2))
    second_half = Interval.closed(Quarter(2018, 3), Quarter(2018, 4))
    year = first_half | second_half

    assert year == Interval.closed(Quarter(2018, 1), Quarter(2018, 4))
    assert year.count(MONTHS) == 4
    assert list((year - first_half).iterate(MONTHS)) == [
        Quarter(2018, 3),
        Quarter(2018, 4),
    ]

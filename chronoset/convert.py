"""Granularity converters between point types.

`convert_lower` floors a value to the first point of its containing unit in
the target type, `convert_upper` ceils it to the last one. Applying the pair
to a range's start and end yields a range that covers every original point.

    >>> convert_lower(date(2018, 3, 15), datetime)
    datetime.datetime(2018, 3, 15, 0, 0)
    >>> convert_upper(YearMonth(2018, 2), date)
    datetime.date(2018, 2, 28)
"""

from datetime import date, datetime, time
from typing import Any, Literal, TypeVar

from chronoset.yearmonth import YearMonth

R = TypeVar("R", date, datetime, YearMonth)


def _convert(value: Any, target: type[R], edge: Literal["lower", "upper"]) -> R:
    # datetime first: it is also a date
    if isinstance(value, datetime):
        if target is datetime:
            return value
        if target is date:
            return value.date()
        if target is YearMonth:
            return YearMonth.of(value)
    elif isinstance(value, date):
        if target is date:
            return value
        if target is datetime:
            moment = time.min if edge == "lower" else time.max
            return datetime.combine(value, moment)
        if target is YearMonth:
            return YearMonth.of(value)
    elif isinstance(value, YearMonth):
        if target is YearMonth:
            return value
        day = value.first_day() if edge == "lower" else value.last_day()
        if target is date:
            return day
        if target is datetime:
            return _convert(day, datetime, edge)

    raise TypeError(
        f"Cannot convert {type(value).__name__} {value!r} to {target.__name__}.\n"
        f"Supported point types: date, datetime, YearMonth"
    )


def convert_lower(value: Any, target: type[R]) -> R:
    """Convert a lower endpoint, flooring to the start of its unit."""
    return _convert(value, target, "lower")


def convert_upper(value: Any, target: type[R]) -> R:
    """Convert an upper endpoint, ceiling to the end of its unit."""
    return _convert(value, target, "upper")

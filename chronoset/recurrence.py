"""Recurring point generators using RFC 5545 recurrence rules.

A `RecurringPattern` is a range generator for `Interval.generate`: called
with a range's start and end it yields every occurrence inside the range.
It is backed by python-dateutil's rrule implementation.

Example:
    >>> quarter = Interval.closed(date(2025, 1, 1), date(2025, 3, 31))
    >>> paydays = list(quarter.generate(recurring("monthly", day_of_month=[1, 15])))
    >>> len(paydays)
    6
"""

from collections.abc import Iterator
from datetime import date, datetime, time, timedelta
from typing import Any, Literal, TypeAlias, TypeVar, overload

from dateutil.rrule import (
    DAILY,
    FR,
    MO,
    MONTHLY,
    SA,
    SU,
    TH,
    TU,
    WE,
    WEEKLY,
    YEARLY,
    rrule,
    weekday,
)

Day: TypeAlias = Literal[
    "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"
]
Frequency: TypeAlias = Literal["daily", "weekly", "monthly", "yearly"]
V = TypeVar("V")

# Mapping from day names to dateutil weekday constants
_DAY_MAP: dict[str, weekday] = {
    "monday": MO,
    "tuesday": TU,
    "wednesday": WE,
    "thursday": TH,
    "friday": FR,
    "saturday": SA,
    "sunday": SU,
}

_FREQ_MAP = {
    "daily": DAILY,
    "weekly": WEEKLY,
    "monthly": MONTHLY,
    "yearly": YEARLY,
}


def _as_list(value: V | list[V]) -> list[V]:
    return value if isinstance(value, list) else [value]


def _weekday(name: str, week: int | None) -> weekday:
    """Resolve a day name, pinned to the n-th week of the month when given."""
    try:
        day = _DAY_MAP[name.lower()]
    except KeyError:
        valid = ", ".join(_DAY_MAP)
        raise ValueError(
            f"Invalid day name: {name!r}\n"
            f"Valid days: {valid}\n"
            f"Example: recurring('weekly', day=['monday', 'thursday'])"
        ) from None
    return day if week is None else day(week)


class RecurringPattern:
    """Generate the occurrences of a recurrence rule within a range.

    The rule is phase-aligned to the 1970-01-01 epoch, so "every other
    Monday" names the same Mondays whichever range it is applied to.
    Ranges of `date` yield dates; ranges of `datetime` yield datetimes at
    time-of-day `at`, in the range's timezone.
    """

    def __init__(
        self,
        freq: Frequency,
        *,
        interval: int = 1,
        day: Day | list[Day] | None = None,
        week: int | None = None,
        day_of_month: int | list[int] | None = None,
        month: int | list[int] | None = None,
        at: time = time.min,
    ):
        """
        Args:
            freq: Frequency - "daily", "weekly", "monthly", or "yearly"
            interval: Repeat every N units (default 1)
            day: Day(s) of week for weekly/monthly patterns
                ("monday" or ["monday", "wednesday"])
            week: Which week of month for monthly patterns
                (1=first, -1=last, 2=second, etc.)
            day_of_month: Day(s) of month (1-31, or -1 for last day)
            month: Month(s) for yearly patterns (1-12)
            at: Time of day of each occurrence for datetime ranges
        """
        if freq not in _FREQ_MAP:
            valid = ", ".join(_FREQ_MAP)
            raise ValueError(
                f"Invalid frequency: {freq!r}\n"
                f"Valid frequencies: {valid}\n"
                f"Example: recurring('monthly', day_of_month=1)"
            )
        if interval < 1:
            raise ValueError(f"interval must be a positive integer, got {interval}")

        self.freq: Frequency = freq
        self.interval: int = interval
        self.at: time = at

        # dtstart is left out: each range gets its own phase-aligned anchor
        self.rrule_kwargs: dict[str, Any] = {
            "freq": _FREQ_MAP[freq],
            "interval": interval,
        }
        if day is not None:
            self.rrule_kwargs["byweekday"] = [
                _weekday(name, week) for name in _as_list(day)
            ]
        if day_of_month is not None:
            self.rrule_kwargs["bymonthday"] = _as_list(day_of_month)
        if month is not None:
            self.rrule_kwargs["bymonth"] = _as_list(month)

    def _get_safe_anchor(self, start_dt: datetime) -> datetime:
        """Calculate a phase-aligned start date for rrule near the target date.

        Ensures that the rrule sequence maintains its phase (e.g., "every 2
        weeks") regardless of where we start generating. The anchor is derived
        from the epoch so that unspecified fields (day of month, time of day)
        have stable defaults.
        """
        epoch = datetime(1970, 1, 1, tzinfo=start_dt.tzinfo)

        if self.freq == "daily":
            delta_days = (start_dt.date() - epoch.date()).days
            offset = delta_days % self.interval
            return epoch + timedelta(days=delta_days - offset)

        elif self.freq == "weekly":
            # Align to the Monday before epoch (1969-12-29) to match rrule's
            # ISO week boundaries
            epoch_monday = epoch - timedelta(days=3)
            delta_days = (start_dt.date() - epoch_monday.date()).days
            weeks = delta_days // 7
            offset = weeks % self.interval
            return epoch_monday + timedelta(weeks=weeks - offset)

        elif self.freq == "monthly":
            total_months = (start_dt.year - epoch.year) * 12 + start_dt.month - 1
            offset = total_months % self.interval
            abs_total = epoch.year * 12 + total_months - offset
            year, month_index = divmod(abs_total, 12)
            return epoch.replace(year=year, month=month_index + 1)

        # yearly
        delta_years = start_dt.year - epoch.year
        offset = delta_years % self.interval
        return epoch.replace(year=start_dt.year - offset)

    @overload
    def __call__(self, start: datetime, end: datetime) -> Iterator[datetime]: ...

    @overload
    def __call__(self, start: date, end: date) -> Iterator[date]: ...

    def __call__(self, start: date, end: date) -> Iterator[Any]:
        """Yield occurrences between `start` and `end`, both inclusive."""
        if isinstance(start, datetime) and isinstance(end, datetime):
            start_dt, end_dt = start, end
            as_dates = False
        elif not isinstance(start, datetime) and not isinstance(end, datetime):
            start_dt = datetime.combine(start, time.min)
            end_dt = datetime.combine(end, time.max)
            as_dates = True
        else:
            raise TypeError(
                f"Recurring patterns need both bounds of the same type.\n"
                f"Got start={start!r}, end={end!r}"
            )

        anchor = self._get_safe_anchor(start_dt).replace(
            hour=self.at.hour,
            minute=self.at.minute,
            second=self.at.second,
            microsecond=self.at.microsecond,
        )
        rules = rrule(dtstart=anchor, **self.rrule_kwargs)

        for occurrence in rules:
            # Fast-forward to the range
            if occurrence < start_dt:
                continue
            # rrule yields in order, so once past the end we're done
            if occurrence > end_dt:
                break
            yield occurrence.date() if as_dates else occurrence


def recurring(
    freq: Frequency,
    *,
    interval: int = 1,
    day: Day | list[Day] | None = None,
    week: int | None = None,
    day_of_month: int | list[int] | None = None,
    month: int | list[int] | None = None,
    at: time = time.min,
) -> RecurringPattern:
    """
    Create a generator of recurring points for `Interval.generate`.

    Args:
        freq: Frequency - "daily", "weekly", "monthly", or "yearly"
        interval: Repeat every N units (e.g., interval=2 for bi-weekly). Default: 1
        day: Day(s) of week ("monday", ["tuesday", "thursday"], etc.)
        week: Which week of month (1=first, -1=last). Only for freq="monthly"
        day_of_month: Day(s) of month (1-31, or -1 for last day). For freq="monthly"
        month: Month(s) (1-12). For freq="yearly"
        at: Time of day of each occurrence, used for datetime intervals

    Returns:
        Callable yielding the occurrences within a (start, end) range

    Examples:
        >>> from chronoset import Interval, recurring
        >>>
        >>> q1 = Interval.closed(date(2025, 1, 1), date(2025, 3, 31))
        >>>
        >>> # First Monday of each month
        >>> list(q1.generate(recurring("monthly", week=1, day="monday")))
        [datetime.date(2025, 1, 6), datetime.date(2025, 2, 3),
         datetime.date(2025, 3, 3)]
        >>>
        >>> # Every other Tuesday
        >>> biweekly = q1.generate(recurring("weekly", interval=2, day="tuesday"))
        >>>
        >>> # Last Friday of each month at 4pm
        >>> reviews = q1.to_time_interval().generate(
        ...     recurring("monthly", week=-1, day="friday", at=time(16))
        ... )
    """
    return RecurringPattern(
        freq,
        interval=interval,
        day=day,
        week=week,
        day_of_month=day_of_month,
        month=month,
        at=at,
    )


def day_of_week(days: Day | list[Day]) -> RecurringPattern:
    """
    Convenience generator for specific day(s) of the week.

    Example:
        >>> from chronoset import Interval, day_of_week
        >>>
        >>> january = Interval.closed(date(2025, 1, 1), date(2025, 1, 31))
        >>> mondays = list(january.generate(day_of_week("monday")))
        >>> len(mondays)
        4
    """
    return recurring("weekly", day=days)

"""Temporal units and helpers for chronoset.

A `Unit` names a calendar or clock step. Each unit knows how to build a
`relativedelta` for calendar arithmetic and, when it has a fixed length,
the equivalent `timedelta`.
"""

from datetime import timedelta
from enum import Enum

from dateutil.relativedelta import relativedelta


class Unit(Enum):
    MICROSECONDS = "microseconds"
    SECONDS = "seconds"
    MINUTES = "minutes"
    HOURS = "hours"
    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"
    YEARS = "years"

    def delta(self, amount: int = 1) -> relativedelta:
        """Return a relativedelta spanning `amount` of this unit."""
        return relativedelta(**{self.value: amount})

    @property
    def fixed(self) -> timedelta | None:
        """Exact length of one unit, or None for months and years."""
        if self in (Unit.MONTHS, Unit.YEARS):
            return None
        return timedelta(**{self.value: 1})

    @property
    def months(self) -> int:
        """Number of months in one unit (0 for fixed-length units)."""
        if self is Unit.YEARS:
            return 12
        if self is Unit.MONTHS:
            return 1
        return 0

    def __str__(self) -> str:
        return self.value


# Unit constants, re-exported at package level
MICROSECONDS = Unit.MICROSECONDS
SECONDS = Unit.SECONDS
MINUTES = Unit.MINUTES
HOURS = Unit.HOURS
DAYS = Unit.DAYS
WEEKS = Unit.WEEKS
MONTHS = Unit.MONTHS
YEARS = Unit.YEARS

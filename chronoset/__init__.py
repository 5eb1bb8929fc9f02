from .convert import convert_lower, convert_upper
from .core import Interval, intersection, intersection_of, union, union_of
from .errors import (
    IntervalError,
    InvalidArgumentError,
    InvalidRangeError,
    UnboundedIntervalError,
)
from .iteration import GeneratedSequence, UnitSequence
from .range import Range
from .recurrence import day_of_week, recurring
from .temporal import Chronology, chronology_of, register
from .util import (
    DAYS,
    HOURS,
    MICROSECONDS,
    MINUTES,
    MONTHS,
    SECONDS,
    WEEKS,
    YEARS,
    Unit,
)
from .yearmonth import YearMonth

__all__ = [
    "Interval",
    "Range",
    "YearMonth",
    "Unit",
    "union",
    "union_of",
    "intersection",
    "intersection_of",
    "convert_lower",
    "convert_upper",
    "recurring",
    "day_of_week",
    "Chronology",
    "chronology_of",
    "register",
    "UnitSequence",
    "GeneratedSequence",
    "IntervalError",
    "InvalidArgumentError",
    "InvalidRangeError",
    "UnboundedIntervalError",
    "MICROSECONDS",
    "SECONDS",
    "MINUTES",
    "HOURS",
    "DAYS",
    "WEEKS",
    "MONTHS",
    "YEARS",
]

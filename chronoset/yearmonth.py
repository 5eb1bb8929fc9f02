import calendar
import re
from dataclasses import dataclass
from datetime import date

_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


@dataclass(frozen=True, order=True)
class YearMonth:
    """A calendar month of a specific year, e.g. 2018-03."""

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError(f"YearMonth month must be 1-12, got {self.month}")
        if not 1 <= self.year <= 9999:
            raise ValueError(f"YearMonth year must be 1-9999, got {self.year}")

    @classmethod
    def of(cls, value: date) -> "YearMonth":
        """Return the month containing a date or datetime."""
        return cls(value.year, value.month)

    @classmethod
    def parse(cls, text: str) -> "YearMonth":
        match = _PATTERN.match(text.strip())
        if match is None:
            raise ValueError(
                f"Cannot parse YearMonth from {text!r}.\n"
                f"Expected format: YYYY-MM\n"
                f"Example: YearMonth.parse('2018-03')"
            )
        return cls(int(match.group(1)), int(match.group(2)))

    @property
    def ordinal(self) -> int:
        """Months since year 0, used for month arithmetic."""
        return self.year * 12 + self.month - 1

    @classmethod
    def from_ordinal(cls, ordinal: int) -> "YearMonth":
        year, month_index = divmod(ordinal, 12)
        return cls(year, month_index + 1)

    def length(self) -> int:
        """Number of days in this month."""
        return calendar.monthrange(self.year, self.month)[1]

    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    def last_day(self) -> date:
        return date(self.year, self.month, self.length())

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from chronoset.errors import InvalidRangeError

T = TypeVar("T")

# Endpoint sort keys. A missing start sorts before every value and a missing
# end after every value; the tuples never compare None against a value.
_UNBOUNDED_BELOW = (0,)
_UNBOUNDED_ABOVE = (1,)


def start_key(value: Any) -> tuple[Any, ...]:
    return _UNBOUNDED_BELOW if value is None else (1, value)


def end_key(value: Any) -> tuple[Any, ...]:
    return _UNBOUNDED_ABOVE if value is None else (0, value)


def later_start(a: T | None, b: T | None) -> T | None:
    return a if start_key(a) >= start_key(b) else b


def earlier_end(a: T | None, b: T | None) -> T | None:
    return a if end_key(a) <= end_key(b) else b


def later_end(a: T | None, b: T | None) -> T | None:
    return a if end_key(a) >= end_key(b) else b


@dataclass(frozen=True, kw_only=True)
class Range(Generic[T]):
    """A closed span of points; `None` marks an unbounded side."""

    start: T | None = None
    end: T | None = None

    def __post_init__(self) -> None:
        if self.start is not None and self.end is not None and self.start > self.end:
            raise InvalidRangeError(
                f"Range start ({self.start}) must be <= end ({self.end}).\n"
                f"Both endpoints are inclusive; use equal endpoints for a "
                f"single point.\n"
                f"Example: Interval.closed(date(2018, 5, 1), date(2018, 5, 10))"
            )

    @property
    def has_start(self) -> bool:
        return self.start is not None

    @property
    def has_end(self) -> bool:
        return self.end is not None

    @property
    def is_bounded(self) -> bool:
        return self.start is not None and self.end is not None

    @property
    def start_key(self) -> tuple[Any, ...]:
        return start_key(self.start)

    @property
    def end_key(self) -> tuple[Any, ...]:
        return end_key(self.end)

    def contains(self, value: T) -> bool:
        if self.start is not None and value < self.start:
            return False
        if self.end is not None and value > self.end:
            return False
        return True

    def __contains__(self, value: T) -> bool:
        return self.contains(value)

    def __str__(self) -> str:
        left = "(-inf" if self.start is None else f"[{self.start}"
        right = "+inf)" if self.end is None else f"{self.end}]"
        return f"{left}..{right}"

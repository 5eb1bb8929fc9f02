"""Exceptions raised by chronoset.

All of them are `ValueError` subclasses: they signal a broken call contract
(inverted bounds, missing arguments, unbounded enumeration), never a
transient condition.
"""


class IntervalError(ValueError):
    """Base class for interval contract violations."""


class InvalidRangeError(IntervalError):
    """A range was built with its start after its end."""


class InvalidArgumentError(IntervalError):
    """A required argument is missing, e.g. union() with no intervals."""


class UnboundedIntervalError(IntervalError):
    """Enumeration or counting was requested on an unbounded interval."""

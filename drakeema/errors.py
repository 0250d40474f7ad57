"""Exception hierarchy for rotation scheduling and posting."""
from __future__ import annotations


class ScheduleError(RuntimeError):
    """Base class for failures raised by the rotation engine."""


class InvalidScheduleConfig(ScheduleError, ValueError):
    """Raised when a cycle, table, window or catalog is built from bad data."""


class TemporalRangeExceeded(ScheduleError):
    """Raised when instant arithmetic leaves the representable range."""


class AmbiguousLocalTime(ScheduleError):
    """Raised when a wall-clock time is repeated or skipped in its timezone."""


class ScheduleInvariantViolated(ScheduleError):
    """Raised when a rotation scan finds no active item."""


class UnknownContentId(InvalidScheduleConfig, KeyError):
    """Raised when a feature references an id missing from the catalog."""

    def __str__(self) -> str:
        return RuntimeError.__str__(self)


class RateLimitExceeded(RuntimeError):
    """Raised when a post would exceed the configured rate limit."""


__all__ = [
    "AmbiguousLocalTime",
    "InvalidScheduleConfig",
    "RateLimitExceeded",
    "ScheduleError",
    "ScheduleInvariantViolated",
    "TemporalRangeExceeded",
    "UnknownContentId",
]

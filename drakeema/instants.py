"""Instant arithmetic shared by every rotation rule.

Elapsed counts are taken between UTC-normalised instants so that two values
sharing a ``tzinfo`` are never subtracted on their wall-clock fields. Calendar
comparisons (day of month, time of day) happen after converting the query
instant into the reference's timezone. A day is a 24-hour span.
"""
from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Tuple

from .errors import AmbiguousLocalTime, InvalidScheduleConfig, TemporalRangeExceeded

ONE_MINUTE = timedelta(minutes=1)
ONE_DAY = timedelta(days=1)
# Smallest step a datetime can take; used to nudge a reference backwards.
EPSILON = timedelta(microseconds=1)
_ZERO = timedelta(0)


def floored_mod(value: int, modulus: int) -> int:
    """Return ``value mod modulus`` in ``[0, modulus)``, also for negative values."""

    if modulus <= 0:
        raise InvalidScheduleConfig(f"Modulus must be positive, got {modulus}")
    return value % modulus


def shift(instant: datetime, delta: timedelta) -> datetime:
    """Checked ``instant + delta`` in elapsed time, kept in the instant's zone."""

    if instant.tzinfo is None:
        raise InvalidScheduleConfig(f"Instant {instant.isoformat()} has no timezone")
    try:
        return (instant.astimezone(timezone.utc) + delta).astimezone(instant.tzinfo)
    except OverflowError as exc:
        raise TemporalRangeExceeded(
            f"Cannot shift {instant.isoformat()} by {delta}"
        ) from exc


def to_utc(instant: datetime) -> datetime:
    if instant.tzinfo is None:
        raise InvalidScheduleConfig(f"Instant {instant.isoformat()} has no timezone")
    try:
        return instant.astimezone(timezone.utc)
    except OverflowError as exc:
        raise TemporalRangeExceeded(
            f"Cannot normalise {instant.isoformat()} to UTC"
        ) from exc


def difference(later: datetime, earlier: datetime) -> timedelta:
    """Exact signed span ``later - earlier`` regardless of shared tzinfo."""

    return to_utc(later) - to_utc(earlier)


def whole_units(delta: timedelta, unit: timedelta) -> int:
    """Number of whole ``unit`` in ``delta``, truncated toward zero."""

    count = abs(delta) // unit
    return count if delta >= _ZERO else -count


def local_instant(
    tz: tzinfo,
    year: int,
    month: int,
    day: int,
    hour: int = 0,
    minute: int = 0,
    second: int = 0,
    microsecond: int = 0,
) -> datetime:
    """Build a wall-clock instant in ``tz``.

    Wall times that a DST transition repeats or skips have two candidate
    offsets; such times raise :class:`AmbiguousLocalTime` instead of being
    resolved silently.
    """

    candidate = datetime(year, month, day, hour, minute, second, microsecond, tzinfo=tz)
    folded = candidate.replace(fold=1)
    if candidate.utcoffset() != folded.utcoffset():
        raise AmbiguousLocalTime(
            f"{candidate.replace(tzinfo=None).isoformat()} is ambiguous in {tz}"
        )
    return candidate


def at_time_of_day(day: date, time_of_day: time, tz: tzinfo) -> datetime:
    return local_instant(
        tz,
        day.year,
        day.month,
        day.day,
        time_of_day.hour,
        time_of_day.minute,
        time_of_day.second,
        time_of_day.microsecond,
    )


def in_zone(instant: datetime, tz: tzinfo) -> datetime:
    """Express ``instant`` in ``tz``; naive values are read as wall time in ``tz``."""

    if instant.tzinfo is None:
        return local_instant(
            tz,
            instant.year,
            instant.month,
            instant.day,
            instant.hour,
            instant.minute,
            instant.second,
            instant.microsecond,
        )
    try:
        return instant.astimezone(tz)
    except OverflowError as exc:
        raise TemporalRangeExceeded(
            f"Cannot convert {instant.isoformat()} to {tz}"
        ) from exc


def day_exists(year: int, month: int, day: int) -> bool:
    return 1 <= day <= calendar.monthrange(year, month)[1]


def add_months(year: int, month: int, delta: int) -> Tuple[int, int]:
    """Return the ``(year, month)`` that lies ``delta`` months away."""

    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def elapsed_minutes(reference: datetime, now: datetime) -> int:
    """Unsigned whole minutes between the two instants."""

    return abs(difference(now, reference)) // ONE_MINUTE


def elapsed_whole_days(reference: datetime, now: datetime) -> int:
    """Signed whole days from ``reference`` to ``now``, floored.

    Before the reference the span is nudged by one microsecond and truncated,
    then stepped back one day: ``reference - 1 day`` and ``reference - 1 µs``
    both land on -1.
    """

    delta = difference(now, reference)
    if delta < _ZERO:
        return whole_units(delta + EPSILON, ONE_DAY) - 1
    return delta // ONE_DAY


def elapsed_whole_months(reference: datetime, now: datetime) -> int:
    """Signed whole months, anchored to the reference's day and time of day."""

    local = in_zone(now, reference.tzinfo)
    months = (local.year - reference.year) * 12 + (local.month - reference.month)
    if (local.day, local.time()) < (reference.day, reference.time()):
        months -= 1
    return months


__all__ = [
    "EPSILON",
    "ONE_DAY",
    "ONE_MINUTE",
    "add_months",
    "at_time_of_day",
    "day_exists",
    "difference",
    "elapsed_minutes",
    "elapsed_whole_days",
    "elapsed_whole_months",
    "floored_mod",
    "in_zone",
    "local_instant",
    "shift",
    "to_utc",
    "whole_units",
]

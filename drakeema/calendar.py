"""Day-of-month and weekday membership rules."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, List, Optional, Tuple, Union

from .errors import InvalidScheduleConfig
from .instants import ONE_DAY, shift

Day = Union[date, datetime]


def weekday_from_sunday(day: Day) -> int:
    """Weekday number with Sunday as 0."""

    return (day.weekday() + 1) % 7


@dataclass(frozen=True)
class DayOfMonthRule:
    days: Tuple[int, ...]
    months: Optional[Tuple[int, ...]] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "days", tuple(self.days))
        if self.months is not None:
            object.__setattr__(self, "months", tuple(self.months))
            if any(not 1 <= month <= 12 for month in self.months):
                raise InvalidScheduleConfig(f"Months out of range: {self.months}")
        if not self.days or any(not 1 <= day <= 31 for day in self.days):
            raise InvalidScheduleConfig(f"Days of month out of range: {self.days}")

    def contains(self, day: Day) -> bool:
        if self.months is not None and day.month not in self.months:
            return False
        return day.day in self.days


@dataclass(frozen=True)
class WeekdayRule:
    weekdays: Tuple[int, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "weekdays", tuple(self.weekdays))
        if not self.weekdays or any(not 0 <= day <= 6 for day in self.weekdays):
            raise InvalidScheduleConfig(f"Weekdays must be within 0..6: {self.weekdays}")

    def contains(self, day: Day) -> bool:
        return weekday_from_sunday(day) in self.weekdays


Rule = Union[DayOfMonthRule, WeekdayRule]


@dataclass(frozen=True)
class CalendarEntry:
    identifier: str
    display: str
    rule: Rule


@dataclass(frozen=True)
class CalendarWindow:
    """Entries keyed by calendar rules, queried for "today" and "tomorrow"."""

    entries: Tuple[CalendarEntry, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "entries", tuple(self.entries))

    def matching(self, day: Day) -> List[CalendarEntry]:
        return [entry for entry in self.entries if entry.rule.contains(day)]

    def today(self, now: datetime) -> List[CalendarEntry]:
        return self.matching(now)

    def tomorrow(self, now: datetime) -> List[CalendarEntry]:
        return self.matching(shift(now, ONE_DAY))


def join_displays(entries: Iterable[CalendarEntry], delimiter: str) -> str:
    return delimiter.join(entry.display for entry in entries)


__all__ = [
    "CalendarEntry",
    "CalendarWindow",
    "DayOfMonthRule",
    "WeekdayRule",
    "join_displays",
    "weekday_from_sunday",
]

"""Open/closed term windows that start on fixed days of the month."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Sequence, Tuple, TypeVar

from .errors import InvalidScheduleConfig
from .instants import add_months, at_time_of_day, day_exists, floored_mod, in_zone, shift, to_utc
from .models import TermState, TermStatus, Window

logger = logging.getLogger(__name__)

DEFAULT_OPENING_TIME = time(6, 0)

T = TypeVar("T")


@dataclass(frozen=True)
class TermWindow:
    """A term opens on each opening day at ``opening_time`` and lasts ``span``.

    ``reference`` supplies the timezone for calendar comparisons and anchors the
    count of openings used to rotate companion items.
    """

    reference: datetime
    opening_days: Tuple[int, ...]
    span: timedelta
    opening_time: time = DEFAULT_OPENING_TIME

    def __post_init__(self) -> None:
        if self.reference.tzinfo is None:
            raise InvalidScheduleConfig("Term reference must carry a timezone")
        days = tuple(sorted(set(self.opening_days)))
        if not days or any(not 1 <= day <= 31 for day in days):
            raise InvalidScheduleConfig(f"Opening days out of range: {self.opening_days}")
        if self.span <= timedelta(0):
            raise InvalidScheduleConfig("Term span must be positive")
        object.__setattr__(self, "opening_days", days)

    @classmethod
    def from_hours(
        cls,
        reference: datetime,
        opening_days: Sequence[int],
        span_hours: int,
        opening_time: time = DEFAULT_OPENING_TIME,
    ) -> "TermWindow":
        return cls(reference, tuple(opening_days), timedelta(hours=span_hours), opening_time)

    def _window(self, year: int, month: int, day: int) -> Window:
        start = at_time_of_day(date(year, month, day), self.opening_time, self.reference.tzinfo)
        return Window(start, shift(start, self.span))

    def window_state(self, now: datetime) -> TermStatus:
        local = in_zone(now, self.reference.tzinfo)
        if local.day in self.opening_days:
            return TermStatus(
                TermState.FIRST_DAY, self._window(local.year, local.month, local.day)
            )

        instant = to_utc(local)
        for offset in (0, -1):
            year, month = add_months(local.year, local.month, offset)
            for day in self.opening_days:
                if not day_exists(year, month, day):
                    continue
                window = self._window(year, month, day)
                if to_utc(window.start) < instant < to_utc(window.end):
                    return TermStatus(TermState.WITHIN_TERM, window)

        logger.debug("No open term at %s", local.isoformat())
        return TermStatus(TermState.CLOSED)

    def _count_openings(self, after: date, until: date) -> int:
        count = 0
        year, month = after.year, after.month
        while (year, month) <= (until.year, until.month):
            for day in self.opening_days:
                if day_exists(year, month, day) and after < date(year, month, day) <= until:
                    count += 1
            year, month = add_months(year, month, 1)
        return count

    def elapsed_openings(self, now: datetime) -> int:
        """Signed number of opening days after the reference date up to ``now``'s date."""

        reference_date = self.reference.date()
        today = in_zone(now, self.reference.tzinfo).date()
        if today >= reference_date:
            return self._count_openings(reference_date, today)
        return -self._count_openings(today, reference_date)

    def current_item(self, items: Sequence[T], now: datetime) -> T:
        if not items:
            raise InvalidScheduleConfig("At least one item is required")
        return items[floored_mod(self.elapsed_openings(now), len(items))]


__all__ = ["DEFAULT_OPENING_TIME", "TermWindow"]

"""Calendar-driven announcements: special days, term resets and weekly resets."""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from ..calendar import (
    CalendarEntry,
    CalendarWindow,
    DayOfMonthRule,
    WeekdayRule,
    join_displays,
)
from ..templates import render
from .base import load_yaml

logger = logging.getLogger(__name__)


class _CalendarAnnouncer(ABC):
    """Announces entries matching today and entries matching tomorrow."""

    today_key = ""
    tomorrow_key = ""
    default_delimiter = "、"
    tomorrow_first = False

    def __init__(self, window: CalendarWindow, templates: Dict[str, str], delimiter: str) -> None:
        self.window = window
        self.templates = templates
        self.delimiter = delimiter

    @classmethod
    def from_dict(cls, data: Dict):
        entries = [cls._entry(item) for item in data["contents"]]
        templates = {key: data[key] for key in (cls.today_key, cls.tomorrow_key)}
        delimiter = data.get("delimiter", cls.default_delimiter)
        return cls(CalendarWindow(tuple(entries)), templates, delimiter)

    @classmethod
    def load(cls, path: Path):
        return cls.from_dict(load_yaml(path))

    @staticmethod
    @abstractmethod
    def _entry(item: Dict) -> CalendarEntry:
        """Build one calendar entry from its YAML mapping."""

    def _line(self, entries: List[CalendarEntry], key: str) -> str:
        if not entries:
            return ""
        return render(self.templates[key], contents=join_displays(entries, self.delimiter))

    def announce(self, now: datetime) -> Optional[str]:
        lines = [
            self._line(self.window.today(now), self.today_key),
            self._line(self.window.tomorrow(now), self.tomorrow_key),
        ]
        if self.tomorrow_first:
            lines.reverse()
        text = "\n".join(line for line in lines if line)
        if not text:
            logger.debug("Nothing to announce for %s at %s", type(self).__name__, now.isoformat())
            return None
        return text


class DayOfMonthEvents(_CalendarAnnouncer):
    """Special days such as monthly sales, optionally limited to some months."""

    today_key = "announcement_at_day"
    tomorrow_key = "announcement_at_day_before"
    default_delimiter = "で"

    @staticmethod
    def _entry(item: Dict) -> CalendarEntry:
        months = item.get("months")
        return CalendarEntry(
            item["id"],
            item["display"],
            DayOfMonthRule(tuple(item["days"]), tuple(months) if months else None),
        )


class TermResets(_CalendarAnnouncer):
    """Contents whose term starts on fixed days; the day before a start is the last day."""

    today_key = "announcement_at_start"
    tomorrow_key = "announcement_at_end"
    tomorrow_first = True

    @staticmethod
    def _entry(item: Dict) -> CalendarEntry:
        return CalendarEntry(item["id"], item["display"], DayOfMonthRule(tuple(item["days"])))


class WeeklyResets(_CalendarAnnouncer):
    """Contents resetting on fixed weekdays (0 is Sunday)."""

    today_key = "announcement_at_start"
    tomorrow_key = "announcement_at_end"
    default_delimiter = "\n"
    tomorrow_first = True

    @staticmethod
    def _entry(item: Dict) -> CalendarEntry:
        return CalendarEntry(item["id"], item["display"], WeekdayRule(tuple(item["reset_days"])))


__all__ = ["DayOfMonthEvents", "TermResets", "WeeklyResets"]

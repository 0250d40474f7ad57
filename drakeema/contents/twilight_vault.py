"""Twilight vault: a term that opens twice a month with a rotating monster."""
from __future__ import annotations

import logging
from datetime import datetime, time, tzinfo
from pathlib import Path
from typing import Dict, Optional, Tuple

from ..catalog import ContentCatalog, Monster
from ..models import TermState, TermStatus
from ..templates import render
from ..term import DEFAULT_OPENING_TIME, TermWindow
from .base import compile_pattern, load_yaml, parse_reference

logger = logging.getLogger(__name__)

DEFAULT_END_OF_TERM_FORMAT = "{year}年{month}月{day}日の{hour}時"


class TwilightVault:
    def __init__(
        self,
        window: TermWindow,
        monsters: Tuple[Monster, ...],
        templates: Dict[str, str],
        nickname_pattern,
        end_of_term_format: str = DEFAULT_END_OF_TERM_FORMAT,
    ) -> None:
        self.window = window
        self.monsters = monsters
        self.templates = templates
        self.nickname_pattern = nickname_pattern
        self.end_of_term_format = end_of_term_format

    @staticmethod
    def from_dict(
        data: Dict, catalog: ContentCatalog, tz: Optional[tzinfo] = None
    ) -> "TwilightVault":
        opening_time = DEFAULT_OPENING_TIME
        if "opening_time" in data:
            opening_time = time.fromisoformat(str(data["opening_time"]))
        window = TermWindow.from_hours(
            parse_reference(data["reference_date"], tz),
            data["days"],
            int(data["term_in_hours"]),
            opening_time,
        )
        monsters = catalog.require(entry["monster_id"] for entry in data["monsters"])
        templates = {
            key: data[key]
            for key in ("announcement", "announcement_at_start", "information", "out_of_term")
        }
        return TwilightVault(
            window,
            monsters,
            templates,
            compile_pattern(data["nickname_regex"]),
            data.get("end_of_term_format", DEFAULT_END_OF_TERM_FORMAT),
        )

    @staticmethod
    def load(path: Path, catalog: ContentCatalog, tz: Optional[tzinfo] = None) -> "TwilightVault":
        return TwilightVault.from_dict(load_yaml(path), catalog, tz)

    def monster_at(self, now: datetime) -> Monster:
        return self.window.current_item(self.monsters, now)

    def _end_of_term(self, status: TermStatus) -> str:
        end = status.window.end
        return self.end_of_term_format.format(
            year=end.year, month=end.month, day=end.day, hour=end.hour
        )

    def announce(self, now: datetime) -> Optional[str]:
        status = self.window.window_state(now)
        if status.state is TermState.CLOSED:
            return None
        monster = self.monster_at(now)
        if status.state is TermState.FIRST_DAY:
            return render(
                self.templates["announcement_at_start"],
                monsters=monster.display,
                resistances=monster.resistances.display(),
                end_of_term=self._end_of_term(status),
            )
        return render(
            self.templates["announcement"],
            monsters=monster.display,
            end_of_term=self._end_of_term(status),
        )

    def respond(self, now: datetime, text: str) -> Optional[str]:
        if not self.nickname_pattern.search(text):
            return None
        logger.info("Text matched keywords of the twilight vault: %s", text)
        status = self.window.window_state(now)
        if not status.is_open:
            return self.templates["out_of_term"]
        monster = self.monster_at(now)
        return render(
            self.templates["information"],
            monsters=monster.display,
            resistances=monster.resistances.display(),
            end_of_term=self._end_of_term(status),
        )


__all__ = ["DEFAULT_END_OF_TERM_FORMAT", "TwilightVault"]

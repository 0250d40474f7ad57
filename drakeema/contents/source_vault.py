"""Source vault: one monster per multi-day step."""
from __future__ import annotations

import logging
from datetime import datetime, tzinfo
from pathlib import Path
from typing import Dict, Optional

from ..catalog import ContentCatalog, Monster
from ..cycle import Cycle
from ..instants import ONE_DAY, shift
from ..models import ElapsedDays, Item, Phase
from ..templates import render
from ..transitions import classify
from .base import compile_pattern, load_yaml, parse_reference

logger = logging.getLogger(__name__)


class SourceVault:
    def __init__(self, cycle: Cycle, catalog: ContentCatalog, templates: Dict[str, str], nickname_pattern) -> None:
        self.cycle = cycle
        self.catalog = catalog
        self.templates = templates
        self.nickname_pattern = nickname_pattern

    @staticmethod
    def from_dict(
        data: Dict, catalog: ContentCatalog, tz: Optional[tzinfo] = None
    ) -> "SourceVault":
        monsters = catalog.require(data["monster_ids"])
        cycle = Cycle(
            parse_reference(data["reference_date"], tz),
            tuple(Item(monster.id) for monster in monsters),
            ElapsedDays(int(data.get("num_days", 1))),
        )
        templates = {
            key: data[key]
            for key in (
                "announcement",
                "announcement_at_start",
                "announcement_at_end",
                "information",
            )
        }
        return SourceVault(cycle, catalog, templates, compile_pattern(data["nickname_regex"]))

    @staticmethod
    def load(path: Path, catalog: ContentCatalog, tz: Optional[tzinfo] = None) -> "SourceVault":
        return SourceVault.from_dict(load_yaml(path), catalog, tz)

    def monster_at(self, now: datetime) -> Monster:
        return self.catalog[self.cycle.resolve(now).current.identifier]

    def announce(self, now: datetime) -> Optional[str]:
        today = self.monster_at(now)
        phase = classify(self.cycle, now)
        if phase is Phase.START:
            return render(
                self.templates["announcement_at_start"],
                monster=today.display,
                resistances=today.resistances.display(),
            )
        if phase is Phase.END:
            tomorrow = self.monster_at(shift(now, ONE_DAY))
            return render(
                self.templates["announcement_at_end"],
                monster1=today.display,
                monster2=tomorrow.display,
            )
        return render(self.templates["announcement"], monster=today.display)

    def respond(self, now: datetime, text: str) -> Optional[str]:
        if not self.nickname_pattern.search(text):
            return None
        logger.info("Text matched keywords of the source vault: %s", text)
        monster = self.monster_at(now)
        return render(
            self.templates["information"],
            monster=monster.display,
            resistances=monster.resistances.display(),
        )


__all__ = ["SourceVault"]

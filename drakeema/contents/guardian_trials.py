"""Guardian trials: every guardian steps through the levels once a day."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, tzinfo
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ..catalog import ContentCatalog, Monster
from ..cycle import Cycle
from ..models import ElapsedDaysWithOffset, Item
from ..templates import render
from .base import compile_pattern, load_yaml, parse_reference

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Guardian:
    item: Item
    monster: Monster


class GuardianTrials:
    def __init__(
        self,
        cycle: Cycle,
        guardians: Tuple[Guardian, ...],
        level_names: List[str],
        announcement: Dict[str, str],
        nickname_pattern,
    ) -> None:
        self.cycle = cycle
        self.guardians = guardians
        self.level_names = level_names
        self.announcement = announcement
        self.nickname_pattern = nickname_pattern

    @staticmethod
    def from_dict(
        data: Dict, catalog: ContentCatalog, tz: Optional[tzinfo] = None
    ) -> "GuardianTrials":
        level_names = list(data["level_names"])
        guardians = tuple(
            Guardian(
                item=Item(entry["id"], int(entry.get("offset", 0))),
                monster=catalog[entry["monster_id"]],
            )
            for entry in data["monsters"]
        )
        cycle = Cycle(
            parse_reference(data["reference_date"], tz),
            tuple(guardian.item for guardian in guardians),
            ElapsedDaysWithOffset(len(level_names)),
        )
        announcement = data["announcement"]
        return GuardianTrials(
            cycle,
            guardians,
            level_names,
            {key: announcement[key] for key in ("start", "parts", "end")},
            compile_pattern(data["nickname_regex"]),
        )

    @staticmethod
    def load(path: Path, catalog: ContentCatalog, tz: Optional[tzinfo] = None) -> "GuardianTrials":
        return GuardianTrials.from_dict(load_yaml(path), catalog, tz)

    def level_name(self, now: datetime, guardian: Guardian) -> str:
        return self.level_names[self.cycle.level_at(now, guardian.item)]

    def announce(self, now: datetime) -> Optional[str]:
        parts = "\n".join(
            render(
                self.announcement["parts"],
                name=guardian.monster.display,
                level=self.level_name(now, guardian),
            )
            for guardian in self.guardians
        )
        return self.announcement["start"] + parts + self.announcement["end"]

    def respond(self, now: datetime, text: str) -> Optional[str]:
        if not self.nickname_pattern.search(text):
            return None
        logger.info("Text matched keywords of the guardian trials: %s", text)
        return self.announce(now)


__all__ = ["Guardian", "GuardianTrials"]

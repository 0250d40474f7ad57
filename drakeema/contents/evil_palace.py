"""Evil palace: monthly title rotation split across two tables."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, tzinfo
from functools import reduce
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ..catalog import ContentCatalog, Monster, Resistances
from ..cycle import TableSet
from ..errors import InvalidScheduleConfig
from ..instants import ONE_DAY, shift
from ..models import Phase
from ..templates import render
from ..transitions import classify
from .base import compile_pattern, load_yaml, parse_reference

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Title:
    id: str
    display: str
    monsters: Tuple[Monster, ...]

    def display_monsters(self, delimiter: str = "と") -> str:
        return delimiter.join(monster.display for monster in self.monsters)

    def resistances(self) -> Resistances:
        return reduce(
            lambda merged, monster: merged.join(monster.resistances),
            self.monsters,
            Resistances(),
        )


class EvilPalace:
    def __init__(
        self,
        tables: TableSet,
        titles: Dict[str, Title],
        templates: Dict[str, str],
        area_names: List[str],
        nickname_pattern,
    ) -> None:
        self.tables = tables
        self.titles = titles
        self.templates = templates
        self.area_names = area_names
        self.nickname_pattern = nickname_pattern

    @staticmethod
    def from_dict(
        data: Dict, catalog: ContentCatalog, tz: Optional[tzinfo] = None
    ) -> "EvilPalace":
        reference = parse_reference(data["reference_date"], tz)
        titles: Dict[str, Title] = {}
        layout = []
        for table in data["tables"]:
            identifiers = []
            for entry in table["titles"]:
                title = Title(
                    id=entry["id"],
                    display=entry["display"],
                    monsters=catalog.require(entry["monster_ids"]),
                )
                if not title.monsters:
                    raise InvalidScheduleConfig(f"Title {title.id!r} has no monsters")
                titles[title.id] = title
                identifiers.append(title.id)
            layout.append((int(table["start_day"]), identifiers))
        templates = {
            key: data[key]
            for key in (
                "announcement",
                "announcement_at_start",
                "announcement_at_end",
                "information",
            )
        }
        palace = EvilPalace(
            TableSet.build(reference, layout),
            titles,
            templates,
            list(data["area_names"]),
            compile_pattern(data["nickname_regex"]),
        )
        for title in titles.values():
            try:
                title.resistances().display(palace.area_names)
            except ValueError as exc:
                raise InvalidScheduleConfig(f"Title {title.id!r}: {exc}") from exc
        return palace

    @staticmethod
    def load(path: Path, catalog: ContentCatalog, tz: Optional[tzinfo] = None) -> "EvilPalace":
        return EvilPalace.from_dict(load_yaml(path), catalog, tz)

    def title_at(self, now: datetime) -> Title:
        return self.titles[self.tables.resolve(now).current.identifier]

    def _details(self, title: Title) -> Dict[str, str]:
        return {
            "title": title.display,
            "monsters": title.display_monsters(),
            "resistances": title.resistances().display(self.area_names),
        }

    def announce(self, now: datetime) -> Optional[str]:
        today = self.title_at(now)
        phase = classify(self.tables, now)
        logger.debug("Evil palace phase at %s: %s", now.isoformat(), phase.value)
        if phase is Phase.START:
            return render(self.templates["announcement_at_start"], **self._details(today))
        if phase is Phase.END:
            tomorrow = self.title_at(shift(now, ONE_DAY))
            return render(
                self.templates["announcement_at_end"],
                title1=today.display,
                title2=tomorrow.display,
            )
        return render(self.templates["announcement"], title=today.display)

    def respond(self, now: datetime, text: str) -> Optional[str]:
        if not self.nickname_pattern.search(text):
            return None
        logger.info("Text matched keywords of the evil palace: %s", text)
        return render(self.templates["information"], **self._details(self.title_at(now)))


__all__ = ["EvilPalace", "Title"]

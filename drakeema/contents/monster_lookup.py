"""Answer resistance questions for any monster named in a mention."""
from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from ..catalog import ContentCatalog, Monster
from ..errors import InvalidScheduleConfig
from ..templates import render
from .base import load_yaml

logger = logging.getLogger(__name__)


class MonsterLookup:
    def __init__(
        self,
        catalog: ContentCatalog,
        information: str,
        information_without_resistance: str,
        area_names: Dict[str, List[str]],
        ignore_categories: Sequence[str] = (),
    ) -> None:
        self.catalog = catalog
        self.information = information
        self.information_without_resistance = information_without_resistance
        self.area_names = area_names
        self.ignore_categories = frozenset(ignore_categories)
        for monster in catalog:
            if monster.category in self.ignore_categories:
                continue
            if len(monster.resistances) > 1 and len(
                area_names.get(monster.category, ())
            ) < len(monster.resistances):
                raise InvalidScheduleConfig(
                    f"Category {monster.category!r} lacks area names for {monster.id!r}"
                )

    @staticmethod
    def from_dict(data: Dict, catalog: ContentCatalog) -> "MonsterLookup":
        return MonsterLookup(
            catalog,
            data["information"],
            data["information_without_resistance"],
            {key: list(value) for key, value in (data.get("area_names") or {}).items()},
            data.get("ignore_categories") or (),
        )

    @staticmethod
    def load(path: Path, catalog: ContentCatalog) -> "MonsterLookup":
        return MonsterLookup.from_dict(load_yaml(path), catalog)

    def describe(self, monster: Monster) -> str:
        resistances = monster.resistances.display(self.area_names.get(monster.category))
        if not resistances:
            return render(self.information_without_resistance, name=monster.official_name)
        return render(self.information, name=monster.official_name, resistances=resistances)

    def respond(self, now: datetime, text: str) -> Optional[str]:
        matched = [
            monster
            for monster in self.catalog
            if monster.category not in self.ignore_categories and monster.matches(text)
        ]
        if not matched:
            return None
        logger.info("Text matched %s monsters: %s", len(matched), text)
        return "\n".join(self.describe(monster) for monster in matched)


__all__ = ["MonsterLookup"]

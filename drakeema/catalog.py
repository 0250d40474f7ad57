"""Monster catalog and resistance lists."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

import yaml

from .errors import InvalidScheduleConfig, UnknownContentId

logger = logging.getLogger(__name__)

DEFAULT_MONSTERS_DIR = Path(__file__).parent / "data" / "monsters"


class Resistance(str, Enum):
    """Status ailments and elements in canonical display order."""

    SPELL = "呪文"
    BREATH = "ブレス"
    SLEEP = "眠り"
    CONFUSION = "混乱"
    PARALYSIS = "マヒ"
    DEATH = "即死"
    SEAL = "封印"
    ILLUSION = "幻惑"
    DANCE = "踊り"
    POISON = "どく"
    CHARM = "魅了"
    CURSE = "呪い"
    FALL = "転び"
    BIND = "しばり"
    FEAR = "おびえ"
    LAUGH = "笑い"
    FLAME = "炎"
    ICE = "氷"
    BREEZE = "風"
    THUNDER = "雷"
    EARTH = "土"
    LIGHT = "光"
    DARK = "闇"


_CANONICAL_ORDER = {member.value: index for index, member in enumerate(Resistance)}


def resistance_sort_key(label: str) -> Tuple[int, str]:
    # Labels outside the enum (e.g. "不定") sort after every known resistance.
    return _CANONICAL_ORDER.get(label, len(_CANONICAL_ORDER)), label


@dataclass(frozen=True)
class Resistances:
    """Resistances per area; a single area applies to the whole encounter."""

    areas: Tuple[Tuple[str, ...], ...] = ((),)

    def __post_init__(self) -> None:
        areas = tuple(tuple(str(label) for label in area) for area in self.areas)
        if not areas:
            raise InvalidScheduleConfig("Resistances need at least one area")
        object.__setattr__(self, "areas", areas)

    @classmethod
    def from_data(cls, data: Optional[Sequence]) -> "Resistances":
        if not data:
            return cls()
        if all(isinstance(entry, str) for entry in data):
            return cls((tuple(data),))
        return cls(tuple(tuple(area or ()) for area in data))

    def __len__(self) -> int:
        return len(self.areas)

    def is_empty(self) -> bool:
        return not any(self.areas)

    def join(self, other: "Resistances") -> "Resistances":
        """Merge two lists area by area; a single-area list applies to every area."""

        if len(self) != len(other) and len(self) != 1 and len(other) != 1:
            raise ValueError(
                f"Cannot join resistances with {len(self)} and {len(other)} areas"
            )
        larger, smaller = (self, other) if len(self) > len(other) else (other, self)
        merged: List[Tuple[str, ...]] = []
        for index, area in enumerate(larger.areas):
            partner = smaller.areas[index % len(smaller.areas)]
            labels = sorted(set(area) | set(partner), key=resistance_sort_key)
            merged.append(tuple(labels))
        return Resistances(tuple(merged))

    def display(
        self, area_names: Optional[Sequence[str]] = None, delimiter: str = "、"
    ) -> str:
        if len(self.areas) == 1:
            return delimiter.join(self.areas[0])
        if area_names is None or len(area_names) < len(self.areas):
            raise ValueError(f"Area names are required for {len(self.areas)} areas")
        return delimiter.join(
            f"{name}は {delimiter.join(area)}" for name, area in zip(area_names, self.areas)
        )


@dataclass(frozen=True)
class Monster:
    id: str
    category: str
    display: str
    official_name: str
    nickname_pattern: re.Pattern
    resistances: Resistances

    @staticmethod
    def from_dict(data: Dict) -> "Monster":
        try:
            return Monster(
                id=str(data["id"]),
                category=str(data["category"]),
                display=str(data["display"]),
                official_name=str(data.get("official_name", data["display"])),
                nickname_pattern=re.compile(data["nickname_regex"]),
                resistances=Resistances.from_data(data.get("resistances")),
            )
        except KeyError as exc:
            raise InvalidScheduleConfig(f"Monster entry is missing {exc}") from exc
        except re.error as exc:
            raise InvalidScheduleConfig(
                f"Monster {data.get('id')!r} has an invalid nickname pattern: {exc}"
            ) from exc

    def matches(self, text: str) -> bool:
        return self.nickname_pattern.search(text) is not None


class ContentCatalog:
    """Read-only registry of monsters keyed by id."""

    def __init__(self, monsters: Iterable[Monster] = ()) -> None:
        self._monsters: Dict[str, Monster] = {}
        for monster in monsters:
            if monster.id in self._monsters:
                raise InvalidScheduleConfig(f"Duplicate monster id {monster.id!r}")
            self._monsters[monster.id] = monster

    @classmethod
    def load(cls, directory: Path | None = None) -> "ContentCatalog":
        """Load every ``*.yaml`` file under ``directory``.

        A file holds either a single monster mapping or a ``monsters`` list.
        """

        path = Path(directory) if directory is not None else DEFAULT_MONSTERS_DIR
        monsters: List[Monster] = []
        for file in sorted(path.glob("*.yaml")):
            with file.open("r", encoding="utf-8") as fh:
                data = yaml.safe_load(fh) or {}
            entries = data.get("monsters", [data]) if isinstance(data, dict) else data
            monsters.extend(Monster.from_dict(entry) for entry in entries)
        catalog = cls(monsters)
        logger.info("Loaded %s monsters from %s", len(catalog), path)
        return catalog

    def __len__(self) -> int:
        return len(self._monsters)

    def __iter__(self) -> Iterator[Monster]:
        return iter(self._monsters.values())

    def __contains__(self, monster_id: object) -> bool:
        return monster_id in self._monsters

    def __getitem__(self, monster_id: str) -> Monster:
        try:
            return self._monsters[monster_id]
        except KeyError:
            raise UnknownContentId(f"Unknown monster id {monster_id!r}") from None

    def require(self, monster_ids: Iterable[str]) -> Tuple[Monster, ...]:
        return tuple(self[monster_id] for monster_id in monster_ids)


__all__ = [
    "ContentCatalog",
    "DEFAULT_MONSTERS_DIR",
    "Monster",
    "Resistance",
    "Resistances",
    "resistance_sort_key",
]

"""Defense force: monsters attacking in fixed-length slots."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo
from pathlib import Path
from typing import Dict, Optional

from ..catalog import ContentCatalog, Monster
from ..cycle import Cycle
from ..errors import InvalidScheduleConfig
from ..instants import ONE_MINUTE
from ..models import ActiveState, FixedDuration, Item
from ..templates import render
from .base import compile_pattern, load_yaml, parse_reference

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Slot:
    id: str
    monster: Monster
    location: str
    duration: int


def remaining_minutes(remaining: timedelta) -> int:
    """Whole minutes left, counting a started minute as a full one."""

    return -(-remaining // ONE_MINUTE)


class DefenseForce:
    def __init__(self, cycle: Cycle, slots: Dict[str, Slot], information: str, nickname_pattern) -> None:
        self.cycle = cycle
        self.slots = slots
        self.information = information
        self.nickname_pattern = nickname_pattern

    @staticmethod
    def from_dict(
        data: Dict, catalog: ContentCatalog, tz: Optional[tzinfo] = None
    ) -> "DefenseForce":
        slots: Dict[str, Slot] = {}
        items = []
        for entry in data["monsters"]:
            slot = Slot(
                id=entry["id"],
                monster=catalog[entry["monster_id"]],
                location=entry.get("location", ""),
                duration=int(entry["duration"]),
            )
            if slot.id in slots:
                raise InvalidScheduleConfig(f"Duplicate defense force slot {slot.id!r}")
            slots[slot.id] = slot
            items.append(Item(slot.id, slot.duration))
        cycle = Cycle(parse_reference(data["reference_date"], tz), tuple(items), FixedDuration())
        return DefenseForce(
            cycle,
            slots,
            data["information"],
            compile_pattern(data["nickname_regex"]),
        )

    @staticmethod
    def load(path: Path, catalog: ContentCatalog, tz: Optional[tzinfo] = None) -> "DefenseForce":
        return DefenseForce.from_dict(load_yaml(path), catalog, tz)

    def status(self, now: datetime) -> ActiveState:
        return self.cycle.resolve(now)

    def respond(self, now: datetime, text: str) -> Optional[str]:
        if not self.nickname_pattern.search(text):
            return None
        logger.info("Text matched keywords of the defense force: %s", text)
        state = self.status(now)
        current = self.slots[state.current.identifier]
        upcoming = self.slots[state.next.identifier]
        return render(
            self.information,
            location=current.location,
            current_monster=current.monster.display,
            resistances=current.monster.resistances.display(),
            next_monster=upcoming.monster.display,
            remain=remaining_minutes(state.remaining),
        )


__all__ = ["DefenseForce", "Slot", "remaining_minutes"]

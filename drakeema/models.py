"""Value types shared by the rotation engine and the content features."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional, Union

from .instants import ONE_MINUTE


@dataclass(frozen=True)
class Item:
    """One slot of a rotation.

    ``weight`` is the slot length in units for :class:`FixedDuration`, a day
    offset for :class:`ElapsedDaysWithOffset`, and ignored otherwise.
    """

    identifier: str
    weight: int = 1


@dataclass(frozen=True)
class FixedDuration:
    unit: timedelta = ONE_MINUTE


@dataclass(frozen=True)
class ElapsedDays:
    unit_count: int = 1


@dataclass(frozen=True)
class ElapsedMonths:
    pass


@dataclass(frozen=True)
class ElapsedDaysWithOffset:
    label_count: int


Granularity = Union[FixedDuration, ElapsedDays, ElapsedMonths, ElapsedDaysWithOffset]


@dataclass(frozen=True)
class ActiveState:
    current: Item
    next: Item
    remaining: Optional[timedelta]
    lap: int


@dataclass(frozen=True)
class Window:
    start: datetime
    end: datetime


class TermState(str, Enum):
    FIRST_DAY = "first_day"
    WITHIN_TERM = "within_term"
    CLOSED = "closed"


@dataclass(frozen=True)
class TermStatus:
    state: TermState
    window: Optional[Window] = None

    @property
    def is_open(self) -> bool:
        return self.state is not TermState.CLOSED


class Phase(str, Enum):
    START = "start"
    MID = "mid"
    END = "end"


__all__ = [
    "ActiveState",
    "ElapsedDays",
    "ElapsedDaysWithOffset",
    "ElapsedMonths",
    "FixedDuration",
    "Granularity",
    "Item",
    "Phase",
    "TermState",
    "TermStatus",
    "Window",
]

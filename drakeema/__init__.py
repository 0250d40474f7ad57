"""Rotation-aware community bot for an MMORPG social feed."""
from __future__ import annotations

from .cycle import Cycle, Table, TableSet
from .errors import (
    AmbiguousLocalTime,
    InvalidScheduleConfig,
    ScheduleError,
    ScheduleInvariantViolated,
    TemporalRangeExceeded,
)
from .models import ActiveState, Item, Phase, TermState, TermStatus, Window
from .term import TermWindow
from .transitions import classify

__all__ = [
    "ActiveState",
    "AmbiguousLocalTime",
    "Cycle",
    "InvalidScheduleConfig",
    "Item",
    "Phase",
    "ScheduleError",
    "ScheduleInvariantViolated",
    "Table",
    "TableSet",
    "TemporalRangeExceeded",
    "TermState",
    "TermStatus",
    "TermWindow",
    "Window",
    "classify",
]

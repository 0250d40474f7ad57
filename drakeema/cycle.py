"""Rotation cycles anchored to a fixed reference instant."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Sequence, Tuple

from .errors import InvalidScheduleConfig, ScheduleInvariantViolated
from .instants import (
    EPSILON,
    ONE_DAY,
    difference,
    elapsed_whole_days,
    elapsed_whole_months,
    floored_mod,
    in_zone,
    shift,
)
from .models import (
    ActiveState,
    ElapsedDays,
    ElapsedDaysWithOffset,
    ElapsedMonths,
    FixedDuration,
    Granularity,
    Item,
)

logger = logging.getLogger(__name__)

_ZERO = timedelta(0)


def _require_aware(reference: datetime) -> None:
    if reference.tzinfo is None or reference.utcoffset() is None:
        raise InvalidScheduleConfig(
            f"Reference instant {reference.isoformat()} must carry a timezone"
        )


@dataclass(frozen=True)
class Cycle:
    """Ordered items that repeat forever on both sides of ``reference``."""

    reference: datetime
    items: Tuple[Item, ...]
    granularity: Granularity

    def __post_init__(self) -> None:
        _require_aware(self.reference)
        object.__setattr__(self, "items", tuple(self.items))
        if not self.items:
            raise InvalidScheduleConfig("A cycle needs at least one item")
        granularity = self.granularity
        if isinstance(granularity, FixedDuration):
            if granularity.unit <= _ZERO:
                raise InvalidScheduleConfig("Duration unit must be positive")
            for item in self.items:
                if item.weight <= 0:
                    raise InvalidScheduleConfig(
                        f"Item {item.identifier!r} has non-positive duration {item.weight}"
                    )
        elif isinstance(granularity, ElapsedDays):
            if granularity.unit_count <= 0:
                raise InvalidScheduleConfig(
                    f"Day count must be positive, got {granularity.unit_count}"
                )
        elif isinstance(granularity, ElapsedDaysWithOffset):
            if granularity.label_count <= 0:
                raise InvalidScheduleConfig("At least one level label is required")
            if floored_mod(self.items[0].weight, granularity.label_count) != 0:
                raise InvalidScheduleConfig(
                    "The first item must sit on the first level at the reference instant"
                )
            # Every day of a lap needs an item on the first level.
            covered = {
                floored_mod(-item.weight, granularity.label_count) for item in self.items
            }
            missing = sorted(set(range(granularity.label_count)) - covered)
            if missing:
                raise InvalidScheduleConfig(
                    f"Offsets leave days {missing} without an item on the first level"
                )
        elif not isinstance(granularity, ElapsedMonths):
            raise InvalidScheduleConfig(f"Unsupported granularity {granularity!r}")

    @property
    def total_units(self) -> int:
        """Length of one full lap in granularity units."""

        granularity = self.granularity
        if isinstance(granularity, FixedDuration):
            return sum(item.weight for item in self.items)
        if isinstance(granularity, ElapsedDays):
            return len(self.items) * granularity.unit_count
        if isinstance(granularity, ElapsedDaysWithOffset):
            return granularity.label_count
        return len(self.items)

    def resolve(self, now: datetime) -> ActiveState:
        now = in_zone(now, self.reference.tzinfo)
        granularity = self.granularity
        if isinstance(granularity, FixedDuration):
            weights = [item.weight for item in self.items]
            return self._resolve_by_weights(now, weights, granularity.unit)
        if isinstance(granularity, ElapsedDays):
            weights = [1] * len(self.items)
            return self._resolve_by_weights(now, weights, ONE_DAY * granularity.unit_count)
        if isinstance(granularity, ElapsedMonths):
            return self._resolve_by_months(now)
        return self._resolve_by_levels(now, granularity)

    def level_at(self, now: datetime, item: Item) -> int:
        """Index of the level ``item`` sits on at ``now`` (offset cycles only)."""

        granularity = self.granularity
        if not isinstance(granularity, ElapsedDaysWithOffset):
            raise InvalidScheduleConfig("Levels only exist for offset-day cycles")
        days = elapsed_whole_days(self.reference, in_zone(now, self.reference.tzinfo))
        return floored_mod(days + item.weight, granularity.label_count)

    def _state(
        self, index: int, remaining, lap: int, next_index: Optional[int] = None
    ) -> ActiveState:
        if next_index is None:
            next_index = floored_mod(index + 1, len(self.items))
        return ActiveState(
            current=self.items[index],
            next=self.items[next_index],
            remaining=remaining,
            lap=lap,
        )

    def _resolve_by_weights(
        self, now: datetime, weights: Sequence[int], unit: timedelta
    ) -> ActiveState:
        forward = difference(now, self.reference) >= _ZERO
        if forward:
            reference = self.reference
            order = list(range(len(self.items)))
        else:
            reference = shift(self.reference, -EPSILON)
            order = list(reversed(range(len(self.items))))

        total = sum(weights)
        elapsed = abs(difference(now, reference)) // unit
        position = floored_mod(elapsed, total)
        lap = elapsed // total if forward else -(elapsed // total) - 1

        for index in order:
            weight = weights[index]
            if weight > position:
                lap_start = shift(self.reference, unit * (lap * total))
                slot_end = unit * sum(weights[: index + 1])
                remaining = slot_end - difference(now, lap_start)
                return self._state(index, remaining, lap)
            position -= weight

        raise ScheduleInvariantViolated(
            f"No active item at {now.isoformat()} for reference {self.reference.isoformat()}"
        )

    def _resolve_by_months(self, now: datetime) -> ActiveState:
        elapsed = elapsed_whole_months(self.reference, now)
        count = len(self.items)
        logger.debug(
            "Months elapsed from %s to %s: %s", self.reference.isoformat(), now.isoformat(), elapsed
        )
        return self._state(floored_mod(elapsed, count), None, elapsed // count)

    def _resolve_by_levels(
        self, now: datetime, granularity: ElapsedDaysWithOffset
    ) -> ActiveState:
        days = elapsed_whole_days(self.reference, now)
        day_end = shift(self.reference, ONE_DAY * (days + 1))
        index = self._first_level_index(days, granularity)
        return self._state(
            index,
            difference(day_end, now),
            days // granularity.label_count,
            self._first_level_index(days + 1, granularity),
        )

    def _first_level_index(self, days: int, granularity: ElapsedDaysWithOffset) -> int:
        for index, item in enumerate(self.items):
            if floored_mod(days + item.weight, granularity.label_count) == 0:
                return index
        raise ScheduleInvariantViolated(
            f"No item sits on the first level {days} days after {self.reference.isoformat()}"
        )


@dataclass(frozen=True)
class Table:
    start_day: int
    titles: Cycle

    def __post_init__(self) -> None:
        if not 1 <= self.start_day <= 31:
            raise InvalidScheduleConfig(f"Table start day {self.start_day} is out of range")
        if not isinstance(self.titles.granularity, ElapsedMonths):
            raise InvalidScheduleConfig("Table titles must rotate monthly")


@dataclass(frozen=True)
class TableSet:
    """Tables switching on fixed days of the month, each rotating monthly."""

    tables: Tuple[Table, ...]

    def __post_init__(self) -> None:
        tables = tuple(sorted(self.tables, key=lambda table: table.start_day))
        if not tables:
            raise InvalidScheduleConfig("At least one table is required")
        start_days = [table.start_day for table in tables]
        if len(set(start_days)) != len(start_days):
            raise InvalidScheduleConfig(f"Tables share a start day: {start_days}")
        references = {table.titles.reference for table in tables}
        if len(references) != 1:
            raise InvalidScheduleConfig("Every table must share one reference instant")
        object.__setattr__(self, "tables", tables)

    @classmethod
    def build(
        cls, reference: datetime, tables: Iterable[Tuple[int, Iterable[str]]]
    ) -> "TableSet":
        built: List[Table] = []
        for start_day, identifiers in tables:
            items = tuple(Item(identifier) for identifier in identifiers)
            built.append(Table(start_day, Cycle(reference, items, ElapsedMonths())))
        return cls(tuple(built))

    @property
    def reference(self) -> datetime:
        return self.tables[0].titles.reference

    def select_table(self, now: datetime) -> Table:
        reference = self.reference
        local = in_zone(now, reference.tzinfo)
        for table in reversed(self.tables):
            if local.day > table.start_day:
                return table
            if local.day == table.start_day and local.time() >= reference.time():
                return table
        return self.tables[-1]

    def resolve(self, now: datetime) -> ActiveState:
        return self.select_table(now).titles.resolve(now)


__all__ = ["Cycle", "Table", "TableSet"]

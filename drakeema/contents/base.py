"""Shared plumbing for content features."""
from __future__ import annotations

import re
from datetime import datetime, tzinfo
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

import yaml

from ..errors import InvalidScheduleConfig
from ..instants import in_zone


class Announcer(Protocol):
    def announce(self, now: datetime) -> Optional[str]:
        ...


class Responder(Protocol):
    def respond(self, now: datetime, text: str) -> Optional[str]:
        ...


def load_yaml(path: Path) -> Dict[str, Any]:
    with Path(path).open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    if not isinstance(data, dict):
        raise InvalidScheduleConfig(f"{path} must contain a mapping")
    return data


def parse_reference(value: Any, tz: Optional[tzinfo] = None) -> datetime:
    """Read a reference instant from YAML and express it in ``tz``.

    Naive values are taken as wall time in ``tz``; without ``tz`` they are
    rejected.
    """

    if isinstance(value, datetime):
        instant = value
    else:
        try:
            instant = datetime.fromisoformat(str(value))
        except ValueError as exc:
            raise InvalidScheduleConfig(f"Invalid reference instant {value!r}") from exc
    if instant.tzinfo is None and tz is None:
        raise InvalidScheduleConfig(f"Reference instant {value!r} needs a timezone")
    return in_zone(instant, tz) if tz is not None else instant


def compile_pattern(pattern: str) -> re.Pattern:
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise InvalidScheduleConfig(f"Invalid pattern {pattern!r}: {exc}") from exc


__all__ = [
    "Announcer",
    "Responder",
    "compile_pattern",
    "load_yaml",
    "parse_reference",
]

"""Configuration loading utilities for drakeema."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import time, tzinfo
from pathlib import Path
from typing import Any, Dict, List
from zoneinfo import ZoneInfo

import yaml

from .errors import InvalidScheduleConfig

DEFAULT_SETTINGS_PATH = Path(__file__).parent / "data" / "settings.yaml"
DEFAULT_DATA_DIR = Path(__file__).parent / "data"


def parse_time_of_day(value: Any) -> time:
    # YAML 1.1 reads an unquoted 06:01:30 as a sexagesimal integer.
    if isinstance(value, int):
        minutes, seconds = divmod(value, 60)
        hours, minutes = divmod(minutes, 60)
        return time(hours, minutes, seconds)
    try:
        return time.fromisoformat(str(value))
    except ValueError as exc:
        raise InvalidScheduleConfig(f"Invalid time of day {value!r}") from exc


@dataclass(frozen=True)
class Settings:
    """Typed view over the settings YAML file."""

    timezone: str
    announcement_times: List[time]
    mention_pattern: str
    ask_pattern: str
    healthcheck_pattern: str
    healthcheck_responses: List[str]
    unknown_response: str
    ignore_accounts: List[str] = field(default_factory=list)
    statuses_per_minute: int = 20
    data_dir: Path = DEFAULT_DATA_DIR

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Settings":
        responder = data.get("responder", {})
        rate_limit = data.get("rate_limit", {})
        times = [parse_time_of_day(value) for value in data["announcement"]["times"]]
        if not times:
            raise InvalidScheduleConfig("At least one announcement time is required")
        responses = list(responder.get("healthcheck_responses", []))
        if not responses:
            raise InvalidScheduleConfig("At least one healthcheck response is required")
        data_dir = data.get("data_dir")
        return Settings(
            timezone=str(data.get("timezone", "Asia/Tokyo")),
            announcement_times=sorted(times),
            mention_pattern=responder["mention_regex"],
            ask_pattern=responder["ask_regex"],
            healthcheck_pattern=responder["healthcheck_regex"],
            healthcheck_responses=responses,
            unknown_response=str(responder.get("unknown_response", "？")),
            ignore_accounts=list(responder.get("ignore_accounts", [])),
            statuses_per_minute=int(rate_limit.get("statuses_per_minute", 20)),
            data_dir=Path(data_dir) if data_dir else DEFAULT_DATA_DIR,
        )

    @property
    def tzinfo(self) -> tzinfo:
        return ZoneInfo(self.timezone)

    @property
    def contents_dir(self) -> Path:
        return self.data_dir / "contents"

    @property
    def monsters_dir(self) -> Path:
        return self.data_dir / "monsters"


class SettingsLoader:
    """Loads and caches settings from YAML configuration files."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or DEFAULT_SETTINGS_PATH
        self._cache: Settings | None = None

    @property
    def path(self) -> Path:
        return self._path

    def load(self, force: bool = False) -> Settings:
        if self._cache is not None and not force:
            return self._cache
        with self._path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
        data_dir = os.environ.get("DRAKEEMA_DATA_DIR")
        if data_dir:
            data = dict(data, data_dir=data_dir)
        self._cache = Settings.from_dict(data)
        return self._cache


def get_settings() -> Settings:
    """Convenience accessor honouring ``DRAKEEMA_SETTINGS``."""

    path = os.environ.get("DRAKEEMA_SETTINGS")
    return SettingsLoader(Path(path) if path else None).load()


@dataclass(frozen=True)
class Credentials:
    api_base_url: str
    access_token: str

    @staticmethod
    def from_env() -> "Credentials":
        api_base_url = os.environ.get("DRAKEEMA_API_BASE_URL")
        access_token = os.environ.get("DRAKEEMA_ACCESS_TOKEN")
        if not api_base_url or not access_token:
            raise RuntimeError(
                "DRAKEEMA_API_BASE_URL and DRAKEEMA_ACCESS_TOKEN must be set"
            )
        return Credentials(api_base_url=api_base_url, access_token=access_token)


__all__ = [
    "Credentials",
    "DEFAULT_DATA_DIR",
    "DEFAULT_SETTINGS_PATH",
    "Settings",
    "SettingsLoader",
    "get_settings",
    "parse_time_of_day",
]

"""Tests for settings loading and the packaged data files."""
from __future__ import annotations

from datetime import time
from pathlib import Path

import pytest

from drakeema.catalog import ContentCatalog
from drakeema.config import (
    DEFAULT_SETTINGS_PATH,
    Credentials,
    SettingsLoader,
    get_settings,
    parse_time_of_day,
)
from drakeema.contents import build_features
from drakeema.errors import InvalidScheduleConfig


def test_parse_time_of_day_accepts_strings_and_sexagesimal():
    assert parse_time_of_day("06:01:30") == time(6, 1, 30)
    assert parse_time_of_day(21690) == time(6, 1, 30)
    with pytest.raises(InvalidScheduleConfig):
        parse_time_of_day("not a time")


def test_default_settings_load():
    settings = SettingsLoader().load()
    assert settings.timezone == "Asia/Tokyo"
    assert settings.announcement_times == [time(6, 1, 30)]
    assert settings.statuses_per_minute == 20
    assert settings.tzinfo.key == "Asia/Tokyo"
    assert settings.contents_dir.name == "contents"


def test_loader_caches_until_forced(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text(DEFAULT_SETTINGS_PATH.read_text(encoding="utf-8"), encoding="utf-8")
    loader = SettingsLoader(path)
    first = loader.load()
    path.write_text(
        path.read_text(encoding="utf-8").replace("statuses_per_minute: 20", "statuses_per_minute: 5"),
        encoding="utf-8",
    )
    assert loader.load() is first
    assert loader.load(force=True).statuses_per_minute == 5


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("DRAKEEMA_SETTINGS", str(DEFAULT_SETTINGS_PATH))
    monkeypatch.setenv("DRAKEEMA_DATA_DIR", str(tmp_path))
    settings = get_settings()
    assert settings.data_dir == Path(tmp_path)
    assert settings.monsters_dir == Path(tmp_path) / "monsters"


def test_missing_healthcheck_responses_are_rejected(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text(
        "announcement:\n"
        "  times: ['06:00:00']\n"
        "responder:\n"
        "  mention_regex: a\n"
        "  ask_regex: b\n"
        "  healthcheck_regex: c\n",
        encoding="utf-8",
    )
    with pytest.raises(InvalidScheduleConfig):
        SettingsLoader(path).load()


def test_credentials_from_env(monkeypatch):
    monkeypatch.delenv("DRAKEEMA_API_BASE_URL", raising=False)
    monkeypatch.delenv("DRAKEEMA_ACCESS_TOKEN", raising=False)
    with pytest.raises(RuntimeError):
        Credentials.from_env()
    monkeypatch.setenv("DRAKEEMA_API_BASE_URL", "https://example.social")
    monkeypatch.setenv("DRAKEEMA_ACCESS_TOKEN", "token")
    credentials = Credentials.from_env()
    assert credentials.api_base_url == "https://example.social"


def test_packaged_features_build():
    """Every packaged content file loads against the packaged monster catalog."""

    settings = SettingsLoader().load()
    catalog = ContentCatalog.load(settings.monsters_dir)
    features = build_features(catalog, settings.contents_dir, settings.tzinfo)
    assert len(features.announcers) == 7
    assert len(features.responders) == 6
    assert features.reactions.keywords

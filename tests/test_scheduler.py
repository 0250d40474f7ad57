"""Tests for scheduled announcements."""
from __future__ import annotations

from datetime import datetime, time, timedelta, timezone

import pytest

from drakeema import scheduler as scheduler_module
from drakeema.errors import ScheduleInvariantViolated
from drakeema.scheduler import AnnouncementScheduler, next_announcement_delay

JST = timezone(timedelta(hours=9))
TIMES = [time(6, 1, 30), time(18, 1, 30)]


@pytest.mark.parametrize(
    "now, expected",
    [
        (datetime(2020, 9, 6, 6, 1, 30, tzinfo=JST), 43200),
        (datetime(2020, 9, 6, 6, 1, 31, tzinfo=JST), 43199),
        (datetime(2020, 9, 6, 6, 1, 29, tzinfo=JST), 1),
        (datetime(2020, 9, 6, 18, 1, 30, tzinfo=JST), 43200),
        (datetime(2020, 9, 6, 23, 0, 0, tzinfo=JST), 25290),
    ],
)
def test_next_announcement_delay(now, expected):
    assert next_announcement_delay(TIMES, now) == expected


def test_next_announcement_delay_needs_times():
    with pytest.raises(ValueError):
        next_announcement_delay([], datetime(2020, 9, 6, tzinfo=JST))


class DummyAnnouncer:
    def __init__(self, text):
        self.text = text

    def announce(self, now):
        return self.text


class BrokenAnnouncer:
    def announce(self, now):
        raise ScheduleInvariantViolated("no active item")


def test_collect_skips_empty_and_failing_announcers(caplog):
    published = []
    scheduler = AnnouncementScheduler(
        [DummyAnnouncer("一"), DummyAnnouncer(None), BrokenAnnouncer(), DummyAnnouncer("二")],
        published.append,
        TIMES,
        JST,
    )
    now = datetime(2020, 9, 6, 6, 1, 30, tzinfo=JST)
    assert scheduler.announce(now) == "一\n\n二"
    assert published == ["一\n\n二"]
    assert "BrokenAnnouncer" in caplog.text


def test_nothing_is_published_without_announcements():
    published = []
    scheduler = AnnouncementScheduler([DummyAnnouncer(None)], published.append, TIMES, JST)
    assert scheduler.announce(datetime(2020, 9, 6, 6, 1, 30, tzinfo=JST)) is None
    assert published == []


def test_start_registers_cron_jobs(monkeypatch):
    instances = []

    class FakeScheduler:
        def __init__(self, **kwargs):
            self.kwargs = kwargs
            self.jobs = []
            self.started = False
            self.stopped = False
            instances.append(self)

        def add_job(self, func, trigger, **kwargs):
            self.jobs.append((trigger, kwargs))

        def start(self):
            self.started = True

        def shutdown(self, wait=True):
            self.stopped = True

    monkeypatch.setattr(scheduler_module, "BackgroundScheduler", FakeScheduler)
    clock = lambda: datetime(2020, 9, 6, 6, 1, 29, tzinfo=JST)  # noqa: E731
    announcer = AnnouncementScheduler([], lambda text: None, TIMES, JST, clock)
    announcer.start()

    assert instances, "scheduler was not constructed"
    fake = instances[0]
    assert fake.started is True
    assert fake.kwargs["timezone"] is JST
    assert [kwargs["id"] for _, kwargs in fake.jobs] == ["announce-060130", "announce-180130"]
    assert all(trigger == "cron" for trigger, _ in fake.jobs)
    assert fake.jobs[0][1]["second"] == 30

    announcer.shutdown()
    assert fake.stopped is True
    assert announcer.scheduler is None

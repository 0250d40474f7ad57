"""Scheduled announcements of the day's rotations."""
from __future__ import annotations

import logging
from datetime import datetime, time, timedelta, tzinfo
from typing import Callable, Iterable, List, Optional, Sequence

from apscheduler.schedulers.background import BackgroundScheduler

from .contents.base import Announcer
from .errors import ScheduleError
from .instants import ONE_DAY, difference

logger = logging.getLogger(__name__)


def next_announcement_delay(times: Sequence[time], now: datetime) -> int:
    """Whole seconds from ``now`` until the next announcement time.

    Times equal to ``now`` count as already passed, so the delay is never zero.
    """

    if not times:
        raise ValueError("At least one announcement time is required")
    ordered = sorted(times)
    current = now.time()
    upcoming = next((at for at in ordered if at > current), None)
    day = now.date()
    if upcoming is None:
        upcoming = ordered[0]
        day = day + ONE_DAY
    target = datetime.combine(day, upcoming, tzinfo=now.tzinfo)
    delta = difference(target, now) if now.tzinfo is not None else target - now
    return int(delta // timedelta(seconds=1))


class AnnouncementScheduler:
    """Collect announcements from every feature at fixed times of day."""

    def __init__(
        self,
        announcers: Iterable[Announcer],
        publisher: Callable[[str], object],
        times: Sequence[time],
        timezone: tzinfo,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.announcers: List[Announcer] = list(announcers)
        self.publisher = publisher
        self.times = sorted(times)
        self.timezone = timezone
        self._clock = clock or (lambda: datetime.now(self.timezone))
        self.scheduler: Optional[BackgroundScheduler] = None

    def start(self) -> None:
        self.scheduler = BackgroundScheduler(
            timezone=self.timezone,
            job_defaults={"coalesce": True, "max_instances": 1},
        )
        for at in self.times:
            self.scheduler.add_job(
                self.announce,
                "cron",
                hour=at.hour,
                minute=at.minute,
                second=at.second,
                id=f"announce-{at.strftime('%H%M%S')}",
                replace_existing=True,
            )
        self.scheduler.start()
        logger.info(
            "Next announcement will be in %s secs",
            next_announcement_delay(self.times, self._clock()),
        )

    def shutdown(self, wait: bool = True) -> None:
        if self.scheduler is not None:
            self.scheduler.shutdown(wait=wait)
            self.scheduler = None

    def collect(self, now: datetime) -> Optional[str]:
        texts: List[str] = []
        for announcer in self.announcers:
            try:
                text = announcer.announce(now)
            except ScheduleError:
                logger.exception(
                    "Skipping announcement from %s at %s", type(announcer).__name__, now.isoformat()
                )
                continue
            if text:
                texts.append(text)
        return "\n\n".join(texts) or None

    def announce(self, now: Optional[datetime] = None) -> Optional[str]:
        now = now or self._clock()
        logger.info("Start announcing about contents at %s", now.isoformat())
        text = self.collect(now)
        if text is None:
            logger.info("Nothing to announce at %s", now.isoformat())
            return None
        self.publisher(text)
        return text


__all__ = ["AnnouncementScheduler", "BackgroundScheduler", "next_announcement_delay"]

"""Mastodon front end: posting, timeline listener and the entry point."""
from __future__ import annotations

import atexit
import logging
import threading
import time
from collections import deque
from datetime import datetime
from typing import Any, Callable, Deque, Mapping, Optional

from mastodon import Mastodon, StreamListener
from mastodon.errors import MastodonError

from .catalog import ContentCatalog
from .config import Credentials, get_settings
from .contents import build_features
from .errors import RateLimitExceeded
from .rate_limit import RateLimit
from .responder import MentionResponder, Reply
from .scheduler import AnnouncementScheduler

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class StatusPublisher:
    """Post statuses through a rate limit; failures are logged and dropped."""

    def __init__(self, client: Mastodon, limit: RateLimit, clock: Clock) -> None:
        self.client = client
        self.limit = limit
        self._clock = clock

    def post(
        self,
        text: str,
        *,
        visibility: str = "public",
        mention: Optional[str] = None,
        in_reply_to_id: Optional[Any] = None,
    ) -> Optional[Mapping[str, Any]]:
        try:
            count = self.limit.increment(self._clock())
        except RateLimitExceeded as exc:
            logger.warning("Dropping status: %s", exc)
            return None
        logger.info("Posting status %s within the current rate window", count)
        if mention:
            text = f"@{mention} {text}"
        try:
            posted = self.client.status_post(
                text, in_reply_to_id=in_reply_to_id, visibility=visibility
            )
        except MastodonError:
            logger.exception("Failed to post status")
            return None
        logger.info("Posting a status is complete: %s", posted.get("id"))
        return posted

    def announce(self, text: str) -> Optional[Mapping[str, Any]]:
        return self.post(text)

    def reply(self, reply: Reply) -> Optional[Mapping[str, Any]]:
        return self.post(
            reply.text,
            visibility=reply.visibility,
            mention=reply.mention,
            in_reply_to_id=reply.in_reply_to_id,
        )


class TimelineListener(StreamListener):
    """Route statuses from the home and local timelines to the responder."""

    def __init__(
        self,
        responder: MentionResponder,
        publisher: StatusPublisher,
        own_acct: str,
        clock: Clock,
        memory: int = 512,
    ) -> None:
        super().__init__()
        self.responder = responder
        self.publisher = publisher
        self.own_acct = own_acct
        self._clock = clock
        self._seen: Deque[Any] = deque(maxlen=memory)
        self._lock = threading.Lock()

    def _first_sighting(self, status_id: Any) -> bool:
        with self._lock:
            if status_id in self._seen:
                return False
            self._seen.append(status_id)
            return True

    def handle_status(self, status: Mapping[str, Any]) -> Optional[Reply]:
        if status["account"]["acct"] == self.own_acct:
            return None
        if not self._first_sighting(status.get("id")):
            logger.debug("Status %s already handled", status.get("id"))
            return None
        reply = self.responder.process(status, self._clock())
        if reply is not None:
            self.publisher.reply(reply)
        return reply

    def on_update(self, status) -> None:
        self.handle_status(status)

    def on_notification(self, notification) -> None:
        if notification.get("type") == "mention" and notification.get("status"):
            self.handle_status(notification["status"])

    def handle_heartbeat(self) -> None:
        logger.debug("Stream heartbeat")


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    settings = get_settings()
    credentials = Credentials.from_env()
    tz = settings.tzinfo

    def clock() -> datetime:
        return datetime.now(tz)

    catalog = ContentCatalog.load(settings.monsters_dir)
    features = build_features(catalog, settings.contents_dir, tz)
    client = Mastodon(
        api_base_url=credentials.api_base_url,
        access_token=credentials.access_token,
    )
    publisher = StatusPublisher(client, RateLimit(settings.statuses_per_minute), clock)
    scheduler = AnnouncementScheduler(
        features.announcers,
        publisher.announce,
        settings.announcement_times,
        tz,
        clock,
    )
    responder = MentionResponder.from_settings(settings, features)
    me = client.me()
    listener = TimelineListener(responder, publisher, me["acct"], clock)
    logger.info("drakeema connected to %s as %s", credentials.api_base_url, me["acct"])

    scheduler.start()
    atexit.register(scheduler.shutdown)
    handles = [
        client.stream_user(listener, run_async=True, reconnect_async=True),
        client.stream_public(listener, local=True, run_async=True, reconnect_async=True),
    ]
    try:
        while all(handle.is_alive() for handle in handles):
            time.sleep(1)
        logger.error("A timeline stream stopped; shutting down")
    except KeyboardInterrupt:
        logger.info("Interrupted; shutting down")
    finally:
        for handle in handles:
            handle.close()
        scheduler.shutdown()


__all__ = ["StatusPublisher", "TimelineListener", "main"]


if __name__ == "__main__":
    main()

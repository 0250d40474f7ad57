"""Fixed-window rate limiting for outgoing posts."""
from __future__ import annotations

import threading
from datetime import datetime, timedelta
from typing import Optional

from .errors import RateLimitExceeded
from .instants import ONE_MINUTE


class RateLimit:
    """Allow ``limit`` events per window; a window opens with its first event."""

    def __init__(self, limit: int, interval: timedelta = ONE_MINUTE) -> None:
        if limit <= 0:
            raise ValueError("Rate limit must be positive")
        self.limit = limit
        self.interval = interval
        self._window_start: Optional[datetime] = None
        self._count = 0
        self._lock = threading.Lock()

    def increment(self, now: datetime) -> int:
        """Record one event and return the count in the current window."""

        with self._lock:
            if self._window_start is None or now - self._window_start > self.interval:
                self._window_start = now
                self._count = 1
                return self._count
            if self._count >= self.limit:
                raise RateLimitExceeded(
                    f"More than {self.limit} posts within {self.interval}"
                )
            self._count += 1
            return self._count

    def __repr__(self) -> str:
        return f"RateLimit(limit={self.limit}, count={self._count}, from={self._window_start})"


__all__ = ["RateLimit"]

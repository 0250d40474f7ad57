"""Start/middle/end classification of rotation periods."""
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Protocol

from .instants import ONE_DAY, shift
from .models import ActiveState, Phase


class Resolver(Protocol):
    def resolve(self, now: datetime) -> ActiveState:
        ...


def classify(resolver: Resolver, now: datetime, period: timedelta = ONE_DAY) -> Phase:
    """Compare the active item with the ones one ``period`` before and after.

    A change since the previous period marks the START; otherwise a change
    before the next period marks the END; anything else is MID.
    """

    today = resolver.resolve(now).current.identifier
    before = resolver.resolve(shift(now, -period)).current.identifier
    if today != before:
        return Phase.START
    after = resolver.resolve(shift(now, period)).current.identifier
    if today != after:
        return Phase.END
    return Phase.MID


__all__ = ["Resolver", "classify"]

# slotbook/utils/clock.py
"""Injectable clock so "now" can be pinned in tests"""
from datetime import datetime, timedelta, timezone
from typing import Optional

import pytz


class Clock:
    """System clock."""

    def utcnow(self) -> datetime:
        return datetime.now(timezone.utc)

    def local_now(self, tz_name: Optional[str]) -> datetime:
        """Naive wall-clock time in the business's timezone."""
        try:
            tz = pytz.timezone(tz_name or "UTC")
        except pytz.UnknownTimeZoneError:
            tz = pytz.UTC
        return self.utcnow().astimezone(tz).replace(tzinfo=None)


class FixedClock(Clock):
    """Clock frozen at a given UTC instant."""

    def __init__(self, instant: datetime):
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        self.instant = instant

    def utcnow(self) -> datetime:
        return self.instant

    def advance(self, **kwargs):
        self.instant = self.instant + timedelta(**kwargs)


system_clock = Clock()

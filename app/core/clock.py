"""Wall-clock access for booking rules.

Same-day cutoff, past-date rejection and the cancellation window all read
"now" through a Clock so tests can pin it.
"""
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Optional


class Clock:
    """System clock"""

    def now(self, tz: Optional[tzinfo] = None) -> datetime:
        return datetime.now(tz or timezone.utc)

    def today(self, tz: Optional[tzinfo] = None) -> date:
        return self.now(tz).date()


class FixedClock(Clock):
    """Clock frozen at a given instant (naive values are taken as UTC)"""

    def __init__(self, instant: datetime):
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        self.instant = instant

    def now(self, tz: Optional[tzinfo] = None) -> datetime:
        return self.instant.astimezone(tz or timezone.utc)

    def advance(self, **kwargs) -> None:
        self.instant = self.instant + timedelta(**kwargs)


_system_clock = Clock()


def get_clock() -> Clock:
    """Clock dependency for FastAPI"""
    return _system_clock

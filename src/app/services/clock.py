"""
Clock

Every time-dependent decision (expiry, due reminders, token lifetime) reads
the current time through a Clock so tests can pin or advance it.
Times are naive UTC datetimes, the same form the database stores.
"""

import calendar
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone

_EPOCH = datetime(1970, 1, 1)


class Clock(ABC):
    """Source of the current time"""

    @abstractmethod
    def now(self) -> datetime:
        """Current time as a naive UTC datetime"""
        pass


def to_epoch(moment: datetime) -> int:
    """Naive UTC datetime -> UNIX seconds"""
    return calendar.timegm(moment.utctimetuple())


def from_epoch(seconds: int) -> datetime:
    """UNIX seconds -> naive UTC datetime"""
    return _EPOCH + timedelta(seconds=int(seconds))


def to_naive_utc(moment: datetime) -> datetime:
    """Normalize an incoming datetime; naive values are taken as UTC"""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(timezone.utc).replace(tzinfo=None)

import threading
from datetime import datetime, timedelta, timezone
from typing import Optional

from src.app.services.clock import Clock


class SystemClock(Clock):
    """Wall clock, naive UTC"""

    def now(self) -> datetime:
        return datetime.now(timezone.utc).replace(tzinfo=None)


class ManualClock(Clock):
    """
    Clock that only moves when told to.

    Used by tests and local demos to step through expiry and reminder
    scenarios without sleeping.
    """

    def __init__(self, start: Optional[datetime] = None):
        self._lock = threading.Lock()
        self._now = start or datetime(2024, 1, 1)

    def now(self) -> datetime:
        with self._lock:
            return self._now

    def set(self, moment: datetime) -> None:
        with self._lock:
            self._now = moment

    def advance(self, seconds: float = 0, **kwargs) -> datetime:
        """Move forward by seconds (plus any timedelta kwargs)"""
        with self._lock:
            self._now = self._now + timedelta(seconds=seconds, **kwargs)
            return self._now

from datetime import datetime, timedelta, timezone
from uuid import uuid4

from src.adapter.services.clock import ManualClock, SystemClock
from src.domain.entities import Reminder


def test_system_clock_is_naive_utc():
    before = datetime.now(timezone.utc).replace(tzinfo=None)
    now = SystemClock().now()
    after = datetime.now(timezone.utc).replace(tzinfo=None)

    assert now.tzinfo is None
    assert before <= now <= after


def test_entity_timestamps_default_to_naive_utc():
    before = SystemClock().now()
    reminder = Reminder(task_id=uuid4(), due_at=before)

    assert reminder.updated_at.tzinfo is None
    assert reminder.updated_at - before < timedelta(seconds=5)


def test_manual_clock_moves_only_when_told():
    clock = ManualClock(datetime(2024, 1, 1, 9, 0))

    assert clock.now() == datetime(2024, 1, 1, 9, 0)
    assert clock.advance(90) == datetime(2024, 1, 1, 9, 1, 30)
    assert clock.advance(minutes=1) == datetime(2024, 1, 1, 9, 2, 30)

    clock.set(datetime(2024, 6, 1))
    assert clock.now() == datetime(2024, 6, 1)

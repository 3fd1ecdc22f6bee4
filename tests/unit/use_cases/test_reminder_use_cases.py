from datetime import timedelta, timezone
from uuid import uuid4

import pytest

from src.app.use_cases.reminders import (
    ArmReminderCommand,
    ArmReminderUseCase,
    DisableReminderUseCase,
    ListRemindersUseCase,
    RetryReminderUseCase,
)
from src.domain.entities import Reminder, ReminderState, Task


@pytest.fixture
def owner_id():
    return uuid4()


@pytest.fixture
def task(mock_uow, owner_id):
    task = Task(user_id=owner_id, title="Write report")
    mock_uow.tasks.get_by_id.return_value = task
    return task


def existing_reminder(task, clock, state, **fields):
    return Reminder(task_id=task.id, due_at=clock.now() - timedelta(minutes=5), state=state, **fields)


@pytest.mark.asyncio
async def test_arm_new_reminder(mock_uow, clock, task, owner_id):
    mock_uow.reminders.get_by_task_id.return_value = None
    due_at = clock.now() + timedelta(hours=1)

    result = await ArmReminderUseCase(mock_uow, clock).execute(
        ArmReminderCommand(task_id=task.id, user_id=owner_id, due_at=due_at)
    )

    assert result.is_ok()
    assert result.value.state == ReminderState.pending
    assert result.value.due_at == due_at
    saved = mock_uow.reminders.save.await_args.args[0]
    assert saved.task_id == task.id
    mock_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_arm_normalizes_aware_datetime(mock_uow, clock, task, owner_id):
    mock_uow.reminders.get_by_task_id.return_value = None
    due_at = (clock.now() + timedelta(hours=1)).replace(tzinfo=timezone.utc)

    result = await ArmReminderUseCase(mock_uow, clock).execute(
        ArmReminderCommand(task_id=task.id, user_id=owner_id, due_at=due_at)
    )

    assert result.value.due_at == clock.now() + timedelta(hours=1)
    assert result.value.due_at.tzinfo is None


@pytest.mark.asyncio
async def test_rearm_sent_reminder_clears_bookkeeping(mock_uow, clock, task, owner_id):
    reminder = existing_reminder(
        task, clock, ReminderState.sent, sent_at=clock.now(), destination="old@example.com"
    )
    mock_uow.reminders.get_by_task_id.return_value = reminder
    due_at = clock.now() + timedelta(days=1)

    result = await ArmReminderUseCase(mock_uow, clock).execute(
        ArmReminderCommand(
            task_id=task.id, user_id=owner_id, due_at=due_at, destination="new@example.com"
        )
    )

    assert result.value.state == ReminderState.pending
    assert result.value.sent_at is None
    assert result.value.destination == "new@example.com"


@pytest.mark.asyncio
@pytest.mark.parametrize("offset", [timedelta(0), timedelta(seconds=-1), timedelta(days=-1)])
async def test_arm_rejects_non_future_due_at(mock_uow, clock, task, owner_id, offset):
    result = await ArmReminderUseCase(mock_uow, clock).execute(
        ArmReminderCommand(task_id=task.id, user_id=owner_id, due_at=clock.now() + offset)
    )

    assert result.error.code == "INVALID_DUE_AT"
    mock_uow.reminders.save.assert_not_awaited()


@pytest.mark.asyncio
async def test_arm_other_users_task(mock_uow, clock, task):
    result = await ArmReminderUseCase(mock_uow, clock).execute(
        ArmReminderCommand(
            task_id=task.id, user_id=uuid4(), due_at=clock.now() + timedelta(hours=1)
        )
    )

    assert result.error.code == "NOT_FOUND"


@pytest.mark.asyncio
async def test_arm_missing_task(mock_uow, clock, owner_id):
    mock_uow.tasks.get_by_id.return_value = None

    result = await ArmReminderUseCase(mock_uow, clock).execute(
        ArmReminderCommand(task_id=uuid4(), user_id=owner_id, due_at=clock.now() + timedelta(hours=1))
    )

    assert result.error.code == "NOT_FOUND"


@pytest.mark.asyncio
@pytest.mark.parametrize("state", list(ReminderState))
async def test_disable_from_any_state(mock_uow, clock, task, owner_id, state):
    mock_uow.reminders.get_by_task_id.return_value = existing_reminder(
        task, clock, state, destination="x@example.com"
    )

    result = await DisableReminderUseCase(mock_uow, clock).execute(task.id, owner_id)

    assert result.value.state == ReminderState.disabled
    assert result.value.destination is None


@pytest.mark.asyncio
async def test_disable_without_reminder(mock_uow, clock, task, owner_id):
    mock_uow.reminders.get_by_task_id.return_value = None

    result = await DisableReminderUseCase(mock_uow, clock).execute(task.id, owner_id)

    assert result.error.code == "NOT_FOUND"


@pytest.mark.asyncio
async def test_retry_failed(mock_uow, clock, task, owner_id):
    mock_uow.reminders.get_by_task_id.return_value = existing_reminder(
        task, clock, ReminderState.failed, failed_at=clock.now(), last_error="smtp down"
    )

    result = await RetryReminderUseCase(mock_uow, clock).execute(task.id, owner_id)

    assert result.value.state == ReminderState.pending
    assert result.value.last_error is None
    assert result.value.due_at < clock.now()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "state", [ReminderState.disabled, ReminderState.pending, ReminderState.sent]
)
async def test_retry_rejected_outside_failed(mock_uow, clock, task, owner_id, state):
    mock_uow.reminders.get_by_task_id.return_value = existing_reminder(task, clock, state)

    result = await RetryReminderUseCase(mock_uow, clock).execute(task.id, owner_id)

    assert result.error.code == "INVALID_TRANSITION"
    mock_uow.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_list_reminders(mock_uow, clock, task, owner_id):
    mock_uow.reminders.list_by_user.return_value = [
        existing_reminder(task, clock, ReminderState.pending)
    ]

    result = await ListRemindersUseCase(mock_uow).execute(owner_id)

    assert [r.task_id for r in result.value.reminders] == [str(task.id)]
    mock_uow.reminders.list_by_user.assert_awaited_once_with(owner_id)

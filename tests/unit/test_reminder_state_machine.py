from datetime import datetime, timedelta

import pytest

from src.domain.entities import ReminderState
from src.domain.errors import InvalidTransition
from src.domain.reminder_state_machine import (
    Arm,
    DeliveryOutcome,
    Disable,
    Effect,
    Fire,
    Retry,
    is_due,
    transition,
)

NOW = datetime(2024, 1, 1, 12, 0, 0)
ALL_STATES = list(ReminderState)


@pytest.mark.parametrize("state", ALL_STATES)
def test_arm_from_any_state_goes_pending(state):
    step = transition(state, Arm(due_at=NOW + timedelta(hours=1)))

    assert step.next_state == ReminderState.pending
    assert step.effects == (Effect.schedule,)


@pytest.mark.parametrize("state", ALL_STATES)
def test_disable_from_any_state(state):
    step = transition(state, Disable())

    assert step.next_state == ReminderState.disabled
    assert step.effects == (Effect.clear_schedule,)


def test_fire_success_from_pending():
    step = transition(ReminderState.pending, Fire(DeliveryOutcome.success()))

    assert step.next_state == ReminderState.sent
    assert step.effects == (Effect.record_delivery,)


def test_fire_failure_from_pending():
    step = transition(ReminderState.pending, Fire(DeliveryOutcome.failure("smtp down")))

    assert step.next_state == ReminderState.failed
    assert step.effects == (Effect.record_failure,)


@pytest.mark.parametrize(
    "state", [ReminderState.disabled, ReminderState.sent, ReminderState.failed]
)
def test_fire_outside_pending_is_rejected(state):
    with pytest.raises(InvalidTransition):
        transition(state, Fire(DeliveryOutcome.success()))


def test_retry_from_failed():
    step = transition(ReminderState.failed, Retry())

    assert step.next_state == ReminderState.pending
    assert step.effects == (Effect.schedule,)


@pytest.mark.parametrize(
    "state", [ReminderState.disabled, ReminderState.pending, ReminderState.sent]
)
def test_retry_outside_failed_is_rejected(state):
    with pytest.raises(InvalidTransition) as exc_info:
        transition(state, Retry())

    assert exc_info.value.state == state


def test_sent_only_leaves_through_arm_or_disable():
    assert transition(ReminderState.sent, Arm(due_at=NOW)).next_state == ReminderState.pending
    assert transition(ReminderState.sent, Disable()).next_state == ReminderState.disabled


def test_is_due():
    assert is_due(ReminderState.pending, NOW, NOW)
    assert is_due(ReminderState.pending, NOW - timedelta(days=3), NOW)
    assert not is_due(ReminderState.pending, NOW + timedelta(seconds=1), NOW)
    assert not is_due(ReminderState.sent, NOW - timedelta(minutes=1), NOW)
    assert not is_due(ReminderState.failed, NOW - timedelta(minutes=1), NOW)
    assert not is_due(ReminderState.disabled, NOW - timedelta(minutes=1), NOW)

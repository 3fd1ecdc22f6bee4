"""
Reminder State Machine

Pure transition logic for a reminder's lifecycle. No clock, no I/O:
the caller supplies the event and performs the returned effects.

    disabled --arm--> pending --fire(ok)--> sent
                      pending --fire(err)--> failed --retry--> pending
    any --disable--> disabled
    any --arm(new due_at)--> pending
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple, Union

from .entities.enums import ReminderState
from .errors import InvalidTransition


class Effect(str, Enum):
    """Bookkeeping the caller must apply alongside the new state"""

    schedule = "schedule"  # store due_at/destination, clear delivery fields
    clear_schedule = "clear_schedule"  # drop destination, clear delivery fields
    record_delivery = "record_delivery"  # set sent_at
    record_failure = "record_failure"  # set failed_at and last_error


@dataclass(frozen=True)
class DeliveryOutcome:
    """Result of one dispatch attempt"""

    delivered: bool
    error: Optional[str] = None

    @classmethod
    def success(cls) -> "DeliveryOutcome":
        return cls(delivered=True)

    @classmethod
    def failure(cls, error: str) -> "DeliveryOutcome":
        return cls(delivered=False, error=error)


@dataclass(frozen=True)
class Arm:
    due_at: datetime
    destination: Optional[str] = None


@dataclass(frozen=True)
class Disable:
    pass


@dataclass(frozen=True)
class Fire:
    outcome: DeliveryOutcome


@dataclass(frozen=True)
class Retry:
    pass


Event = Union[Arm, Disable, Fire, Retry]


@dataclass(frozen=True)
class Transition:
    next_state: ReminderState
    effects: Tuple[Effect, ...] = ()


def transition(current: ReminderState, event: Event) -> Transition:
    """
    Compute the next state for a reminder.

    Args:
        current: State the reminder is in now
        event: What happened

    Returns:
        Transition with the next state and the effects to apply

    Raises:
        InvalidTransition: Fire outside pending, or Retry outside failed
    """
    if isinstance(event, Arm):
        return Transition(ReminderState.pending, (Effect.schedule,))

    if isinstance(event, Disable):
        return Transition(ReminderState.disabled, (Effect.clear_schedule,))

    if isinstance(event, Fire):
        if current != ReminderState.pending:
            raise InvalidTransition(current, event)
        if event.outcome.delivered:
            return Transition(ReminderState.sent, (Effect.record_delivery,))
        return Transition(ReminderState.failed, (Effect.record_failure,))

    if isinstance(event, Retry):
        if current != ReminderState.failed:
            raise InvalidTransition(current, event)
        return Transition(ReminderState.pending, (Effect.schedule,))

    raise TypeError(f"Unknown reminder event: {event!r}")


def is_due(state: ReminderState, due_at: datetime, now: datetime) -> bool:
    """Firing predicate: pending and due_at already reached"""
    return state == ReminderState.pending and due_at <= now

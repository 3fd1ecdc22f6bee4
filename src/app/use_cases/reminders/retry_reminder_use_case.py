"""
Retry Reminder Use Case

Manual recovery for a reminder whose delivery failed. Failed reminders are
never retried automatically.
"""

from uuid import UUID

from src.app.services.clock import Clock
from src.app.services.unit_of_work import UnitOfWork
from src.domain.errors import InvalidTransition
from src.domain.reminder_state_machine import Retry, transition
from src.libs.result import Error, Result, Return
from .dtos import ReminderResponse
from .ownership import load_owned_task


class RetryReminderUseCase:
    """
    Use case for retrying a failed reminder.

    Business Rules:
    - Only failed reminders can be retried
    - The reminder returns to pending with its original due_at, so the
      next scheduler tick picks it up
    """

    def __init__(self, uow: UnitOfWork, clock: Clock):
        self.uow = uow
        self.clock = clock

    async def execute(self, task_id: UUID, user_id: UUID) -> Result[ReminderResponse]:
        async with self.uow:
            owned = await load_owned_task(self.uow, task_id, user_id)
            if owned.is_err():
                return Return.err(owned.error)

            reminder = await self.uow.reminders.get_by_task_id(task_id)
            if reminder is None:
                return Return.err(Error("NOT_FOUND", "Task has no reminder"))

            try:
                step = transition(reminder.state, Retry())
            except InvalidTransition as exc:
                return Return.err(Error("INVALID_TRANSITION", str(exc)))

            reminder.state = step.next_state
            reminder.last_error = None
            reminder.failed_at = None
            reminder.updated_at = self.clock.now()

            reminder = await self.uow.reminders.save(reminder)
            await self.uow.commit()

            return Return.ok(ReminderResponse.from_entity(reminder))

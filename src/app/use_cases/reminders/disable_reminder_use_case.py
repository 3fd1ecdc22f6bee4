"""
Disable Reminder Use Case

Turns a task's reminder off. Safe while a scheduler tick is running:
the tick only records its outcome if the reminder is still pending.
"""

from uuid import UUID

from src.app.services.clock import Clock
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import ReminderState
from src.domain.reminder_state_machine import Disable, Effect, transition
from src.libs.result import Error, Result, Return
from .dtos import ReminderResponse
from .ownership import load_owned_task


class DisableReminderUseCase:
    """
    Use case for disabling a reminder.

    Business Rules:
    - Only the task owner can disable its reminder
    - Any state can be disabled; the record is kept, not deleted
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

            step = transition(reminder.state, Disable())
            reminder.state = step.next_state
            if Effect.clear_schedule in step.effects:
                reminder.destination = None
            reminder.updated_at = self.clock.now()

            reminder = await self.uow.reminders.save(reminder)
            await self.uow.commit()

            return Return.ok(ReminderResponse.from_entity(reminder))

"""
Arm Reminder Use Case

Sets (or resets) the reminder time of a task.
"""

import logging

from src.app.services.clock import Clock, to_naive_utc
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import Reminder, ReminderState
from src.domain.reminder_state_machine import Arm, Effect, transition
from src.libs.result import Error, Result, Return
from .dtos import ArmReminderCommand, ReminderResponse
from .ownership import load_owned_task

logger = logging.getLogger(__name__)


class ArmReminderUseCase:
    """
    Use case for arming a reminder.

    Business Rules:
    - Only the task owner can arm its reminder
    - due_at must be in the future
    - Arming from any state (including sent) moves the reminder to pending
      and clears previous delivery bookkeeping
    - destination overrides the owner's email; None falls back to it
    """

    def __init__(self, uow: UnitOfWork, clock: Clock):
        self.uow = uow
        self.clock = clock

    async def execute(self, command: ArmReminderCommand) -> Result[ReminderResponse]:
        """
        Execute arm reminder use case.

        Returns:
            Result with the armed reminder, or Error (NOT_FOUND, INVALID_DUE_AT)
        """
        now = self.clock.now()
        due_at = to_naive_utc(command.due_at)
        if due_at <= now:
            return Return.err(
                Error("INVALID_DUE_AT", "Reminder time must be in the future")
            )

        async with self.uow:
            owned = await load_owned_task(self.uow, command.task_id, command.user_id)
            if owned.is_err():
                return Return.err(owned.error)

            reminder = await self.uow.reminders.get_by_task_id(command.task_id)
            current = reminder.state if reminder else ReminderState.disabled
            step = transition(current, Arm(due_at=due_at, destination=command.destination))

            if reminder is None:
                reminder = Reminder(task_id=command.task_id, due_at=due_at)

            reminder.state = step.next_state
            if Effect.schedule in step.effects:
                reminder.due_at = due_at
                reminder.destination = command.destination
                reminder.sent_at = None
                reminder.failed_at = None
                reminder.last_error = None
            reminder.updated_at = now

            reminder = await self.uow.reminders.save(reminder)
            await self.uow.commit()

            logger.info(f"Reminder for task {command.task_id} armed for {due_at.isoformat()}")
            return Return.ok(ReminderResponse.from_entity(reminder))

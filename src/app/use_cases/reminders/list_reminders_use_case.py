from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.libs.result import Result, Return
from .dtos import ReminderListResponse, ReminderResponse


class ListRemindersUseCase:
    """Armed reminders of the current user's tasks, soonest first"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID) -> Result[ReminderListResponse]:
        async with self.uow:
            reminders = await self.uow.reminders.list_by_user(user_id)
            return Return.ok(
                ReminderListResponse(
                    reminders=[ReminderResponse.from_entity(r) for r in reminders]
                )
            )

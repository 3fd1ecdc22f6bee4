import logging
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.reminder_repository import IReminderRepository
from src.domain.entities import Reminder, ReminderState, Task
from src.domain.errors import RepositoryUnavailable

logger = logging.getLogger(__name__)


class ReminderRepository(IReminderRepository):
    """Reminder repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_task_id(self, task_id: UUID) -> Optional[Reminder]:
        """Get the reminder attached to a task"""
        stmt = (
            select(Reminder)
            .where(Reminder.task_id == task_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def save(self, reminder: Reminder) -> Reminder:
        """Insert or update a reminder"""
        self.session.add(reminder)
        await self.session.flush()
        await self.session.refresh(reminder)
        return reminder

    async def find_due(self, now: datetime, limit: int = 100) -> List[Reminder]:
        """
        Pending reminders whose due_at has passed, oldest first.

        Raises:
            RepositoryUnavailable: the database could not be queried
        """
        stmt = (
            select(Reminder)
            .where(Reminder.state == ReminderState.pending, Reminder.due_at <= now)
            .order_by(Reminder.due_at)
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as exc:
            logger.error(f"Failed to load due reminders: {exc}")
            raise RepositoryUnavailable(str(exc)) from exc
        return list(result.scalars().all())

    async def compare_and_set_state(
        self,
        task_id: UUID,
        expected_state: ReminderState,
        new_state: ReminderState,
        expected_due_at: Optional[datetime] = None,
        **extra,
    ) -> bool:
        """Conditional state update; True only if this call changed the row"""
        stmt = update(Reminder).where(
            Reminder.task_id == task_id, Reminder.state == expected_state
        )
        if expected_due_at is not None:
            stmt = stmt.where(Reminder.due_at == expected_due_at)
        stmt = stmt.values(state=new_state, **extra)
        try:
            result = await self.session.execute(stmt)
            await self.session.flush()
        except SQLAlchemyError as exc:
            logger.error(f"Failed to update reminder {task_id}: {exc}")
            raise RepositoryUnavailable(str(exc)) from exc
        return result.rowcount == 1

    async def list_by_user(self, user_id: UUID) -> List[Reminder]:
        """Non-disabled reminders of the user's tasks, ordered by due_at"""
        stmt = (
            select(Reminder)
            .join(Task, Task.id == Reminder.task_id)
            .where(Task.user_id == user_id, Reminder.state != ReminderState.disabled)
            .order_by(Reminder.due_at)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from src.domain.entities import Reminder, ReminderState


class IReminderRepository(ABC):
    """Reminder repository interface - application layer"""

    @abstractmethod
    async def get_by_task_id(self, task_id: UUID) -> Optional[Reminder]:
        """Get the reminder attached to a task"""
        pass

    @abstractmethod
    async def save(self, reminder: Reminder) -> Reminder:
        """Insert or update a reminder (user-driven arm / disable / retry)"""
        pass

    @abstractmethod
    async def find_due(self, now: datetime, limit: int = 100) -> List[Reminder]:
        """Reminders with state == pending and due_at <= now, oldest first"""
        pass

    @abstractmethod
    async def compare_and_set_state(
        self,
        task_id: UUID,
        expected_state: ReminderState,
        new_state: ReminderState,
        expected_due_at: Optional[datetime] = None,
        **extra,
    ) -> bool:
        """
        Move a reminder to new_state only if it is still in expected_state
        and, when expected_due_at is given, still due at that moment.

        Returns False when another writer changed the state or re-armed it first.
        """
        pass

    @abstractmethod
    async def list_by_user(self, user_id: UUID) -> List[Reminder]:
        """Armed (non-disabled) reminders of a user's tasks, ordered by due_at"""
        pass

"""
Reminder Use Case DTOs (Data Transfer Objects)

Command and Response classes for the reminders domain.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel

from src.domain.entities import Reminder, ReminderState


class ArmReminderCommand(BaseModel):
    """Arm or re-arm the reminder of a task"""

    task_id: UUID
    user_id: UUID
    due_at: datetime
    destination: Optional[str] = None


class ReminderResponse(BaseModel):
    """Reminder state as seen by its owner"""

    task_id: str
    due_at: datetime
    state: ReminderState
    destination: Optional[str] = None
    sent_at: Optional[datetime] = None
    failed_at: Optional[datetime] = None
    last_error: Optional[str] = None

    @classmethod
    def from_entity(cls, reminder: Reminder) -> "ReminderResponse":
        return cls(
            task_id=str(reminder.task_id),
            due_at=reminder.due_at,
            state=reminder.state,
            destination=reminder.destination,
            sent_at=reminder.sent_at,
            failed_at=reminder.failed_at,
            last_error=reminder.last_error,
        )


class ReminderListResponse(BaseModel):
    reminders: List[ReminderResponse]

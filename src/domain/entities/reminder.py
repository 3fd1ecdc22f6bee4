"""
Reminder Entity

Future-dated notification attached 1:1 to a task.
"""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from .enums import ReminderState


class Reminder(SQLModel, table=True):
    """
    Reminder entity - one per task, keyed by the task id.

    Business Rules:
    - Eligible for firing iff state == pending and due_at <= now
    - The scheduler only moves pending -> sent / pending -> failed, and
      only through a compare-and-set on state and due_at
    - sent never goes back to pending except by re-arming with a new due_at
    - The scheduler never deletes reminders
    - destination overrides the owner's email when set
    """

    __tablename__ = "reminders"

    task_id: UUID = Field(foreign_key="tasks.id", primary_key=True)

    due_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    state: ReminderState = Field(default=ReminderState.disabled)
    destination: Optional[str] = Field(default=None, max_length=255)

    # Delivery bookkeeping
    sent_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    failed_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    last_error: Optional[str] = Field(default=None, max_length=500)

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc).replace(tzinfo=None),
        sa_column=Column(DateTime),
    )

    __table_args__ = (Index("idx_reminder_state_due_at", "state", "due_at"),)

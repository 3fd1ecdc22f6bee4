"""
Reminder Use Cases

Owner-driven reminder lifecycle: arm, disable, manual retry, listing.
Delivery itself is driven by the ReminderScheduler.
"""

from .arm_reminder_use_case import ArmReminderUseCase
from .disable_reminder_use_case import DisableReminderUseCase
from .retry_reminder_use_case import RetryReminderUseCase
from .list_reminders_use_case import ListRemindersUseCase
from .dtos import ArmReminderCommand, ReminderResponse, ReminderListResponse

__all__ = [
    # Use Cases
    "ArmReminderUseCase",
    "DisableReminderUseCase",
    "RetryReminderUseCase",
    "ListRemindersUseCase",
    # DTOs
    "ArmReminderCommand",
    "ReminderResponse",
    "ReminderListResponse",
]

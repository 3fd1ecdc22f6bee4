"""
Domain Enums

All enumeration types used across domain entities and services.
"""

from enum import Enum


class UserStatus(str, Enum):
    """User account status"""

    active = "active"
    disabled = "disabled"


class TaskStatus(str, Enum):
    """Task progress"""

    todo = "todo"
    in_progress = "in_progress"
    done = "done"


class ReminderState(str, Enum):
    """
    Reminder lifecycle state.

    Only PENDING reminders whose due_at has passed are eligible for firing.
    """

    disabled = "disabled"
    pending = "pending"
    sent = "sent"
    failed = "failed"


class CredentialKind(str, Enum):
    """Kind of short-lived single-use secret"""

    otp = "otp"
    reset = "reset"


class TokenKind(str, Enum):
    """Bearer token type, carried in the `typ` claim"""

    access = "access"
    refresh = "refresh"

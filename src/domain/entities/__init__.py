"""
Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import (
    UserStatus,
    TaskStatus,
    ReminderState,
    CredentialKind,
    TokenKind,
)

# Export all entities
from .user import User
from .task import Task
from .reminder import Reminder
from .ephemeral_credential import EphemeralCredential, credential_key
from .bearer_token import BearerClaims

__all__ = [
    # Enums
    "UserStatus",
    "TaskStatus",
    "ReminderState",
    "CredentialKind",
    "TokenKind",
    # Entities
    "User",
    "Task",
    "Reminder",
    "EphemeralCredential",
    "BearerClaims",
    # Helpers
    "credential_key",
]

"""
Use Cases

Organized into domain folders:
- auth/: Login, tokens, email verification, password reset
- reminders/: Task reminder lifecycle

Import from subdirectories for better organization.
"""

from .auth import (
    LoginUseCase,
    RefreshTokenUseCase,
    LogoutUseCase,
    SendVerificationCodeUseCase,
    VerifyEmailUseCase,
    GetVerificationStatusUseCase,
    RequestPasswordResetUseCase,
    ConfirmPasswordResetUseCase,
)
from .reminders import (
    ArmReminderUseCase,
    DisableReminderUseCase,
    RetryReminderUseCase,
    ListRemindersUseCase,
)

__all__ = [
    # Auth
    "LoginUseCase",
    "RefreshTokenUseCase",
    "LogoutUseCase",
    "SendVerificationCodeUseCase",
    "VerifyEmailUseCase",
    "GetVerificationStatusUseCase",
    "RequestPasswordResetUseCase",
    "ConfirmPasswordResetUseCase",
    # Reminders
    "ArmReminderUseCase",
    "DisableReminderUseCase",
    "RetryReminderUseCase",
    "ListRemindersUseCase",
]

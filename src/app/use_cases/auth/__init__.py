"""
Authentication Use Cases

Login / refresh / logout with bearer tokens, email verification codes and
password reset tokens.
"""

from .login_use_case import LoginUseCase
from .refresh_token_use_case import RefreshTokenUseCase
from .logout_use_case import LogoutUseCase
from .send_verification_code_use_case import SendVerificationCodeUseCase
from .verify_email_use_case import VerifyEmailUseCase
from .get_verification_status_use_case import GetVerificationStatusUseCase
from .request_password_reset_use_case import RequestPasswordResetUseCase
from .confirm_password_reset_use_case import ConfirmPasswordResetUseCase
from .dtos import (
    LoginResponse,
    RefreshTokenResponse,
    CurrentUserResponse,
    StatusResponse,
    VerificationStatusResponse,
)

__all__ = [
    # Use Cases
    "LoginUseCase",
    "RefreshTokenUseCase",
    "LogoutUseCase",
    "SendVerificationCodeUseCase",
    "VerifyEmailUseCase",
    "GetVerificationStatusUseCase",
    "RequestPasswordResetUseCase",
    "ConfirmPasswordResetUseCase",
    # DTOs - Responses
    "LoginResponse",
    "RefreshTokenResponse",
    "CurrentUserResponse",
    "StatusResponse",
    "VerificationStatusResponse",
]

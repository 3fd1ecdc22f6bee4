"""
Login Use Case

Authenticates a username/password pair and issues an access + refresh pair.
"""

import logging

import bcrypt

from src.app.services.token_manager import BearerTokenManager
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import TokenKind, UserStatus
from src.libs.result import Error, Result, Return
from .claims import user_claims
from .dtos import LoginResponse

logger = logging.getLogger(__name__)

# Valid bcrypt hash of a random string, checked when the user does not exist
_DUMMY_HASH = bcrypt.hashpw(b"dummy_password", bcrypt.gensalt(12))


class LoginUseCase:
    """
    Use case for user login and token issuance.

    Business Rules:
    - Constant-time password comparison to prevent timing attacks
    - Unknown user and wrong password give the same error
    - User must have status=active
    - Access token carries user_id, email and roles; refresh token
      carries only the subject
    - No server-side session is created
    """

    def __init__(self, uow: UnitOfWork, tokens: BearerTokenManager):
        self.uow = uow
        self.tokens = tokens

    async def execute(self, username: str, password: str) -> Result[LoginResponse]:
        """
        Execute login use case.

        Args:
            username: Username
            password: Plain text password

        Returns:
            Result with LoginResponse containing both tokens, or Error
        """
        async with self.uow:
            user = await self.uow.users.get_by_username(username)

            if user is None:
                # Hash check anyway to keep response time uniform
                bcrypt.checkpw(password.encode(), _DUMMY_HASH)
                return Return.err(
                    Error("INVALID_CREDENTIALS", "Invalid username or password")
                )

            if not bcrypt.checkpw(password.encode(), user.password_hash.encode()):
                return Return.err(
                    Error("INVALID_CREDENTIALS", "Invalid username or password")
                )

            if user.status == UserStatus.disabled:
                return Return.err(Error("USER_DISABLED", "User account is disabled"))

            access_token = self.tokens.issue(
                user.username, user_claims(user), TokenKind.access
            )
            refresh_token = self.tokens.issue(user.username, {}, TokenKind.refresh)

            logger.info(f"User {user.username} logged in")

            return Return.ok(
                LoginResponse(
                    access_token=access_token,
                    refresh_token=refresh_token,
                    expires_in=int(self.tokens.access_ttl.total_seconds()),
                )
            )

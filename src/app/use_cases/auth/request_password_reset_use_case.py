"""
Request Password Reset Use Case

Issues a password reset token and mails a reset link.
"""

import logging

from src.app.services.credential_store import CredentialStore
from src.app.services.email_templates import password_reset_email
from src.app.services.notification_dispatcher import INotificationDispatcher, send_with_timeout
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import CredentialKind, UserStatus
from src.libs.result import Result, Return
from .dtos import StatusResponse

logger = logging.getLogger(__name__)

GENERIC_RESPONSE = StatusResponse(
    status="sent",
    message="If the account exists, a password reset link has been sent",
)


class RequestPasswordResetUseCase:
    """
    Use case for requesting a password reset.

    Business Rules:
    - Identifier may be an email (contains "@") or a username
    - Token is 32 random bytes, URL-safe, valid for 60 minutes by default
    - Token is bound to the username; a newer token replaces the older one
    - The token is only ever sent by email, never returned
    - Same response whether or not the account exists (no enumeration)
    """

    def __init__(
        self,
        uow: UnitOfWork,
        credentials: CredentialStore,
        dispatcher: INotificationDispatcher,
        reset_url: str,
        dispatch_timeout: float,
    ):
        self.uow = uow
        self.credentials = credentials
        self.dispatcher = dispatcher
        self.reset_url = reset_url
        self.dispatch_timeout = dispatch_timeout

    async def execute(self, identifier: str) -> Result[StatusResponse]:
        """
        Execute request password reset use case.

        Args:
            identifier: Email address or username

        Returns:
            Result with the generic confirmation
        """
        async with self.uow:
            if "@" in identifier:
                user = await self.uow.users.get_by_email(identifier)
            else:
                user = await self.uow.users.get_by_username(identifier)

            if user is None or user.status != UserStatus.active:
                logger.info(f"Password reset requested for unknown or inactive account {identifier}")
                return Return.ok(GENERIC_RESPONSE)

            # Read before the unit of work ends (rollback expires loaded rows)
            username, email, user_ref = user.username, user.email, str(user.id)

        token = await self.credentials.issue(
            CredentialKind.reset,
            username,
            payload={"user_id": user_ref, "username": username},
        )

        reset_link = f"{self.reset_url}?token={token}"
        ttl_minutes = int(self.credentials.reset_ttl.total_seconds() // 60)
        subject, body = password_reset_email(reset_link, ttl_minutes)

        sent = await send_with_timeout(
            self.dispatcher, email, subject, body, timeout=self.dispatch_timeout
        )
        if sent.is_err():
            # Surfacing this would reveal that the account exists
            logger.error(f"Password reset email for {username} failed: {sent.error.message}")

        return Return.ok(GENERIC_RESPONSE)

"""
Verify Email Use Case

Redeems an email verification OTP and marks the email as verified.
"""

import logging
from uuid import UUID

from src.app.services.credential_store import CredentialStore
from src.app.services.unit_of_work import UnitOfWork
from src.domain import errors
from src.domain.entities import CredentialKind
from src.libs.result import Error, Result, Return
from .dtos import StatusResponse

logger = logging.getLogger(__name__)


class VerifyEmailUseCase:
    """
    Use case for email verification.

    Business Rules:
    - Code must be the newest one issued for the user's email
    - Code must not be expired and is single-use
    - Wrong, expired and already-used codes give the same INVALID error
    - Sets email_verified = True
    """

    def __init__(self, uow: UnitOfWork, credentials: CredentialStore):
        self.uow = uow
        self.credentials = credentials

    async def execute(self, user_id: UUID, code: str) -> Result[StatusResponse]:
        """
        Execute email verification use case.

        Args:
            user_id: Authenticated user
            code: 6-digit code from the email

        Returns:
            Result with verification status, or Error (INVALID)
        """
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(
                    Error(errors.INVALID, errors.INVALID_CREDENTIAL_MESSAGE)
                )

            redeemed = await self.credentials.redeem(CredentialKind.otp, user.email, code)
            if redeemed.is_err():
                return Return.err(redeemed.error)

            if redeemed.value.get("user_id") != str(user.id):
                logger.warning(f"OTP for {user.email} was bound to another user")
                return Return.err(
                    Error(errors.INVALID, errors.INVALID_CREDENTIAL_MESSAGE)
                )

            user.email_verified = True
            await self.uow.users.update(user)
            await self.uow.commit()

            return Return.ok(
                StatusResponse(status="verified", message="Email verified successfully")
            )

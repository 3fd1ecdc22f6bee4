"""
Confirm Password Reset Use Case

Redeems a password reset token and sets the new password.
"""

import bcrypt

from src.app.services.credential_store import CredentialStore
from src.app.services.unit_of_work import UnitOfWork
from src.domain import errors
from src.domain.entities import CredentialKind
from src.libs.result import Error, Result, Return
from .dtos import StatusResponse


class ConfirmPasswordResetUseCase:
    """
    Use case for confirming a password reset.

    Business Rules:
    - Token must be the newest one issued for its user, unexpired, unused
    - Invalid, expired and used tokens give the same INVALID error
    - The password is changed for exactly the user bound at issue time
    - New password must be at least 8 characters
    - Password is hashed with bcrypt (cost factor 12)
    """

    def __init__(self, uow: UnitOfWork, credentials: CredentialStore):
        self.uow = uow
        self.credentials = credentials

    def _validate_password(self, password: str) -> Result[None]:
        """
        Validate password complexity.

        Args:
            password: Password to validate

        Returns:
            Result with None if valid, or Error if invalid
        """
        if len(password) < 8:
            return Return.err(
                Error(
                    "INVALID_PASSWORD",
                    "Password must be at least 8 characters long",
                )
            )

        return Return.ok(None)

    async def execute(self, token: str, new_password: str) -> Result[StatusResponse]:
        """
        Execute confirm password reset use case.

        Args:
            token: Password reset token (plain text from the email link)
            new_password: New password to set

        Returns:
            Result with confirmation status, or Error

        Errors:
            - INVALID_PASSWORD: Password does not meet complexity requirements
            - INVALID: Token unknown, expired, already used, or user gone
        """
        # Checked first so a weak password does not burn the token
        password_validation = self._validate_password(new_password)
        if password_validation.is_err():
            return Return.err(password_validation.error)

        async with self.uow:
            redeemed = await self.credentials.redeem_token(CredentialKind.reset, token)
            if redeemed.is_err():
                return Return.err(redeemed.error)

            user = await self.uow.users.get_by_username(redeemed.value["username"])
            if user is None or str(user.id) != redeemed.value.get("user_id"):
                return Return.err(
                    Error(errors.INVALID, errors.INVALID_CREDENTIAL_MESSAGE)
                )

            password_hash = bcrypt.hashpw(new_password.encode(), bcrypt.gensalt(12))
            user.password_hash = password_hash.decode()
            await self.uow.users.update(user)
            await self.uow.commit()

            return Return.ok(
                StatusResponse(
                    status="success",
                    message="Password has been reset successfully",
                )
            )

"""
Send Verification Code Use Case

Issues a 6-digit one-time code for the current user's email and mails it.
"""

from uuid import UUID

from src.app.services.credential_store import CredentialStore
from src.app.services.email_templates import verification_code_email
from src.app.services.notification_dispatcher import INotificationDispatcher, send_with_timeout
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import CredentialKind
from src.libs.result import Error, Result, Return
from .dtos import StatusResponse


class SendVerificationCodeUseCase:
    """
    Use case for issuing an email verification OTP.

    Business Rules:
    - Code is 6 random digits, valid for the OTP TTL (5 minutes default)
    - A new code replaces any outstanding one
    - Already verified users get no code
    - The response never contains the code
    """

    def __init__(
        self,
        uow: UnitOfWork,
        credentials: CredentialStore,
        dispatcher: INotificationDispatcher,
        dispatch_timeout: float,
    ):
        self.uow = uow
        self.credentials = credentials
        self.dispatcher = dispatcher
        self.dispatch_timeout = dispatch_timeout

    async def execute(self, user_id: UUID) -> Result[StatusResponse]:
        """
        Execute send verification code use case.

        Args:
            user_id: Authenticated user

        Returns:
            Result with an opaque confirmation, or Error
            (USER_NOT_FOUND, DISPATCH_FAILED)
        """
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            if user.email_verified:
                return Return.ok(
                    StatusResponse(
                        status="already_verified", message="Email is already verified"
                    )
                )

            # Read before the unit of work ends (rollback expires loaded rows)
            email, user_ref = user.email, str(user.id)

        code = await self.credentials.issue(
            CredentialKind.otp, email, payload={"user_id": user_ref}
        )

        ttl_minutes = int(self.credentials.otp_ttl.total_seconds() // 60)
        subject, body = verification_code_email(code, ttl_minutes)
        sent = await send_with_timeout(
            self.dispatcher, email, subject, body, timeout=self.dispatch_timeout
        )
        if sent.is_err():
            return Return.err(sent.error)

        return Return.ok(
            StatusResponse(status="sent", message="A verification code has been sent to your email")
        )

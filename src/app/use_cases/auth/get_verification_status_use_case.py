from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.libs.result import Error, Result, Return
from .dtos import VerificationStatusResponse


class GetVerificationStatusUseCase:
    """Reports whether the current user's email is verified"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID) -> Result[VerificationStatusResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            return Return.ok(
                VerificationStatusResponse(
                    email=user.email, email_verified=user.email_verified
                )
            )

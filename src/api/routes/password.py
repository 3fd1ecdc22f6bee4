from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from config import ApplicationConfig
from src.api.error import ClientError, ServerError
from src.app.services.credential_store import CredentialStore
from src.app.services.notification_dispatcher import INotificationDispatcher
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import (
    RequestPasswordResetUseCase,
    ConfirmPasswordResetUseCase,
    StatusResponse,
)
from src.depends import get_credential_store, get_dispatcher, get_unit_of_work

router = APIRouter(prefix="/auth/password", tags=["Password Reset"])


class ForgotPasswordRequest(BaseModel):
    """
    Request password reset HTTP request payload
    """

    identifier: str = Field(
        ..., min_length=1, max_length=255, description="Email address or username"
    )


@router.post("/forgot", status_code=status.HTTP_200_OK, response_model=StatusResponse)
async def forgot_password(
    request: ForgotPasswordRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    credentials: CredentialStore = Depends(get_credential_store),
    dispatcher: INotificationDispatcher = Depends(get_dispatcher),
):
    """
    Request Password Reset

    Mails a reset link when the account exists.

    Security:
        - No account enumeration (same response whether or not it exists)
        - The token only travels by email

    Returns:
        - 200 OK: Always
    """
    use_case = RequestPasswordResetUseCase(
        uow,
        credentials,
        dispatcher,
        ApplicationConfig.PASSWORD_RESET_URL,
        ApplicationConfig.DISPATCH_TIMEOUT_SECONDS,
    )
    result = await use_case.execute(request.identifier)

    if result.is_err():
        raise ServerError(result.error)

    return result.value


class ResetPasswordRequest(BaseModel):
    """
    Confirm password reset HTTP request payload
    """

    token: str = Field(..., min_length=1, description="Password reset token from email")
    new_password: str = Field(..., description="New password (min 8 chars)")


@router.post("/reset", status_code=status.HTTP_200_OK, response_model=StatusResponse)
async def reset_password(
    request: ResetPasswordRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    credentials: CredentialStore = Depends(get_credential_store),
):
    """
    Confirm Password Reset

    Redeems the reset token and sets the new password for the account the
    token was issued to.

    Raises:
        - 400 Bad Request: Invalid/expired/used token (INVALID) or weak
          password (INVALID_PASSWORD)
        - 500 Internal Server Error: Server error
    """
    use_case = ConfirmPasswordResetUseCase(uow, credentials)
    result = await use_case.execute(request.token, request.new_password)

    if result.is_err():
        error = result.error
        if error.code in ("INVALID", "INVALID_PASSWORD"):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    return result.value

from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from config import ApplicationConfig
from src.api.error import ClientError, ServerError
from src.app.services.credential_store import CredentialStore
from src.app.services.notification_dispatcher import INotificationDispatcher
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import (
    SendVerificationCodeUseCase,
    VerifyEmailUseCase,
    GetVerificationStatusUseCase,
    StatusResponse,
    VerificationStatusResponse,
)
from src.depends import (
    get_credential_store,
    get_current_claims,
    get_dispatcher,
    get_unit_of_work,
)
from src.domain.entities import BearerClaims

router = APIRouter(prefix="/auth/verification", tags=["Email Verification"])


@router.post("/send", status_code=status.HTTP_200_OK, response_model=StatusResponse)
async def send_verification_code(
    claims: BearerClaims = Depends(get_current_claims),
    uow: UnitOfWork = Depends(get_unit_of_work),
    credentials: CredentialStore = Depends(get_credential_store),
    dispatcher: INotificationDispatcher = Depends(get_dispatcher),
):
    """
    Send Verification Code

    Mails a fresh 6-digit code to the current user's email address.
    Any previously sent code stops working.

    Raises:
        - 404 Not Found: User no longer exists
        - 500 Internal Server Error: Email could not be delivered
    """
    use_case = SendVerificationCodeUseCase(
        uow, credentials, dispatcher, ApplicationConfig.DISPATCH_TIMEOUT_SECONDS
    )
    result = await use_case.execute(UUID(claims.user_id))

    if result.is_err():
        error = result.error
        if error.code == "USER_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value


class VerifyCodeRequest(BaseModel):
    """
    Verify code HTTP request payload
    """

    code: str = Field(..., min_length=1, max_length=16, description="Code from the email")


@router.post("/verify", status_code=status.HTTP_200_OK, response_model=StatusResponse)
async def verify_code(
    request: VerifyCodeRequest,
    claims: BearerClaims = Depends(get_current_claims),
    uow: UnitOfWork = Depends(get_unit_of_work),
    credentials: CredentialStore = Depends(get_credential_store),
):
    """
    Verify Email

    Redeems the code and marks the email as verified. Wrong, expired,
    reused and locked-out codes all get the same 400 response.
    """
    use_case = VerifyEmailUseCase(uow, credentials)
    result = await use_case.execute(UUID(claims.user_id), request.code)

    if result.is_err():
        error = result.error
        if error.code == "INVALID":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    return result.value


@router.get("/status", status_code=status.HTTP_200_OK, response_model=VerificationStatusResponse)
async def verification_status(
    claims: BearerClaims = Depends(get_current_claims),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    use_case = GetVerificationStatusUseCase(uow)
    result = await use_case.execute(UUID(claims.user_id))

    if result.is_err():
        error = result.error
        if error.code == "USER_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from src.api.error import ClientError, ServerError
from src.app.services.token_manager import BearerTokenManager
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import (
    LoginUseCase,
    RefreshTokenUseCase,
    LogoutUseCase,
    LoginResponse,
    RefreshTokenResponse,
    CurrentUserResponse,
    StatusResponse,
)
from src.app.services.clock import to_epoch
from src.depends import get_current_claims, get_token_manager, get_unit_of_work
from src.domain.entities import BearerClaims

router = APIRouter(prefix="/auth", tags=["Authentication"])

TOKEN_ERROR_CODES = ("MALFORMED", "BAD_SIGNATURE", "EXPIRED", "INVALID")


class LoginRequest(BaseModel):
    """
    Login HTTP request payload

    Validates incoming login request.
    """

    username: str = Field(..., min_length=1, description="Username")
    password: str = Field(..., description="User password")


@router.post("/login", status_code=status.HTTP_200_OK, response_model=LoginResponse)
async def login(
    request: LoginRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    tokens: BearerTokenManager = Depends(get_token_manager),
):
    """
    User Login

    Authenticates with username + password and returns an access token
    (with user_id, email and roles claims) and a refresh token.

    Raises:
        - 401 Unauthorized: Invalid credentials
        - 403 Forbidden: User disabled
        - 500 Internal Server Error: Server error
    """
    use_case = LoginUseCase(uow, tokens)
    result = await use_case.execute(request.username, request.password)

    # Handle errors
    if result.is_err():
        error = result.error
        if error.code == "INVALID_CREDENTIALS":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        elif error.code == "USER_DISABLED":
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        raise ServerError(error)

    # Return Pydantic model directly (FastAPI auto-serializes)
    return result.value


class RefreshRequest(BaseModel):
    """
    Refresh token HTTP request payload

    Validates incoming refresh request.
    """

    refresh_token: str = Field(..., description="Refresh token")


@router.post("/refresh", status_code=status.HTTP_200_OK, response_model=RefreshTokenResponse)
async def refresh(
    request: RefreshRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    tokens: BearerTokenManager = Depends(get_token_manager),
):
    """
    Refresh Access Token

    Exchanges a refresh token for a new access token. Claims are re-read
    from the user record.

    Raises:
        - 401 Unauthorized: Malformed, badly signed, expired or wrong-kind token,
          or the user is gone / disabled
        - 500 Internal Server Error: Server error
    """
    use_case = RefreshTokenUseCase(uow, tokens)
    result = await use_case.execute(request.refresh_token)

    # Handle errors
    if result.is_err():
        error = result.error
        if error.code in TOKEN_ERROR_CODES:
            raise ClientError(
                error,
                status_code=status.HTTP_401_UNAUTHORIZED,
                headers={"WWW-Authenticate": "Bearer"},
            )
        raise ServerError(error)

    return result.value


@router.post("/logout", status_code=status.HTTP_200_OK, response_model=StatusResponse)
async def logout(
    claims: BearerClaims = Depends(get_current_claims),
    tokens: BearerTokenManager = Depends(get_token_manager),
):
    """
    Logout

    Revokes the presented access token until it would have expired anyway.
    """
    use_case = LogoutUseCase(tokens)
    result = await use_case.execute(claims)

    if result.is_err():
        raise ServerError(result.error)

    return result.value


@router.get("/me", status_code=status.HTTP_200_OK, response_model=CurrentUserResponse)
async def me(claims: BearerClaims = Depends(get_current_claims)):
    """Current user as described by the verified access token"""
    return CurrentUserResponse(
        username=claims.subject,
        user_id=claims.user_id or "",
        email=claims.claims.get("email", ""),
        roles=claims.claims.get("roles", []),
        expires_at=to_epoch(claims.expires_at),
        claims=claims.claims,
    )

"""
Authentication Use Case DTOs (Data Transfer Objects)

Response classes for the auth domain.
Provides type safety and clear contracts between layers.
"""

from typing import Any, Dict, List

from pydantic import BaseModel


# ============================================================================
# Token DTOs
# ============================================================================


class LoginResponse(BaseModel):
    """Response for user login use case"""

    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int


class RefreshTokenResponse(BaseModel):
    """Response for refresh token use case"""

    access_token: str
    token_type: str = "Bearer"
    expires_in: int


class CurrentUserResponse(BaseModel):
    """Verified claims of the presented access token"""

    username: str
    user_id: str
    email: str
    roles: List[str]
    expires_at: int
    claims: Dict[str, Any]


# ============================================================================
# One-time credential DTOs
# ============================================================================


class StatusResponse(BaseModel):
    """Opaque confirmation used by OTP, reset and logout flows"""

    status: str
    message: str


class VerificationStatusResponse(BaseModel):
    """Email verification flag of the current user"""

    email: str
    email_verified: bool

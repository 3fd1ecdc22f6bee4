"""
Refresh Token Use Case

Exchanges a refresh token for a new access token.
"""

from typing import Any, Dict, Optional

from src.app.services.token_manager import BearerTokenManager
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import UserStatus
from src.libs.result import Result, Return
from .claims import user_claims
from .dtos import RefreshTokenResponse


class RefreshTokenUseCase:
    """
    Use case for refreshing access tokens.

    Business Rules:
    - Only tokens of kind refresh are accepted (an access token is rejected)
    - Claims are re-read from the user record, so role changes apply
    - Deleted or disabled users cannot refresh
    - The refresh token itself is not rotated (stateless)
    """

    def __init__(self, uow: UnitOfWork, tokens: BearerTokenManager):
        self.uow = uow
        self.tokens = tokens

    async def execute(self, refresh_token: str) -> Result[RefreshTokenResponse]:
        """
        Execute refresh token use case.

        Args:
            refresh_token: Refresh token issued at login

        Returns:
            Result with RefreshTokenResponse, or Error
            (MALFORMED, BAD_SIGNATURE, EXPIRED, INVALID)
        """
        async with self.uow:

            async def load_claims(username: str) -> Optional[Dict[str, Any]]:
                user = await self.uow.users.get_by_username(username)
                if user is None or user.status != UserStatus.active:
                    return None
                return user_claims(user)

            result = await self.tokens.refresh(refresh_token, load_claims)
            if result.is_err():
                return Return.err(result.error)

            return Return.ok(
                RefreshTokenResponse(
                    access_token=result.value,
                    expires_in=int(self.tokens.access_ttl.total_seconds()),
                )
            )

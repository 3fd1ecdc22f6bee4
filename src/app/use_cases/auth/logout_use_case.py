"""
Logout Use Case

Revokes the presented access token through the token deny-list.
"""

from src.app.services.token_manager import BearerTokenManager
from src.domain.entities import BearerClaims
from src.libs.result import Result, Return
from .dtos import StatusResponse


class LogoutUseCase:
    """
    Use case for logging out.

    Business Rules:
    - The token id (jti) is deny-listed until the token expires
    - Validation rejects deny-listed tokens from then on
    """

    def __init__(self, tokens: BearerTokenManager):
        self.tokens = tokens

    async def execute(self, claims: BearerClaims) -> Result[StatusResponse]:
        revoked = await self.tokens.revoke(claims)
        return Return.ok(
            StatusResponse(
                status="logged_out" if revoked else "noop",
                message="Token has been revoked" if revoked else "Nothing to revoke",
            )
        )

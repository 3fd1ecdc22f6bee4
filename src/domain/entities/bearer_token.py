"""
BearerClaims

Verified content of a signed bearer token. Derived, never persisted.
"""

from datetime import datetime
from typing import Any, Dict

from pydantic import BaseModel, Field

from .enums import TokenKind


class BearerClaims(BaseModel):
    """Claims of a token whose signature has been verified"""

    subject: str
    kind: TokenKind
    token_id: str
    issued_at: datetime
    expires_at: datetime
    claims: Dict[str, Any] = Field(default_factory=dict)

    @property
    def user_id(self) -> str:
        return self.claims.get("user_id")

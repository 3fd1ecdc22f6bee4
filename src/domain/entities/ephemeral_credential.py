"""
EphemeralCredential

Short-lived single-use secret (OTP code or password reset token).
Not a table: lives in the TTL-bound credential store.
"""

from datetime import datetime
from typing import Any, Dict

from pydantic import BaseModel, Field

from .enums import CredentialKind


class EphemeralCredential(BaseModel):
    """
    Stored form of an issued secret.

    Business Rules:
    - Keyed by (kind, subject); issuing again replaces the previous one
    - Only the SHA-256 digest of the secret is stored
    - Valid iff now < expires_at and not yet redeemed
    """

    kind: CredentialKind
    subject: str
    secret_hash: str
    payload: Dict[str, Any] = Field(default_factory=dict)
    expires_at: datetime

    @property
    def key(self) -> str:
        return credential_key(self.kind, self.subject)

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


def credential_key(kind: CredentialKind, subject: str) -> str:
    """Store key for a (kind, subject) pair, e.g. ``otp:alice@example.com``"""
    return f"{kind.value}:{subject.lower()}"

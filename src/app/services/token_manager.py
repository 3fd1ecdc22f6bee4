"""
Bearer Token Manager

Stateless issuance, validation and refresh of HS256-signed JWTs.
Nothing is persisted at issue time; logout is supported through an
optional deny-list keyed by the token id (jti).
"""

import json
import logging
from datetime import timedelta
from typing import Any, Awaitable, Callable, Dict, Optional
from uuid import uuid4

from jose import jws, jwt
from jose.exceptions import JOSEError

from src.app.repositories.ephemeral_store import IEphemeralStore
from src.app.services.clock import Clock, from_epoch, to_epoch
from src.domain import errors
from src.domain.entities import BearerClaims, TokenKind
from src.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)

DEFAULT_ACCESS_TTL = timedelta(hours=24)
DEFAULT_REFRESH_TTL = timedelta(days=7)

RESERVED_CLAIMS = ("sub", "iat", "exp", "typ", "jti")

ClaimsLoader = Callable[[str], Awaitable[Optional[Dict[str, Any]]]]


def _denied_key(token_id: str) -> str:
    return f"denied-jti:{token_id}"


class BearerTokenManager:
    """
    Issues and validates signed bearer tokens.

    Business Rules:
    - Signature is verified before any claim is read
    - A token is valid iff the signature verifies and now < exp
    - The `typ` claim separates access from refresh tokens; each is
      rejected where the other is expected
    - Refresh re-derives claims from the current user record
    - The signing key is shared by every instance and read-only
    """

    def __init__(
        self,
        secret: str,
        clock: Clock,
        algorithm: str = "HS256",
        access_ttl: timedelta = DEFAULT_ACCESS_TTL,
        refresh_ttl: timedelta = DEFAULT_REFRESH_TTL,
        leeway: timedelta = timedelta(0),
        deny_list: Optional[IEphemeralStore] = None,
    ):
        self._secret = secret
        self.clock = clock
        self.algorithm = algorithm
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl
        self.leeway = leeway
        self.deny_list = deny_list

    def ttl(self, kind: TokenKind) -> timedelta:
        return self.access_ttl if kind == TokenKind.access else self.refresh_ttl

    def issue(self, subject: str, claims: Dict[str, Any], kind: TokenKind) -> str:
        """
        Sign a new token.

        Args:
            subject: Username, stored in `sub`
            claims: Custom claims (user_id, email, roles)
            kind: access or refresh

        Returns:
            Compact JWS string
        """
        issued_at = to_epoch(self.clock.now())
        payload = {k: v for k, v in claims.items() if k not in RESERVED_CLAIMS}
        payload.update(
            {
                "sub": subject,
                "iat": issued_at,
                "exp": issued_at + int(self.ttl(kind).total_seconds()),
                "typ": kind.value,
                "jti": uuid4().hex,
            }
        )
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def decode(self, token: str) -> Result[BearerClaims]:
        """
        Verify signature and expiry, without kind or deny-list checks.

        Errors:
            - MALFORMED: not a compact JWS, or claims missing/invalid
            - BAD_SIGNATURE: signature does not verify (or wrong alg)
            - EXPIRED: now >= exp (+ leeway)
        """
        try:
            jws.get_unverified_header(token)
        except (JOSEError, AttributeError, TypeError):
            return Return.err(Error(errors.MALFORMED, "Malformed token"))

        try:
            raw = jws.verify(token, self._secret, algorithms=[self.algorithm])
        except JOSEError:
            return Return.err(Error(errors.BAD_SIGNATURE, "Token signature is invalid"))

        # Only now is the payload trusted
        try:
            payload = json.loads(raw)
            claims = BearerClaims(
                subject=str(payload["sub"]),
                kind=TokenKind(payload["typ"]),
                token_id=str(payload["jti"]),
                issued_at=from_epoch(int(payload["iat"])),
                expires_at=from_epoch(int(payload["exp"])),
                claims={k: v for k, v in payload.items() if k not in RESERVED_CLAIMS},
            )
        except (ValueError, KeyError, TypeError):
            return Return.err(Error(errors.MALFORMED, "Malformed token claims"))

        if not self.clock.now() < claims.expires_at + self.leeway:
            return Return.err(Error(errors.EXPIRED, "Token has expired"))

        return Return.ok(claims)

    async def validate(
        self, token: str, expected_kind: TokenKind = TokenKind.access
    ) -> Result[BearerClaims]:
        """
        Full validation for a context that requires a given token kind.

        Args:
            token: Compact JWS string
            expected_kind: Kind required by the caller

        Returns:
            Result with verified claims, or MALFORMED / BAD_SIGNATURE /
            EXPIRED / INVALID (wrong kind or revoked)
        """
        result = self.decode(token)
        if result.is_err():
            logger.info(f"Token rejected: {result.error.code}")
            return result

        claims = result.value
        if claims.kind != expected_kind:
            logger.warning(
                f"Token kind mismatch for {claims.subject}: got {claims.kind.value}, "
                f"expected {expected_kind.value}"
            )
            return Return.err(Error(errors.INVALID, "Wrong token type"))

        if self.deny_list is not None:
            if await self.deny_list.get(_denied_key(claims.token_id)) is not None:
                logger.info(f"Revoked token presented for {claims.subject}")
                return Return.err(Error(errors.INVALID, "Token has been revoked"))

        return Return.ok(claims)

    async def refresh(self, refresh_token: str, load_claims: ClaimsLoader) -> Result[str]:
        """
        Exchange a refresh token for a fresh access token.

        Args:
            refresh_token: Token of kind refresh
            load_claims: Reads current claims for a subject; None if the
                subject may no longer authenticate

        Returns:
            Result with a new access token
        """
        result = await self.validate(refresh_token, expected_kind=TokenKind.refresh)
        if result.is_err():
            return result

        subject = result.value.subject
        claims = await load_claims(subject)
        if claims is None:
            logger.warning(f"Refresh refused, subject {subject} can no longer authenticate")
            return Return.err(Error(errors.INVALID, "Invalid refresh token"))

        return Return.ok(self.issue(subject, claims, TokenKind.access))

    async def revoke(self, claims: BearerClaims) -> bool:
        """
        Deny-list a token until its natural expiry.

        Returns:
            False if no deny-list is configured or the token already expired
        """
        if self.deny_list is None:
            return False
        remaining = claims.expires_at - self.clock.now()
        if remaining.total_seconds() <= 0:
            return False
        await self.deny_list.set(_denied_key(claims.token_id), claims.subject, remaining)
        return True

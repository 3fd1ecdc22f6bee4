"""
Credential Store

Issues and redeems short-lived single-use secrets: 6-digit OTP codes for
email verification and URL-safe password reset tokens.
"""

import hashlib
import hmac
import logging
import secrets
from datetime import timedelta
from typing import Any, Dict, Optional

from src.app.repositories.ephemeral_store import ConcurrentModification, IEphemeralStore
from src.app.services.clock import Clock
from src.domain import errors
from src.domain.entities import CredentialKind, EphemeralCredential, credential_key
from src.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)

DEFAULT_OTP_TTL = timedelta(minutes=5)
DEFAULT_RESET_TTL = timedelta(minutes=60)
DEFAULT_MAX_ATTEMPTS = 5


def hash_secret(secret: str) -> str:
    """SHA-256 hex digest; only digests are ever stored"""
    return hashlib.sha256(secret.encode()).hexdigest()


def generate_otp() -> str:
    """Uniform 6-digit code, zero padded (000000-999999)"""
    return f"{secrets.randbelow(1_000_000):06d}"


def generate_reset_token() -> str:
    """256-bit URL-safe token"""
    return secrets.token_urlsafe(32)


def _lookup_key(kind: CredentialKind, secret_hash: str) -> str:
    return f"lookup:{kind.value}:{secret_hash}"


def _attempts_key(key: str) -> str:
    return f"attempts:{key}"


class CredentialStore:
    """
    TTL-bound store of single-use secrets.

    Business Rules:
    - Only the newest secret per (kind, subject) is valid; issuing replaces
    - Redemption is an atomic compare-and-delete, so of two concurrent
      redemptions with the right secret exactly one succeeds
    - Secrets are compared in constant time on their SHA-256 digests
    - Every failure is reported as the same INVALID error; the cause
      (not_found / expired / mismatch / locked / conflict) is only logged
    - After max_attempts wrong guesses the secret is destroyed
    - Expiry is enforced at redemption time; purge_expired is housekeeping
    """

    def __init__(
        self,
        store: IEphemeralStore,
        clock: Clock,
        otp_ttl: timedelta = DEFAULT_OTP_TTL,
        reset_ttl: timedelta = DEFAULT_RESET_TTL,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ):
        self.store = store
        self.clock = clock
        self.otp_ttl = otp_ttl
        self.reset_ttl = reset_ttl
        self.max_attempts = max_attempts

    def default_ttl(self, kind: CredentialKind) -> timedelta:
        return self.otp_ttl if kind == CredentialKind.otp else self.reset_ttl

    async def issue(
        self,
        kind: CredentialKind,
        subject: str,
        payload: Optional[Dict[str, Any]] = None,
        ttl: Optional[timedelta] = None,
    ) -> str:
        """
        Issue a new secret for a subject, invalidating any previous one.

        Args:
            kind: otp or reset
            subject: Email (otp) or username (reset)
            payload: Data handed back on successful redemption
            ttl: Lifetime, defaults to the kind's configured TTL

        Returns:
            The plain secret (only its digest is stored)
        """
        ttl = ttl or self.default_ttl(kind)
        secret = generate_otp() if kind == CredentialKind.otp else generate_reset_token()
        secret_hash = hash_secret(secret)

        credential = EphemeralCredential(
            kind=kind,
            subject=subject,
            secret_hash=secret_hash,
            payload=payload or {},
            expires_at=self.clock.now() + ttl,
        )
        key = credential.key

        values = {key: credential.model_dump_json()}
        stale = [_attempts_key(key)]
        if kind == CredentialKind.reset:
            values[_lookup_key(kind, secret_hash)] = subject
            previous = await self._load(key)
            if previous is not None:
                stale.append(_lookup_key(kind, previous.secret_hash))

        await self.store.set_many(values, ttl, delete=stale)
        logger.info(f"Issued {kind.value} credential for {subject} (ttl={int(ttl.total_seconds())}s)")
        return secret

    async def redeem(
        self, kind: CredentialKind, subject: str, supplied_secret: str
    ) -> Result[Dict[str, Any]]:
        """
        Redeem a secret for a known subject.

        Args:
            kind: otp or reset
            subject: Email (otp) or username (reset)
            supplied_secret: What the user typed / clicked

        Returns:
            Result with the payload bound at issue time, or INVALID
        """
        now = self.clock.now()
        key = credential_key(kind, subject)
        supplied_hash = hash_secret(supplied_secret or "")

        def matches(raw: str) -> bool:
            credential = EphemeralCredential.model_validate_json(raw)
            same = hmac.compare_digest(credential.secret_hash, supplied_hash)
            return same and not credential.is_expired(now)

        try:
            raw, taken = await self.store.take_if(
                key,
                matches,
                also_delete=[_attempts_key(key), _lookup_key(kind, supplied_hash)],
            )
        except ConcurrentModification:
            return self._reject(kind, subject, "conflict")

        if raw is None:
            return self._reject(kind, subject, "not_found")

        credential = EphemeralCredential.model_validate_json(raw)
        if taken:
            logger.info(f"Redeemed {kind.value} credential for {subject}")
            return Return.ok(credential.payload)

        if credential.is_expired(now):
            await self.store.delete(key, _lookup_key(kind, credential.secret_hash))
            return self._reject(kind, subject, "expired")

        attempts = await self.store.incr(
            _attempts_key(key), ttl=credential.expires_at - now
        )
        if attempts >= self.max_attempts:
            await self.store.delete(
                key, _attempts_key(key), _lookup_key(kind, credential.secret_hash)
            )
            return self._reject(kind, subject, f"locked after {attempts} failed attempts")
        return self._reject(kind, subject, f"mismatch ({attempts}/{self.max_attempts})")

    async def redeem_token(self, kind: CredentialKind, token: str) -> Result[Dict[str, Any]]:
        """
        Redeem a bare token (reset links carry only the token).

        Resolves the subject the token was issued for, then redeems
        atomically against that subject's current credential.
        """
        subject = await self.store.get(_lookup_key(kind, hash_secret(token or "")))
        if subject is None:
            return self._reject(kind, "<unknown>", "not_found")
        return await self.redeem(kind, subject, token)

    async def purge_expired(self) -> int:
        return await self.store.purge_expired()

    async def _load(self, key: str) -> Optional[EphemeralCredential]:
        raw = await self.store.get(key)
        if raw is None:
            return None
        return EphemeralCredential.model_validate_json(raw)

    def _reject(self, kind: CredentialKind, subject: str, cause: str) -> Result:
        logger.warning(f"Rejected {kind.value} redemption for {subject}: {cause}")
        return Return.err(Error(errors.INVALID, errors.INVALID_CREDENTIAL_MESSAGE))

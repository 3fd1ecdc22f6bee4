"""
Ephemeral store backends.

InMemoryEphemeralStore serves single-process deployments and tests;
RedisEphemeralStore shares credentials and the token deny-list across
instances.
"""

import logging
import threading
from datetime import datetime, timedelta
from typing import Callable, Dict, Mapping, Optional, Sequence, Tuple

from redis.asyncio import Redis
from redis.exceptions import RedisError, WatchError

from src.app.repositories.ephemeral_store import ConcurrentModification, IEphemeralStore
from src.app.services.clock import Clock
from src.domain.errors import RepositoryUnavailable

logger = logging.getLogger(__name__)


class InMemoryEphemeralStore(IEphemeralStore):
    """
    Dict-backed store with lazy expiry.

    Expiry is judged against the injected clock. All operations hold one
    lock, so every compound operation is atomic.
    """

    def __init__(self, clock: Clock):
        self.clock = clock
        self._lock = threading.Lock()
        self._entries: Dict[str, Tuple[str, datetime]] = {}

    def _live(self, key: str, now: datetime) -> Optional[str]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if now >= expires_at:
            del self._entries[key]
            return None
        return value

    async def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._live(key, self.clock.now())

    async def set_many(
        self,
        values: Mapping[str, str],
        ttl: timedelta,
        delete: Sequence[str] = (),
    ) -> None:
        with self._lock:
            expires_at = self.clock.now() + ttl
            for key in delete:
                self._entries.pop(key, None)
            for key, value in values.items():
                self._entries[key] = (value, expires_at)

    async def delete(self, *keys: str) -> int:
        with self._lock:
            now = self.clock.now()
            removed = 0
            for key in keys:
                if self._live(key, now) is not None:
                    removed += 1
                self._entries.pop(key, None)
            return removed

    async def take_if(
        self,
        key: str,
        predicate: Callable[[str], bool],
        also_delete: Sequence[str] = (),
    ) -> Tuple[Optional[str], bool]:
        with self._lock:
            value = self._live(key, self.clock.now())
            if value is None:
                return None, False
            if not predicate(value):
                return value, False
            self._entries.pop(key, None)
            for other in also_delete:
                self._entries.pop(other, None)
            return value, True

    async def incr(self, key: str, ttl: timedelta) -> int:
        with self._lock:
            now = self.clock.now()
            current = self._live(key, now)
            if current is None:
                self._entries[key] = ("1", now + ttl)
                return 1
            count = int(current) + 1
            self._entries[key] = (str(count), self._entries[key][1])
            return count

    async def purge_expired(self) -> int:
        with self._lock:
            now = self.clock.now()
            expired = [k for k, (_, exp) in self._entries.items() if now >= exp]
            for key in expired:
                del self._entries[key]
            return len(expired)


def _ttl_ms(ttl: timedelta) -> int:
    # Redis rejects a zero or negative expiry
    return max(1, int(ttl.total_seconds() * 1000))


class RedisEphemeralStore(IEphemeralStore):
    """
    Redis-backed store.

    TTLs are native key expiry. take_if uses WATCH/MULTI so the value is
    deleted only if nobody touched it since it was read.
    """

    def __init__(self, client: Redis, prefix: str = "ephemeral:"):
        self.client = client
        self.prefix = prefix

    def _k(self, key: str) -> str:
        return f"{self.prefix}{key}"

    async def get(self, key: str) -> Optional[str]:
        try:
            value = await self.client.get(self._k(key))
        except RedisError as exc:
            logger.error(f"Redis GET failed: {exc}")
            raise RepositoryUnavailable(str(exc)) from exc
        return _text(value)

    async def set_many(
        self,
        values: Mapping[str, str],
        ttl: timedelta,
        delete: Sequence[str] = (),
    ) -> None:
        try:
            async with self.client.pipeline(transaction=True) as pipe:
                if delete:
                    pipe.delete(*[self._k(k) for k in delete])
                for key, value in values.items():
                    pipe.set(self._k(key), value, px=_ttl_ms(ttl))
                await pipe.execute()
        except RedisError as exc:
            logger.error(f"Redis SET failed: {exc}")
            raise RepositoryUnavailable(str(exc)) from exc

    async def delete(self, *keys: str) -> int:
        if not keys:
            return 0
        try:
            return await self.client.delete(*[self._k(k) for k in keys])
        except RedisError as exc:
            logger.error(f"Redis DEL failed: {exc}")
            raise RepositoryUnavailable(str(exc)) from exc

    async def take_if(
        self,
        key: str,
        predicate: Callable[[str], bool],
        also_delete: Sequence[str] = (),
    ) -> Tuple[Optional[str], bool]:
        full_key = self._k(key)
        try:
            async with self.client.pipeline(transaction=True) as pipe:
                await pipe.watch(full_key)
                value = _text(await pipe.get(full_key))
                if value is None or not predicate(value):
                    await pipe.unwatch()
                    return value, False

                pipe.multi()
                pipe.delete(full_key, *[self._k(k) for k in also_delete])
                await pipe.execute()
                return value, True
        except WatchError as exc:
            raise ConcurrentModification(key) from exc
        except RedisError as exc:
            logger.error(f"Redis take failed: {exc}")
            raise RepositoryUnavailable(str(exc)) from exc

    async def incr(self, key: str, ttl: timedelta) -> int:
        full_key = self._k(key)
        try:
            async with self.client.pipeline(transaction=True) as pipe:
                pipe.incr(full_key)
                # NX: keep the expiry of an existing counter
                pipe.pexpire(full_key, _ttl_ms(ttl), nx=True)
                count, _ = await pipe.execute()
        except RedisError as exc:
            logger.error(f"Redis INCR failed: {exc}")
            raise RepositoryUnavailable(str(exc)) from exc
        return int(count)

    async def purge_expired(self) -> int:
        # Redis evicts expired keys itself
        return 0


def _text(value) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bytes):
        return value.decode()
    return value

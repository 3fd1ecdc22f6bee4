from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Callable, Mapping, Optional, Sequence, Tuple


class ConcurrentModification(Exception):
    """Another writer touched the key between read and delete"""


class IEphemeralStore(ABC):
    """
    TTL-bound key/value store interface - application layer

    Backs OTP codes, password reset tokens, attempt counters and the
    bearer token deny-list. Values are strings (JSON for structured data).
    Entries past their TTL must never be returned.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Get a live value, or None if missing or expired"""
        pass

    @abstractmethod
    async def set_many(
        self,
        values: Mapping[str, str],
        ttl: timedelta,
        delete: Sequence[str] = (),
    ) -> None:
        """Atomically write values (all with the same TTL) and delete other keys"""
        pass

    async def set(self, key: str, value: str, ttl: timedelta) -> None:
        """Write one value with a TTL"""
        await self.set_many({key: value}, ttl)

    @abstractmethod
    async def delete(self, *keys: str) -> int:
        """Delete keys, returning how many existed"""
        pass

    @abstractmethod
    async def take_if(
        self,
        key: str,
        predicate: Callable[[str], bool],
        also_delete: Sequence[str] = (),
    ) -> Tuple[Optional[str], bool]:
        """
        Atomic read-check-delete.

        Reads the value under key; when predicate(value) is true, deletes key
        and also_delete in the same step.

        Returns:
            (value, taken) - value is None when the key is missing/expired

        Raises:
            ConcurrentModification: the key changed while being taken
        """
        pass

    @abstractmethod
    async def incr(self, key: str, ttl: timedelta) -> int:
        """Increment a counter; the TTL is set when the counter is created"""
        pass

    @abstractmethod
    async def purge_expired(self) -> int:
        """Drop expired entries, returning how many were removed"""
        pass

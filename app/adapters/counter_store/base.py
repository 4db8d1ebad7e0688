"""Counter store interface.

Rate limiting and search caching both sit on this abstraction, so the
backing store (Redis in production, in-process for tests) can be swapped
without touching the services.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class AbstractCounterStore(ABC):
    """Key/value store with atomic increment and per-key expiry.

    Every operation is atomic for a single key. Operational failures
    (connection refused, timeouts) raise StoreUnavailableAppError.
    """

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the value stored under key, or None when absent/expired."""
        raise NotImplementedError

    @abstractmethod
    async def set_with_ttl(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store value under key, expiring after ttl_seconds."""
        raise NotImplementedError

    @abstractmethod
    async def increment(self, key: str) -> int:
        """Atomically add 1 to the integer under key and return the new value.

        A missing key is treated as 0, so the first increment returns 1.
        The increment never sets or refreshes an expiry.
        """
        raise NotImplementedError

    @abstractmethod
    async def expire(self, key: str, ttl_seconds: int) -> None:
        """Set the key to expire after ttl_seconds."""
        raise NotImplementedError

    @abstractmethod
    async def ping(self) -> bool:
        """Return True when the store is reachable. Never raises."""
        raise NotImplementedError

    async def close(self) -> None:
        """Release connections held by the store."""
        return None

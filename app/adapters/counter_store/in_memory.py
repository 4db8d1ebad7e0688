"""In-memory counter store.

Notes:
- Per-process only: running multiple workers gives each its own counters,
  so limits and cache entries are not shared. Use Redis in production.
- Thread-safe: uses a lock around shared state.
- Mirrors Redis semantics: INCR on a missing key starts at 1 and never
  touches the expiry; EXPIRE on a missing key is a no-op.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable

from app.adapters.counter_store.base import AbstractCounterStore


@dataclass
class _Entry:
    value: str
    expires_at: float | None


class InMemoryCounterStore(AbstractCounterStore):
    """Dictionary-backed counter store with lazy expiry.

    Attributes:
        clock: Time source returning UNIX time in seconds.
    """

    def __init__(self, *, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._lock = threading.RLock()
        self._entries: dict[str, _Entry] = {}

    def __repr__(self) -> str:  # pragma: no cover - representation only
        return f"InMemoryCounterStore(size={len(self._entries)})"

    def _live_entry_locked(self, key: str) -> _Entry | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expires_at is not None and self._clock() >= entry.expires_at:
            self._entries.pop(key, None)
            return None
        return entry

    async def get(self, key: str) -> str | None:
        with self._lock:
            entry = self._live_entry_locked(key)
            return entry.value if entry else None

    async def set_with_ttl(self, key: str, value: str, ttl_seconds: int) -> None:
        if ttl_seconds < 1:
            raise ValueError("ttl_seconds must be >= 1")
        with self._lock:
            self._entries[key] = _Entry(value=value, expires_at=self._clock() + ttl_seconds)

    async def increment(self, key: str) -> int:
        with self._lock:
            entry = self._live_entry_locked(key)
            if entry is None:
                entry = _Entry(value="0", expires_at=None)
                self._entries[key] = entry
            new_value = int(entry.value) + 1
            entry.value = str(new_value)
            return new_value

    async def expire(self, key: str, ttl_seconds: int) -> None:
        with self._lock:
            entry = self._live_entry_locked(key)
            if entry is not None:
                entry.expires_at = self._clock() + ttl_seconds

    async def ping(self) -> bool:
        return True

    def ttl(self, key: str) -> float | None:
        """Seconds until key expires; None when absent or without expiry."""

        with self._lock:
            entry = self._live_entry_locked(key)
            if entry is None or entry.expires_at is None:
                return None
            return entry.expires_at - self._clock()

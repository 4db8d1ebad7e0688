"""Fixed-window rate limiter on top of a shared counter store.

Notes:
- Shared across workers and instances through the counter store.
- The first request of a window arms the counter's expiry; the window ends
  when that key expires and the next request starts a fresh count.
- INCR and EXPIRE are two separate calls. If the process dies or the store
  fails between them, the counter is left without expiry and keeps counting
  until it is removed by hand.
"""

from __future__ import annotations

import logging

from app.adapters.counter_store.base import AbstractCounterStore
from app.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from app.core.errors import StoreUnavailableAppError

logger = logging.getLogger(__name__)

RATE_LIMIT_NAMESPACE = "ratelimit"


def build_rate_limit_key(tenant_id: str) -> str:
    """Counter key for a tenant's current window."""

    return f"{RATE_LIMIT_NAMESPACE}:{tenant_id}"


class FixedWindowRateLimiter(AbstractRateLimiter):
    """Per-key fixed-window counter (e.g., 20 requests per 60 seconds).

    Fails open: when the counter store cannot be reached the request is
    admitted and the failure is logged.
    """

    def __init__(
        self,
        store: AbstractCounterStore,
        *,
        limit: int,
        window_seconds: int,
    ) -> None:
        """Initialize the rate limiter.

        Args:
            store: Counter store holding the per-key counters.
            limit: Maximum number of allowed requests per window.
            window_seconds: Size of the fixed window in seconds.

        Raises:
            ValueError: If limit or window_seconds are invalid.
        """
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if window_seconds < 1:
            raise ValueError("window_seconds must be >= 1")

        self._store = store
        self._limit = limit
        self._window_seconds = window_seconds

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def window_seconds(self) -> int:
        return self._window_seconds

    async def admit(self, key: str) -> RateLimitResult:
        """Count one request for key and compare against the limit.

        Args:
            key: Tenant identifier owning the budget.

        Returns:
            RateLimitResult with allowance decision and metadata.

        Raises:
            ValueError: If key is empty.
        """
        if not key:
            raise ValueError("key must be a non-empty string")

        counter_key = build_rate_limit_key(key)

        try:
            count = await self._store.increment(counter_key)
        except StoreUnavailableAppError as exc:
            logger.warning(
                "rate_limit.store_unavailable",
                extra={
                    "tenant_id": key,
                    "error_code": exc.code,
                    "action": "fail_open",
                },
            )
            return RateLimitResult(
                allowed=True,
                limit=self._limit,
                count=0,
                remaining=self._limit,
                degraded=True,
            )

        if count == 1:
            try:
                await self._store.expire(counter_key, self._window_seconds)
            except StoreUnavailableAppError as exc:
                logger.error(
                    "rate_limit.expire_failed",
                    extra={
                        "tenant_id": key,
                        "error_code": exc.code,
                        "window_s": self._window_seconds,
                    },
                )

        return RateLimitResult(
            allowed=count <= self._limit,
            limit=self._limit,
            count=count,
            remaining=max(0, self._limit - count),
        )

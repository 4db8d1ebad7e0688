"""Redis counter store adapter."""

from __future__ import annotations

import logging

from redis.asyncio import Redis
from redis.asyncio.retry import Retry
from redis.backoff import NoBackoff
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError
from redis.exceptions import TimeoutError as RedisTimeoutError

from app.adapters.counter_store.base import AbstractCounterStore
from app.core.errors import StoreUnavailableAppError

logger = logging.getLogger(__name__)


class RedisCounterStore(AbstractCounterStore):
    """Counter store backed by Redis.

    Uses the official redis-py asyncio client. Each call is bounded by the
    socket timeout and retried at most ``retry_attempts`` times on
    connection/timeout errors; anything still failing is raised as
    StoreUnavailableAppError.
    """

    def __init__(
        self,
        *,
        host: str = "localhost",
        port: int = 6379,
        db: int = 0,
        socket_timeout_seconds: float = 2.0,
        retry_attempts: int = 1,
        client: Redis | None = None,
    ) -> None:
        """Initialize the Redis client.

        Args:
            host: Redis host.
            port: Redis port.
            db: Logical database number.
            socket_timeout_seconds: Connect and read timeout per call.
            retry_attempts: Retries on connection/timeout errors.
            client: Pre-built client (tests inject a mock here).
        """
        self._client = client or Redis(
            host=host,
            port=port,
            db=db,
            decode_responses=True,
            socket_timeout=socket_timeout_seconds,
            socket_connect_timeout=socket_timeout_seconds,
            retry=Retry(NoBackoff(), retry_attempts),
            retry_on_error=[RedisConnectionError, RedisTimeoutError],
        )

    @staticmethod
    def _unavailable(operation: str, exc: Exception) -> StoreUnavailableAppError:
        return StoreUnavailableAppError(
            code="counter_store_unavailable",
            message="Counter store is unavailable",
            details={
                "store": "redis",
                "context": {"operation": operation, "error_type": type(exc).__name__},
            },
        )

    async def get(self, key: str) -> str | None:
        try:
            return await self._client.get(key)
        except RedisError as exc:
            raise self._unavailable("get", exc) from exc

    async def set_with_ttl(self, key: str, value: str, ttl_seconds: int) -> None:
        try:
            await self._client.set(key, value, ex=ttl_seconds)
        except RedisError as exc:
            raise self._unavailable("set", exc) from exc

    async def increment(self, key: str) -> int:
        try:
            return int(await self._client.incr(key))
        except RedisError as exc:
            raise self._unavailable("incr", exc) from exc

    async def expire(self, key: str, ttl_seconds: int) -> None:
        try:
            await self._client.expire(key, ttl_seconds)
        except RedisError as exc:
            raise self._unavailable("expire", exc) from exc

    async def ping(self) -> bool:
        try:
            return bool(await self._client.ping())
        except RedisError as exc:
            logger.warning(
                "counter_store.ping_failed",
                extra={"store": "redis", "error_type": type(exc).__name__},
            )
            return False

    async def close(self) -> None:
        await self._client.aclose()

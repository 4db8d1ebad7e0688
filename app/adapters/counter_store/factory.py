"""Factory pattern for creating counter store instances."""

from app.adapters.counter_store.base import AbstractCounterStore
from app.adapters.counter_store.in_memory import InMemoryCounterStore
from app.adapters.counter_store.redis_store import RedisCounterStore
from app.core.config import RedisSettings, settings
from app.core.errors import ValidationAppError


def create_counter_store(redis_settings: RedisSettings | None = None) -> AbstractCounterStore:
    """Instantiate the counter store selected by configuration.

    Args:
        redis_settings: Optional settings override; defaults to global settings.

    Returns:
        AbstractCounterStore: Configured counter store.

    Raises:
        ValidationAppError: If the configured backend is unknown.
    """
    cfg = redis_settings or settings.redis
    backend = cfg.backend.lower()

    if backend == "redis":
        return RedisCounterStore(
            host=cfg.host,
            port=cfg.port,
            db=cfg.db,
            socket_timeout_seconds=cfg.socket_timeout_seconds,
            retry_attempts=cfg.retry_attempts,
        )

    if backend == "memory":
        return InMemoryCounterStore()

    raise ValidationAppError(
        code="counter_store_unknown_backend",
        message=(
            f"Unknown counter store backend: '{backend}'. Supported backends: redis, memory"
        ),
    )

"""Unit tests for the fixed-window rate limiter adapter."""

import logging

import pytest

from app.adapters.counter_store.in_memory import InMemoryCounterStore
from app.adapters.rate_limit.fixed_window import (
    FixedWindowRateLimiter,
    build_rate_limit_key,
)
from app.core.errors import StoreUnavailableAppError


@pytest.mark.asyncio
async def test_allows_up_to_limit_in_same_window(counter_store: InMemoryCounterStore) -> None:
    limiter = FixedWindowRateLimiter(counter_store, limit=3, window_seconds=60)

    assert (await limiter.admit("acme")).allowed is True
    assert (await limiter.admit("acme")).allowed is True
    result = await limiter.admit("acme")
    assert result.allowed is True
    assert result.count == 3
    assert result.remaining == 0


@pytest.mark.asyncio
async def test_blocks_when_over_limit(counter_store: InMemoryCounterStore) -> None:
    limiter = FixedWindowRateLimiter(counter_store, limit=2, window_seconds=60)

    assert (await limiter.admit("acme")).allowed is True
    assert (await limiter.admit("acme")).allowed is True

    blocked = await limiter.admit("acme")
    assert blocked.allowed is False
    assert blocked.count == 3
    assert blocked.remaining == 0
    assert blocked.limit == 2


@pytest.mark.asyncio
async def test_rejections_keep_counting(counter_store: InMemoryCounterStore) -> None:
    limiter = FixedWindowRateLimiter(counter_store, limit=1, window_seconds=60)

    await limiter.admit("acme")
    await limiter.admit("acme")
    result = await limiter.admit("acme")

    assert result.count == 3
    assert result.remaining == 0


@pytest.mark.asyncio
async def test_first_request_arms_window_expiry(counter_store: InMemoryCounterStore) -> None:
    limiter = FixedWindowRateLimiter(counter_store, limit=5, window_seconds=60)

    await limiter.admit("acme")

    assert counter_store.ttl(build_rate_limit_key("acme")) == pytest.approx(60)


@pytest.mark.asyncio
async def test_later_requests_do_not_extend_window(fake_clock, counter_store) -> None:
    limiter = FixedWindowRateLimiter(counter_store, limit=5, window_seconds=60)

    await limiter.admit("acme")
    fake_clock.advance(30)
    await limiter.admit("acme")

    assert counter_store.ttl(build_rate_limit_key("acme")) == pytest.approx(30)


@pytest.mark.asyncio
async def test_resets_on_new_window(fake_clock, counter_store) -> None:
    limiter = FixedWindowRateLimiter(counter_store, limit=1, window_seconds=10)

    assert (await limiter.admit("acme")).allowed is True
    assert (await limiter.admit("acme")).allowed is False
    assert (await limiter.admit("acme")).allowed is False

    fake_clock.advance(10)
    result = await limiter.admit("acme")
    assert result.allowed is True
    assert result.count == 1


@pytest.mark.asyncio
async def test_isolated_by_tenant(counter_store: InMemoryCounterStore) -> None:
    limiter = FixedWindowRateLimiter(counter_store, limit=1, window_seconds=60)

    assert (await limiter.admit("acme")).allowed is True
    assert (await limiter.admit("acme")).allowed is False

    assert (await limiter.admit("globex")).allowed is True


@pytest.mark.asyncio
async def test_fails_open_when_counter_store_unavailable(
    unavailable_counter_store, caplog: pytest.LogCaptureFixture
) -> None:
    limiter = FixedWindowRateLimiter(unavailable_counter_store, limit=1, window_seconds=60)

    with caplog.at_level(logging.WARNING):
        results = [await limiter.admit("acme") for _ in range(5)]

    assert all(result.allowed for result in results)
    assert all(result.degraded for result in results)
    assert results[0].remaining == 1
    assert "rate_limit.store_unavailable" in caplog.text


@pytest.mark.asyncio
async def test_enforces_count_when_expire_fails(caplog: pytest.LogCaptureFixture) -> None:
    class ExpireFailingStore(InMemoryCounterStore):
        async def expire(self, key: str, ttl_seconds: int) -> None:
            raise StoreUnavailableAppError(code="counter_store_unavailable", message="down")

    store = ExpireFailingStore()
    limiter = FixedWindowRateLimiter(store, limit=1, window_seconds=60)

    with caplog.at_level(logging.ERROR):
        first = await limiter.admit("acme")
    second = await limiter.admit("acme")

    assert first.allowed is True
    assert first.degraded is False
    assert second.allowed is False
    # The counter is left without expiry
    assert store.ttl(build_rate_limit_key("acme")) is None
    assert "rate_limit.expire_failed" in caplog.text


@pytest.mark.parametrize(
    "kwargs",
    [
        {"limit": 0, "window_seconds": 60},
        {"limit": 1, "window_seconds": 0},
    ],
)
def test_invalid_constructor_args(counter_store, kwargs: dict) -> None:
    with pytest.raises(ValueError):
        FixedWindowRateLimiter(counter_store, **kwargs)


@pytest.mark.asyncio
async def test_invalid_admit_args(counter_store) -> None:
    limiter = FixedWindowRateLimiter(counter_store, limit=1, window_seconds=60)

    with pytest.raises(ValueError):
        await limiter.admit("")


def test_rate_limit_key_is_namespaced() -> None:
    assert build_rate_limit_key("acme") == "ratelimit:acme"

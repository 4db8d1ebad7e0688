"""Pytest configuration and fixtures shared across all test modules.

This file is automatically loaded by pytest before running any tests.
It points both stores at their in-memory backends so no test needs a
running Redis or Elasticsearch.
"""

import os

# CRITICAL: Set this before any imports that might load settings
os.environ["APP_ENV"] = "testing"
os.environ.setdefault("REDIS_BACKEND", "memory")
os.environ.setdefault("ELASTICSEARCH_BACKEND", "memory")
os.environ.setdefault("APP_RATE_LIMIT_REQUESTS", "20")
os.environ.setdefault("APP_RATE_LIMIT_WINDOW_SECONDS", "60")
os.environ.setdefault("APP_SEARCH_CACHE_TTL_SECONDS", "60")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from typing import Any, Iterator

import pytest
from fastapi.testclient import TestClient

from app.adapters.counter_store.base import AbstractCounterStore
from app.adapters.counter_store.in_memory import InMemoryCounterStore
from app.adapters.document_store.base import AbstractDocumentStore
from app.adapters.document_store.in_memory import InMemoryDocumentStore
from app.core.app_factory import create_app
from app.core.errors import StoreUnavailableAppError


class FakeClock:
    """Deterministic clock used to test expiration logic."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.current = start

    def time(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds


def _counter_down() -> StoreUnavailableAppError:
    return StoreUnavailableAppError(
        code="counter_store_unavailable",
        message="Counter store is unavailable",
    )


class UnavailableCounterStore(AbstractCounterStore):
    """Counter store whose every call fails like an unreachable Redis."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    async def get(self, key: str) -> str | None:
        self.calls.append("get")
        raise _counter_down()

    async def set_with_ttl(self, key: str, value: str, ttl_seconds: int) -> None:
        self.calls.append("set_with_ttl")
        raise _counter_down()

    async def increment(self, key: str) -> int:
        self.calls.append("increment")
        raise _counter_down()

    async def expire(self, key: str, ttl_seconds: int) -> None:
        self.calls.append("expire")
        raise _counter_down()

    async def ping(self) -> bool:
        return False


class UnavailableDocumentStore(AbstractDocumentStore):
    """Document store whose every call fails like an unreachable cluster."""

    def _down(self) -> StoreUnavailableAppError:
        return StoreUnavailableAppError(
            code="store_unavailable",
            message="Document store is unavailable",
            details={"store": "elasticsearch"},
        )

    async def create(
        self,
        document_id: str,
        document: dict[str, Any],
        *,
        wait_for_visibility: bool = True,
    ) -> None:
        raise self._down()

    async def get_by_id(self, document_id: str) -> dict[str, Any] | None:
        raise self._down()

    async def delete_by_id(self, document_id: str) -> bool:
        raise self._down()

    async def query(self, tenant_id: str, text: str) -> list[dict[str, Any]]:
        raise self._down()

    async def ping(self) -> bool:
        return False

    async def ensure_index(self) -> None:
        raise self._down()


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def counter_store(fake_clock: FakeClock) -> InMemoryCounterStore:
    return InMemoryCounterStore(clock=fake_clock.time)


@pytest.fixture
def document_store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def unavailable_counter_store() -> UnavailableCounterStore:
    return UnavailableCounterStore()


@pytest.fixture
def unavailable_document_store() -> UnavailableDocumentStore:
    return UnavailableDocumentStore()


@pytest.fixture
def client(
    counter_store: InMemoryCounterStore,
    document_store: InMemoryDocumentStore,
) -> Iterator[TestClient]:
    """Test client over a fresh app with isolated in-memory stores."""
    app = create_app(counter_store=counter_store, document_store=document_store)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def acme_headers() -> dict[str, str]:
    return {"X-Tenant-ID": "acme"}

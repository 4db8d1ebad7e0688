"""Cache-aside search over the tenant-scoped document guard.

Per request: look the (tenant, query) pair up in the cache; on a hit return
the cached results tagged "cache", otherwise run the live query, store the
serialized results with a fixed TTL and return them tagged "store".

Writes and deletes never invalidate cached results: a search may serve
results up to one TTL old.
"""

from __future__ import annotations

import hashlib
import logging

from pydantic import TypeAdapter, ValidationError

from app.adapters.counter_store.base import AbstractCounterStore
from app.core.errors import StoreUnavailableAppError
from app.schemas.document import Document, SearchResponse
from app.services.document_guard import TenantDocumentGuard

logger = logging.getLogger(__name__)

SEARCH_CACHE_NAMESPACE = "search"

_RESULTS_ADAPTER = TypeAdapter(list[Document])


def _digest(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def build_search_cache_key(tenant_id: str, query_text: str) -> str:
    """Build the cache key for a tenant's query.

    Tenant and raw query text are hashed separately into fixed-width hex
    components, so no (tenant, query) pair can produce another pair's key.
    The query text is not normalized: "Alpha" and "alpha " are distinct
    entries.

    Args:
        tenant_id: Tenant identifier.
        query_text: Raw query text as supplied.

    Returns:
        Namespaced cache key.
    """

    return f"{SEARCH_CACHE_NAMESPACE}:{_digest(tenant_id)}:{_digest(query_text)}"


class SearchCoordinator:
    """Serve search results from the cache when possible.

    Caching is best effort: cache read failures fall through to a live
    query and cache write failures are logged and ignored.
    """

    def __init__(
        self,
        guard: TenantDocumentGuard,
        cache: AbstractCounterStore,
        *,
        ttl_seconds: int = 60,
    ) -> None:
        """Initialize the coordinator.

        Args:
            guard: Tenant-scoped document access.
            cache: Store used for cached result payloads.
            ttl_seconds: Lifetime of a cached result set.
        """
        if ttl_seconds < 1:
            raise ValueError("ttl_seconds must be >= 1")

        self._guard = guard
        self._cache = cache
        self._ttl_seconds = ttl_seconds

    async def search(self, tenant_id: str, query_text: str) -> SearchResponse:
        """Run a tenant-scoped search through the cache.

        Args:
            tenant_id: Tenant identifier.
            query_text: Raw query text.

        Returns:
            SearchResponse tagged with its provenance.

        Raises:
            StoreUnavailableAppError: If the live query fails.
        """
        cache_key = build_search_cache_key(tenant_id, query_text)

        cached = await self._read_cache(cache_key)
        if cached is not None:
            logger.info("search.cache_hit", extra={"cache_key": cache_key[:23]})
            return SearchResponse(source="cache", results=cached)

        logger.info("search.cache_miss", extra={"cache_key": cache_key[:23]})
        results = await self._guard.search(tenant_id, query_text)
        await self._populate_cache(cache_key, results)
        return SearchResponse(source="store", results=results)

    async def _read_cache(self, cache_key: str) -> list[Document] | None:
        try:
            payload = await self._cache.get(cache_key)
        except StoreUnavailableAppError as exc:
            logger.warning(
                "search.cache_read_failed",
                extra={"cache_key": cache_key[:23], "error_code": exc.code},
            )
            return None

        if payload is None:
            return None

        try:
            return _RESULTS_ADAPTER.validate_json(payload)
        except ValidationError:
            logger.warning(
                "search.cache_payload_invalid",
                extra={"cache_key": cache_key[:23]},
            )
            return None

    async def _populate_cache(self, cache_key: str, results: list[Document]) -> None:
        payload = _RESULTS_ADAPTER.dump_json(results, by_alias=True).decode("utf-8")
        try:
            await self._cache.set_with_ttl(cache_key, payload, self._ttl_seconds)
        except StoreUnavailableAppError as exc:
            logger.warning(
                "search.cache_write_failed",
                extra={"cache_key": cache_key[:23], "error_code": exc.code},
            )
            return

        logger.debug(
            "search.cache_set",
            extra={
                "cache_key": cache_key[:23],
                "result_count": len(results),
                "ttl_s": self._ttl_seconds,
            },
        )

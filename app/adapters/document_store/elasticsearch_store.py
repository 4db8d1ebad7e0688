"""Elasticsearch document store adapter."""

from __future__ import annotations

import logging
from typing import Any

from elasticsearch import ApiError, AsyncElasticsearch, NotFoundError, TransportError

from app.adapters.document_store.base import AbstractDocumentStore
from app.core.errors import StoreUnavailableAppError

logger = logging.getLogger(__name__)

INDEX_MAPPINGS: dict[str, Any] = {
    "properties": {
        "tenantId": {"type": "keyword"},
        "title": {"type": "text"},
        "content": {"type": "text"},
        "createdAt": {"type": "date"},
    }
}


class ElasticsearchDocumentStore(AbstractDocumentStore):
    """Client for a single shared Elasticsearch index.

    Uses the official Elasticsearch Python client with async support.
    """

    def __init__(
        self,
        *,
        node: str = "http://localhost:9200",
        index: str = "documents",
        request_timeout_seconds: float = 10.0,
        max_retries: int = 1,
        search_size: int = 10,
        client: AsyncElasticsearch | None = None,
    ) -> None:
        """Initialize the async Elasticsearch client.

        Args:
            node: Elasticsearch node URL.
            index: Index holding every tenant's documents.
            request_timeout_seconds: Timeout applied to every request.
            max_retries: Transport retries on connection errors and timeouts.
            search_size: Maximum number of hits per search.
            client: Pre-built client (tests inject a mock here).
        """
        self.client = client or AsyncElasticsearch(
            node,
            request_timeout=request_timeout_seconds,
            max_retries=max_retries,
            retry_on_timeout=max_retries > 0,
        )
        self.index = index
        self.search_size = search_size

    def _unavailable(self, operation: str, exc: Exception) -> StoreUnavailableAppError:
        logger.error(
            "document_store.request_failed",
            extra={
                "store": "elasticsearch",
                "operation": operation,
                "index": self.index,
                "error_type": type(exc).__name__,
                "error_msg": str(exc),
            },
        )
        return StoreUnavailableAppError(
            code="store_unavailable",
            message="Document store is unavailable",
            details={"store": "elasticsearch"},
        )

    async def ensure_index(self) -> None:
        try:
            exists = await self.client.indices.exists(index=self.index)
            if not exists:
                await self.client.indices.create(index=self.index, mappings=INDEX_MAPPINGS)
                logger.info("document_store.index_created", extra={"index": self.index})
        except (ApiError, TransportError) as exc:
            raise self._unavailable("ensure_index", exc) from exc

    async def create(
        self,
        document_id: str,
        document: dict[str, Any],
        *,
        wait_for_visibility: bool = True,
    ) -> None:
        try:
            await self.client.index(
                index=self.index,
                id=document_id,
                document=document,
                refresh="wait_for" if wait_for_visibility else False,
            )
        except (ApiError, TransportError) as exc:
            raise self._unavailable("index", exc) from exc

    async def get_by_id(self, document_id: str) -> dict[str, Any] | None:
        try:
            result = await self.client.get(index=self.index, id=document_id)
        except NotFoundError:
            return None
        except (ApiError, TransportError) as exc:
            raise self._unavailable("get", exc) from exc
        return result["_source"]

    async def delete_by_id(self, document_id: str) -> bool:
        try:
            await self.client.delete(index=self.index, id=document_id, refresh="wait_for")
        except NotFoundError:
            return False
        except (ApiError, TransportError) as exc:
            raise self._unavailable("delete", exc) from exc
        return True

    async def query(self, tenant_id: str, text: str) -> list[dict[str, Any]]:
        try:
            result = await self.client.search(
                index=self.index,
                query={
                    "bool": {
                        "must": [
                            {"multi_match": {"query": text, "fields": ["title", "content"]}}
                        ],
                        "filter": [{"term": {"tenantId": tenant_id}}],
                    }
                },
                size=self.search_size,
            )
        except (ApiError, TransportError) as exc:
            raise self._unavailable("search", exc) from exc
        return [hit["_source"] for hit in result["hits"]["hits"]]

    async def ping(self) -> bool:
        try:
            await self.client.cluster.health()
            return True
        except (ApiError, TransportError) as exc:
            logger.warning(
                "document_store.ping_failed",
                extra={"store": "elasticsearch", "error_type": type(exc).__name__},
            )
            return False

    async def close(self) -> None:
        await self.client.close()

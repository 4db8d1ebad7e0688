"""Tenant-scoped access to the shared document store.

The store's get and delete primitives address documents by global id and
know nothing about tenants. Every operation here re-establishes the tenant
boundary on top of them:
- get compares the stored tenantId with the caller's tenant and reports a
  foreign document exactly like a missing one
- delete only deletes what an isolation-checked get resolved
- search relies on the store's tenant-filtered query

Lookups return an explicit outcome (Found, NotFound, Unavailable) so that
"absent" and "infrastructure failure" never share a channel.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Union

from app.adapters.document_store.base import AbstractDocumentStore
from app.core.errors import StoreUnavailableAppError
from app.schemas.document import Document

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Found:
    document: Document


@dataclass(frozen=True)
class NotFound:
    """The id does not exist for this tenant (absent or owned by another)."""


@dataclass(frozen=True)
class Unavailable:
    error: StoreUnavailableAppError


DocumentLookup = Union[Found, NotFound, Unavailable]


class TenantDocumentGuard:
    """Makes every document-store operation tenant-safe."""

    def __init__(self, store: AbstractDocumentStore) -> None:
        self._store = store

    async def create(self, tenant_id: str, title: str, content: str) -> Document:
        """Create a document owned by tenant_id.

        The write waits for visibility, so the document can be fetched and
        searched as soon as this returns.

        Raises:
            StoreUnavailableAppError: If the document store fails.
        """
        document = Document(
            id=str(uuid.uuid4()),
            tenant_id=tenant_id,
            title=title,
            content=content,
            created_at=datetime.now(timezone.utc),
        )
        await self._store.create(
            document.id,
            document.model_dump(mode="json", by_alias=True),
            wait_for_visibility=True,
        )
        logger.info(
            "document.created",
            extra={"tenant_id": tenant_id, "document_id": document.id},
        )
        return document

    async def get(self, tenant_id: str, document_id: str) -> DocumentLookup:
        """Fetch a document if, and only if, it belongs to tenant_id."""
        try:
            source = await self._store.get_by_id(document_id)
        except StoreUnavailableAppError as exc:
            return Unavailable(error=exc)

        if source is None:
            return NotFound()

        if source.get("tenantId") != tenant_id:
            logger.info(
                "document.cross_tenant_lookup",
                extra={"tenant_id": tenant_id, "document_id": document_id},
            )
            return NotFound()

        return Found(document=Document.model_validate(source))

    async def delete(self, tenant_id: str, document_id: str) -> bool:
        """Delete a document owned by tenant_id.

        Returns:
            True when the document was deleted; False when it was absent,
            owned by another tenant, or vanished before the delete ran.

        Raises:
            StoreUnavailableAppError: If the document store fails.
        """
        lookup = await self.get(tenant_id, document_id)
        if isinstance(lookup, Unavailable):
            raise lookup.error
        if isinstance(lookup, NotFound):
            return False

        # Not atomic with the lookup above
        deleted = await self._store.delete_by_id(document_id)
        if deleted:
            logger.info(
                "document.deleted",
                extra={"tenant_id": tenant_id, "document_id": document_id},
            )
        return deleted

    async def search(self, tenant_id: str, query_text: str) -> list[Document]:
        """Tenant-filtered full-text search, in the store's relevance order.

        Raises:
            StoreUnavailableAppError: If the document store fails.
        """
        hits = await self._store.query(tenant_id, query_text)

        documents: list[Document] = []
        for hit in hits:
            if hit.get("tenantId") != tenant_id:
                logger.error(
                    "document.search_filter_leak",
                    extra={"tenant_id": tenant_id, "document_id": hit.get("id")},
                )
                continue
            documents.append(Document.model_validate(hit))
        return documents

"""Document store interface.

Point lookups and deletes address documents by global id only; the
tenant-filtered full-text query is the one tenant-aware primitive. Tenant
isolation on top of this interface is the job of TenantDocumentGuard.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class AbstractDocumentStore(ABC):
    """Interface for full-text document stores.

    Documents are plain dicts in their stored (camelCase) form. Operational
    failures raise StoreUnavailableAppError; absence is never an error.
    """

    @abstractmethod
    async def create(
        self,
        document_id: str,
        document: dict[str, Any],
        *,
        wait_for_visibility: bool = True,
    ) -> None:
        """Write a document under document_id.

        Args:
            document_id: Global document id.
            document: Stored representation (must include tenantId).
            wait_for_visibility: Block until the document is visible to
                subsequent reads and searches.
        """
        raise NotImplementedError

    @abstractmethod
    async def get_by_id(self, document_id: str) -> dict[str, Any] | None:
        """Fetch a document by global id, regardless of tenant."""
        raise NotImplementedError

    @abstractmethod
    async def delete_by_id(self, document_id: str) -> bool:
        """Delete a document by global id. Returns False when it was absent."""
        raise NotImplementedError

    @abstractmethod
    async def query(self, tenant_id: str, text: str) -> list[dict[str, Any]]:
        """Full-text search over title/content, filtered to one tenant.

        Returns:
            Matching documents ordered by the store's relevance ranking.
        """
        raise NotImplementedError

    @abstractmethod
    async def ping(self) -> bool:
        """Return True when the store is reachable. Never raises."""
        raise NotImplementedError

    async def ensure_index(self) -> None:
        """Create the backing index if it does not exist yet."""
        return None

    async def close(self) -> None:
        """Release connections held by the store."""
        return None

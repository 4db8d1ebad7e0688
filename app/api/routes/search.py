from fastapi import APIRouter, Depends, Query

from app.api.dependencies import get_search_coordinator
from app.core.errors import ValidationAppError
from app.core.rate_limit import enforce_rate_limit
from app.core.tenant import require_tenant
from app.schemas.document import SearchResponse
from app.services.search_service import SearchCoordinator

router = APIRouter(tags=["Search"], dependencies=[Depends(enforce_rate_limit)])


@router.get("/search", response_model=SearchResponse)
async def search_documents(
    q: str | None = Query(None, description="Free-text query over title and content."),
    tenant_id: str = Depends(require_tenant),
    coordinator: SearchCoordinator = Depends(get_search_coordinator),
) -> SearchResponse:
    """Full-text search over the calling tenant's documents.

    Repeated identical queries are served from the cache for the cache TTL;
    documents created or deleted meanwhile are not reflected until the
    cached entry expires.

    Args:
        q: Query text, used verbatim (no normalization).
        tenant_id: Resolved tenant identifier.
        coordinator: Cache-aside search coordinator.

    Returns:
        SearchResponse: Results tagged "cache" or "store".

    Raises:
        ValidationAppError: 400 when q is missing or empty.
        StoreUnavailableAppError: 503 when the live query fails.
    """
    if not q:
        raise ValidationAppError(
            code="validation_error",
            message="Query parameter q is required",
            details={"field": "q"},
        )
    return await coordinator.search(tenant_id, q)

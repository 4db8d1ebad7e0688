from fastapi import APIRouter, Depends, Response, status

from app.api.dependencies import get_document_guard
from app.core.errors import NotFoundAppError
from app.core.rate_limit import enforce_rate_limit
from app.core.tenant import require_tenant
from app.schemas.document import CreateDocumentRequest, Document
from app.services.document_guard import Found, TenantDocumentGuard, Unavailable

router = APIRouter(
    prefix="/documents",
    tags=["Documents"],
    dependencies=[Depends(enforce_rate_limit)],
)


def _not_found() -> NotFoundAppError:
    # One error for "absent" and "another tenant's"; nothing else may differ
    return NotFoundAppError(code="document_not_found", message="Document not found")


@router.post(
    "",
    response_model=Document,
    status_code=status.HTTP_201_CREATED,
)
async def create_document(
    payload: CreateDocumentRequest,
    tenant_id: str = Depends(require_tenant),
    guard: TenantDocumentGuard = Depends(get_document_guard),
) -> Document:
    """Create a document owned by the calling tenant.

    The id and creation timestamp are generated server-side. The document is
    visible to reads and searches as soon as this returns.

    Args:
        payload: Title and content of the new document.
        tenant_id: Resolved tenant identifier.
        guard: Tenant-scoped document access.

    Returns:
        Document: The stored document.

    Raises:
        StoreUnavailableAppError: 503 when the document store fails.
    """
    return await guard.create(tenant_id, payload.title, payload.content)


@router.get("/{document_id}", response_model=Document)
async def get_document(
    document_id: str,
    tenant_id: str = Depends(require_tenant),
    guard: TenantDocumentGuard = Depends(get_document_guard),
) -> Document:
    """Fetch one of the calling tenant's documents.

    Raises:
        NotFoundAppError: 404 when the id is absent or owned by another tenant.
        StoreUnavailableAppError: 503 when the document store fails.
    """
    lookup = await guard.get(tenant_id, document_id)
    if isinstance(lookup, Found):
        return lookup.document
    if isinstance(lookup, Unavailable):
        raise lookup.error
    raise _not_found()


@router.delete(
    "/{document_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def delete_document(
    document_id: str,
    tenant_id: str = Depends(require_tenant),
    guard: TenantDocumentGuard = Depends(get_document_guard),
) -> None:
    """Delete one of the calling tenant's documents.

    Raises:
        NotFoundAppError: 404 when nothing was deleted (absent or foreign).
        StoreUnavailableAppError: 503 when the document store fails.
    """
    if not await guard.delete(tenant_id, document_id):
        raise _not_found()

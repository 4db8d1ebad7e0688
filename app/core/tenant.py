"""Tenant resolution for inbound requests.

The tenant identifier is trusted as supplied: it is not authenticated and
not checked against any registry. It must simply be present, because every
document, cache entry and rate-limit counter is namespaced by it.

Resolution order:
1. X-Tenant-ID header (name configurable via APP_TENANT_HEADER)
2. ``tenant`` query parameter (APP_TENANT_QUERY_PARAM)
"""

from __future__ import annotations

import logging

from fastapi import Request

from app.core.config import settings
from app.core.errors import MissingTenantAppError
from app.core.logging import set_tenant_id

logger = logging.getLogger(__name__)


def resolve_tenant_id(header_value: str | None, query_value: str | None) -> str:
    """Pick the tenant identifier, header first.

    Pure resolution logic without FastAPI dependencies for easy testing.

    Args:
        header_value: Value of the tenant header, if sent.
        query_value: Value of the tenant query parameter, if sent.

    Returns:
        The non-empty tenant identifier.

    Raises:
        MissingTenantAppError: If neither source carries a non-empty value.

    Examples:
        >>> resolve_tenant_id("acme", "other")
        'acme'
        >>> resolve_tenant_id(None, "other")
        'other'
        >>> resolve_tenant_id("", "other")
        'other'
    """
    if header_value:
        return header_value
    if query_value:
        return query_value

    raise MissingTenantAppError(
        code="missing_tenant",
        message=(
            f"Missing {settings.app.tenant_header} header "
            f"or {settings.app.tenant_query_param} query parameter"
        ),
    )


async def require_tenant(request: Request) -> str:
    """FastAPI dependency resolving the tenant for the current request.

    Runs before rate limiting, so a request without a tenant is rejected
    without consuming any budget or touching a store.

    Usage:
        @router.get("/documents/{document_id}")
        async def get_document(tenant_id: str = Depends(require_tenant)):
            ...

    Raises:
        MissingTenantAppError: 400 when no tenant identifier was supplied.
    """
    try:
        tenant_id = resolve_tenant_id(
            request.headers.get(settings.app.tenant_header),
            request.query_params.get(settings.app.tenant_query_param),
        )
    except MissingTenantAppError:
        logger.warning(
            "tenant.missing",
            extra={"request_path": request.url.path, "request_method": request.method},
        )
        raise

    request.state.tenant_id = tenant_id
    set_tenant_id(tenant_id)
    return tenant_id

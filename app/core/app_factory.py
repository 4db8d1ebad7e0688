from __future__ import annotations

"""Application factory for FastAPI app.

Centralizes app construction (metadata, middleware, handlers, routers) and
the lifetime of the store clients. Clients are built once per process in
the lifespan and handed to the services explicitly; nothing reaches them
through module globals.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.adapters.counter_store.base import AbstractCounterStore
from app.adapters.counter_store.factory import create_counter_store
from app.adapters.document_store.base import AbstractDocumentStore
from app.adapters.document_store.factory import create_document_store
from app.adapters.rate_limit.fixed_window import FixedWindowRateLimiter
from app.api.routes import documents_router, health_router, search_router
from app.core.config import settings
from app.core.errors import StoreUnavailableAppError
from app.core.exception_handlers import setup_exception_handlers
from app.core.logging import configure_logging
from app.core.middleware import request_id_middleware
from app.core.openapi import apply_openapi_customizations
from app.services.document_guard import TenantDocumentGuard
from app.services.health_service import HealthService
from app.services.search_service import SearchCoordinator

logger = logging.getLogger(__name__)


def _build_lifespan(
    counter_store: AbstractCounterStore | None,
    document_store: AbstractDocumentStore | None,
):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        counters = counter_store or create_counter_store()
        documents = document_store or create_document_store()

        try:
            await documents.ensure_index()
        except StoreUnavailableAppError as exc:
            # Keep serving; /health reports the store as down
            logger.warning("startup.ensure_index_failed", extra={"error_code": exc.code})

        guard = TenantDocumentGuard(documents)
        app.state.rate_limiter = FixedWindowRateLimiter(
            counters,
            limit=settings.app.rate_limit_requests,
            window_seconds=settings.app.rate_limit_window_seconds,
        )
        app.state.document_guard = guard
        app.state.search_coordinator = SearchCoordinator(
            guard,
            counters,
            ttl_seconds=settings.app.search_cache_ttl_seconds,
        )
        app.state.health_service = HealthService(documents, counters)

        logger.info(
            "startup.complete",
            extra={
                "counter_store": type(counters).__name__,
                "document_store": type(documents).__name__,
                "rate_limit_enabled": settings.app.rate_limit_enabled,
            },
        )
        try:
            yield
        finally:
            await documents.close()
            await counters.close()
            logger.info("shutdown.complete")

    return lifespan


def create_app(
    *,
    counter_store: AbstractCounterStore | None = None,
    document_store: AbstractDocumentStore | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        counter_store: Counter store to use instead of the configured one.
        document_store: Document store to use instead of the configured one.

    Returns:
        Configured FastAPI app with middleware, handlers, routers and docs.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="Tenant Search Gateway",
        description=(
            "Multi-tenant gateway in front of a shared full-text document store. "
            "Every request is scoped to the tenant given in X-Tenant-ID, rate "
            "limited per tenant, and repeated searches are served from a cache."
        ),
        version="0.1.0",
        license_info={
            "name": "MIT License",
            "url": "https://opensource.org/licenses/MIT",
        },
        lifespan=_build_lifespan(counter_store, document_store),
    )

    # Middleware
    app.middleware("http")(request_id_middleware)

    # Exception handlers
    setup_exception_handlers(app)

    # Routers
    app.include_router(documents_router)
    app.include_router(search_router)
    app.include_router(health_router)

    # OpenAPI customizations (security scheme, tags, exemptions)
    apply_openapi_customizations(app)

    return app

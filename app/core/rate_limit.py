"""Rate limiting dependency for FastAPI routes.

This module wires the rate limiting adapter into the HTTP layer.

Design goals:
- Minimal coupling: API routes depend on a dependency function only.
- Swap-friendly: the limiter is built once at startup and read from
  app.state, so tests can inject any implementation.
- Visible budget: X-RateLimit-Limit and X-RateLimit-Remaining are attached
  to every gated response, including error responses.

Rate limiting strategy:
- Fixed-window limit per tenant, counted in the shared counter store.
- The tenant is resolved first; requests without one never reach here.
"""

from __future__ import annotations

import logging

from fastapi import Depends, Request, Response

from app.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from app.core.config import settings
from app.core.errors import RateLimitedAppError
from app.core.tenant import require_tenant

logger = logging.getLogger(__name__)


def get_rate_limiter(request: Request) -> AbstractRateLimiter:
    """Return the limiter built at application startup."""

    return request.app.state.rate_limiter


def rate_limit_headers(result: RateLimitResult) -> dict[str, str]:
    """Response headers describing the tenant's remaining budget."""

    return {
        "X-RateLimit-Limit": str(result.limit),
        "X-RateLimit-Remaining": str(result.remaining),
    }


async def enforce_rate_limit(
    request: Request,
    response: Response,
    tenant_id: str = Depends(require_tenant),
    limiter: AbstractRateLimiter = Depends(get_rate_limiter),
) -> RateLimitResult | None:
    """FastAPI dependency enforcing per-tenant rate limits.

    When enabled, consumes 1 unit from the tenant's budget. The decision is
    stored on request.state so exception handlers can attach the same
    headers to error responses.

    Args:
        request: FastAPI request.
        response: Temporal response used to attach headers on success.
        tenant_id: Resolved tenant identifier.
        limiter: Configured rate limiter.

    Returns:
        The rate limit decision, or None when rate limiting is disabled.

    Raises:
        RateLimitedAppError: 429 Too Many Requests when the quota is exceeded.
    """

    if not settings.app.rate_limit_enabled:
        return None

    result = await limiter.admit(tenant_id)
    request.state.rate_limit = result

    if settings.app.rate_limit_include_headers:
        response.headers.update(rate_limit_headers(result))

    if result.allowed:
        logger.info(
            "rate_limit.allowed",
            extra={
                "tenant_id": tenant_id,
                "limit": result.limit,
                "remaining": result.remaining,
                "degraded": result.degraded,
            },
        )
        return result

    logger.warning(
        "rate_limit.exceeded",
        extra={
            "tenant_id": tenant_id,
            "limit": result.limit,
            "count": result.count,
            "window_s": settings.app.rate_limit_window_seconds,
        },
    )
    raise RateLimitedAppError(
        code="rate_limited",
        message="Too many requests",
        details={"limit": result.limit, "remaining": result.remaining},
    )

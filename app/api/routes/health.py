from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from app.api.dependencies import get_health_service
from app.schemas.document import HealthResponse
from app.services.health_service import HealthService

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(
    response: Response,
    health: HealthService = Depends(get_health_service),
) -> HealthResponse:
    """Health check endpoint.

    Pings the document store and the counter store. Used by load balancers
    and monitoring systems; not tenant-gated and not rate limited.

    Returns:
        HealthResponse: "up" (200) when both stores are reachable,
            otherwise "degraded" (503) with the failing dependency marked down.
    """

    dependency_status = await health.check_dependencies()
    if dependency_status.status != "up":
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return dependency_status.to_response()

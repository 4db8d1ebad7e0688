"""Request correlation middleware.

Binds a request id for the lifetime of each request so every log line and
error body emitted while serving it can be tied together, and reports the
id and the time spent back to the caller.

Usage:
    app.middleware("http")(request_id_middleware)
"""

from __future__ import annotations

import logging
import time
import uuid

from fastapi import Request, Response

from app.core.config import settings
from app.core.logging import clear_correlation, set_request_id

logger = logging.getLogger(__name__)


async def request_id_middleware(request: Request, call_next) -> Response:
    """Bind, log and echo the request id.

    The id is taken from the LOG_REQUEST_ID_HEADER header (X-Request-ID by
    default) when the caller sends one, otherwise a UUID4 is generated. The
    response carries the same header plus X-Request-Duration-ms.

    One ``request.completed`` line is logged per request with method, path,
    status, duration and the tenant when one was resolved.
    """

    header_name = settings.log.request_id_header
    request_id = request.headers.get(header_name) or str(uuid.uuid4())
    set_request_id(request_id)

    started = time.perf_counter()
    try:
        response: Response = await call_next(request)
        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
        logger.info(
            "request.completed",
            extra={
                "request_method": request.method,
                "request_path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": elapsed_ms,
                "tenant_id": getattr(request.state, "tenant_id", None),
            },
        )
    finally:
        clear_correlation()

    response.headers[header_name] = request_id
    response.headers.setdefault("X-Request-Duration-ms", f"{elapsed_ms:.2f}")
    return response

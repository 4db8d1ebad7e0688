"""Application-level exception types.

This module defines domain errors used across services/adapters, enabling
consistent error handling, logging, and API responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients.

    Fields are optional to keep shapes consistent across the codebase
    without forcing every error to carry every field.
    """

    code: str
    message: str
    hint: str
    field: str
    limit: int
    remaining: int
    http_status: int
    store: str
    request_id: str
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when request input is missing or malformed."""


class MissingTenantAppError(AppError):
    """Raised when a request carries no tenant identifier."""


class NotFoundAppError(AppError):
    """Raised when a document is absent or belongs to another tenant.

    Both cases share one code and message so callers cannot probe for
    documents owned by other tenants.
    """


class RateLimitedAppError(AppError):
    """Raised when a tenant exceeds its request quota for the window."""


class StoreUnavailableAppError(AppError):
    """Raised when an external store errors or times out."""

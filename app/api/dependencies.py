"""Accessors for the service handles built at application startup."""

from __future__ import annotations

from fastapi import Request

from app.services.document_guard import TenantDocumentGuard
from app.services.health_service import HealthService
from app.services.search_service import SearchCoordinator


def get_document_guard(request: Request) -> TenantDocumentGuard:
    return request.app.state.document_guard


def get_search_coordinator(request: Request) -> SearchCoordinator:
    return request.app.state.search_coordinator


def get_health_service(request: Request) -> HealthService:
    return request.app.state.health_service

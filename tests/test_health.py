"""Tests for dependency health reporting."""

import pytest
from fastapi.testclient import TestClient

from app.core.app_factory import create_app
from app.services.health_service import DependencyStatus, HealthService


class TestHealthService:
    @pytest.mark.asyncio
    async def test_both_up(self, document_store, counter_store) -> None:
        status = await HealthService(document_store, counter_store).check_dependencies()

        assert status == DependencyStatus(store_up=True, counter_up=True)
        assert status.status == "up"

    @pytest.mark.asyncio
    async def test_counter_store_down(self, document_store, unavailable_counter_store) -> None:
        status = await HealthService(
            document_store, unavailable_counter_store
        ).check_dependencies()

        assert status.status == "degraded"
        assert status.to_response().dependencies == {"elasticsearch": "up", "redis": "down"}

    @pytest.mark.asyncio
    async def test_document_store_down(self, unavailable_document_store, counter_store) -> None:
        status = await HealthService(
            unavailable_document_store, counter_store
        ).check_dependencies()

        assert status.status == "degraded"
        assert status.to_response().dependencies == {"elasticsearch": "down", "redis": "up"}


class TestHealthEndpoint:
    def test_healthy(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {
            "status": "up",
            "dependencies": {"elasticsearch": "up", "redis": "up"},
        }

    def test_not_tenant_gated_or_rate_limited(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        assert "X-RateLimit-Limit" not in response.headers

    def test_degraded_returns_503(self, document_store, unavailable_counter_store) -> None:
        app = create_app(counter_store=unavailable_counter_store, document_store=document_store)

        with TestClient(app) as client:
            response = client.get("/health")

        assert response.status_code == 503
        assert response.json() == {
            "status": "degraded",
            "dependencies": {"elasticsearch": "up", "redis": "down"},
        }

    def test_starts_when_document_store_is_down(
        self, unavailable_document_store, counter_store
    ) -> None:
        app = create_app(counter_store=counter_store, document_store=unavailable_document_store)

        with TestClient(app) as client:
            response = client.get("/health")

        assert response.status_code == 503
        assert response.json()["dependencies"]["elasticsearch"] == "down"

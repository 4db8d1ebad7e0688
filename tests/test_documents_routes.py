"""HTTP tests for the tenant-scoped document endpoints."""

import uuid

import pytest
from fastapi.testclient import TestClient

from app.core.app_factory import create_app
from app.core.config import settings


def _create(client: TestClient, headers: dict[str, str], **payload) -> dict:
    body = {"title": "Alpha", "content": "first doc"} | payload
    response = client.post("/documents", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestCreateDocument:
    def test_returns_stored_document(self, client: TestClient, acme_headers) -> None:
        document = _create(client, acme_headers)

        assert set(document) == {"id", "tenantId", "title", "content", "createdAt"}
        assert document["tenantId"] == "acme"
        assert document["title"] == "Alpha"
        assert uuid.UUID(document["id"])

    def test_tenant_from_query_param(self, client: TestClient) -> None:
        response = client.post(
            "/documents", params={"tenant": "acme"}, json={"title": "A", "content": "b"}
        )

        assert response.status_code == 201
        assert response.json()["tenantId"] == "acme"

    def test_header_wins_over_query_param(self, client: TestClient, acme_headers) -> None:
        response = client.post(
            "/documents",
            params={"tenant": "globex"},
            json={"title": "A", "content": "b"},
            headers=acme_headers,
        )

        assert response.json()["tenantId"] == "acme"

    def test_immediately_readable(self, client: TestClient, acme_headers) -> None:
        document = _create(client, acme_headers)

        response = client.get(f"/documents/{document['id']}", headers=acme_headers)

        assert response.status_code == 200
        assert response.json() == document

    @pytest.mark.parametrize("body", [
        {"content": "no title"},
        {"title": "no content"},
        {"title": "", "content": "empty title"},
    ])
    def test_invalid_body(self, client: TestClient, acme_headers, body) -> None:
        response = client.post("/documents", json=body, headers=acme_headers)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "validation_error"

    def test_missing_tenant(self, client: TestClient) -> None:
        response = client.post("/documents", json={"title": "A", "content": "b"})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "missing_tenant"
        assert "X-RateLimit-Limit" not in response.headers

    def test_missing_tenant_consumes_no_budget(self, client: TestClient, acme_headers) -> None:
        client.post("/documents", json={"title": "A", "content": "b"})
        client.post("/documents", json={"title": "A", "content": "b"}, headers={"X-Tenant-ID": ""})

        response = client.post("/documents", json={"title": "A", "content": "b"}, headers=acme_headers)

        assert response.headers["X-RateLimit-Remaining"] == "19"


class TestTenantIsolation:
    def test_foreign_document_is_not_found(self, client: TestClient, acme_headers) -> None:
        document = _create(client, acme_headers)

        response = client.get(
            f"/documents/{document['id']}", headers={"X-Tenant-ID": "other-tenant"}
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "document_not_found"

    def test_foreign_and_missing_responses_match(self, client: TestClient, acme_headers) -> None:
        document = _create(client, acme_headers)
        other = {"X-Tenant-ID": "other-tenant"}

        foreign = client.get(f"/documents/{document['id']}", headers=other)
        missing = client.get(f"/documents/{uuid.uuid4()}", headers=other)

        assert foreign.status_code == missing.status_code == 404
        foreign_error = foreign.json()["error"]
        missing_error = missing.json()["error"]
        foreign_error.pop("request_id")
        missing_error.pop("request_id")
        assert foreign_error == missing_error

    def test_foreign_delete_is_not_found_and_keeps_document(
        self, client: TestClient, acme_headers
    ) -> None:
        document = _create(client, acme_headers)

        response = client.delete(
            f"/documents/{document['id']}", headers={"X-Tenant-ID": "other-tenant"}
        )

        assert response.status_code == 404
        assert client.get(f"/documents/{document['id']}", headers=acme_headers).status_code == 200


class TestDeleteDocument:
    def test_delete_then_gone(self, client: TestClient, acme_headers) -> None:
        document = _create(client, acme_headers)

        deleted = client.delete(f"/documents/{document['id']}", headers=acme_headers)

        assert deleted.status_code == 204
        assert deleted.content == b""
        assert deleted.headers["X-RateLimit-Limit"] == "20"
        assert client.get(f"/documents/{document['id']}", headers=acme_headers).status_code == 404
        assert client.delete(f"/documents/{document['id']}", headers=acme_headers).status_code == 404


class TestRateLimiting:
    def test_headers_on_success(self, client: TestClient, acme_headers) -> None:
        first = client.post("/documents", json={"title": "A", "content": "b"}, headers=acme_headers)
        second = client.get(f"/documents/{uuid.uuid4()}", headers=acme_headers)

        assert first.headers["X-RateLimit-Limit"] == "20"
        assert first.headers["X-RateLimit-Remaining"] == "19"
        assert second.headers["X-RateLimit-Remaining"] == "18"

    def test_headers_on_error_responses(self, client: TestClient, acme_headers) -> None:
        response = client.post("/documents", json={"content": "no title"}, headers=acme_headers)

        assert response.status_code == 400
        assert response.headers["X-RateLimit-Limit"] == "20"
        assert response.headers["X-RateLimit-Remaining"] == "19"

    def test_twenty_first_request_is_rejected(self, client: TestClient, acme_headers) -> None:
        for _ in range(20):
            assert client.get(f"/documents/{uuid.uuid4()}", headers=acme_headers).status_code == 404

        response = client.get(f"/documents/{uuid.uuid4()}", headers=acme_headers)

        assert response.status_code == 429
        assert response.json()["error"]["code"] == "rate_limited"
        assert response.headers["X-RateLimit-Remaining"] == "0"
        assert response.headers["X-RateLimit-Limit"] == "20"

    def test_budget_is_per_tenant(self, client: TestClient, acme_headers) -> None:
        for _ in range(21):
            client.get(f"/documents/{uuid.uuid4()}", headers=acme_headers)

        response = client.get(f"/documents/{uuid.uuid4()}", headers={"X-Tenant-ID": "globex"})

        assert response.status_code == 404
        assert response.headers["X-RateLimit-Remaining"] == "19"

    def test_next_window_admits_again(self, client: TestClient, acme_headers, fake_clock) -> None:
        for _ in range(21):
            client.get(f"/documents/{uuid.uuid4()}", headers=acme_headers)

        fake_clock.advance(60)
        response = client.get(f"/documents/{uuid.uuid4()}", headers=acme_headers)

        assert response.status_code == 404
        assert response.headers["X-RateLimit-Remaining"] == "19"

    def test_fails_open_when_counter_store_is_down(
        self, document_store, unavailable_counter_store, acme_headers
    ) -> None:
        app = create_app(counter_store=unavailable_counter_store, document_store=document_store)

        with TestClient(app) as client:
            responses = [
                client.post("/documents", json={"title": "A", "content": "b"}, headers=acme_headers)
                for _ in range(25)
            ]

        assert all(response.status_code == 201 for response in responses)
        assert responses[-1].headers["X-RateLimit-Remaining"] == "20"

    def test_disabled(self, client: TestClient, acme_headers, monkeypatch) -> None:
        monkeypatch.setattr(settings.app, "rate_limit_enabled", False)

        for _ in range(25):
            response = client.get(f"/documents/{uuid.uuid4()}", headers=acme_headers)

        assert response.status_code == 404
        assert "X-RateLimit-Limit" not in response.headers


class TestDocumentStoreUnavailable:
    @pytest.fixture
    def down_client(self, counter_store, unavailable_document_store):
        app = create_app(counter_store=counter_store, document_store=unavailable_document_store)
        with TestClient(app) as client:
            yield client

    @pytest.mark.parametrize("method,path,body", [
        ("POST", "/documents", {"title": "A", "content": "b"}),
        ("GET", "/documents/some-id", None),
        ("DELETE", "/documents/some-id", None),
    ])
    def test_returns_503_without_internals(
        self, down_client: TestClient, acme_headers, method, path, body
    ) -> None:
        response = down_client.request(method, path, json=body, headers=acme_headers)

        assert response.status_code == 503
        error = response.json()["error"]
        assert error["code"] == "store_unavailable"
        assert "details" not in error
        assert "elasticsearch" not in response.text

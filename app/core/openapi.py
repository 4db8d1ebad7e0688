"""OpenAPI metadata and customization utilities.

Provides a helper to enrich the generated OpenAPI schema with:
- Tags metadata
- Tenant header (``X-Tenant-ID``) declared as an API key scheme, with the
  health endpoint exempted

This keeps documentation concerns decoupled from the app factory.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

from app.core.config import settings


def apply_openapi_customizations(app: FastAPI) -> None:
    """Patch FastAPI's OpenAPI generation to document tenant scoping.

    - Injects components.securitySchemes for the tenant header
    - Marks all operations as tenant-scoped by default, then exempts health
      endpoints by setting ``security: []``
    - Adds tags metadata if not present
    """

    original_openapi = app.openapi
    tenant_header = settings.app.tenant_header

    def custom_openapi() -> Dict[str, Any]:
        schema = original_openapi()

        components = schema.setdefault("components", {})
        security_schemes = components.setdefault("securitySchemes", {})
        security_schemes.setdefault(
            "TenantHeader",
            {
                "type": "apiKey",
                "in": "header",
                "name": tenant_header,
                "description": (
                    f"Tenant identifier. The {settings.app.tenant_query_param!r} "
                    "query parameter is accepted when the header is absent."
                ),
            },
        )

        schema.setdefault("security", [{"TenantHeader": []}])

        tags = schema.setdefault("tags", [])
        existing_tag_names = {t.get("name") for t in tags}
        desired_tags = [
            {
                "name": "Documents",
                "description": "Create, fetch and delete the calling tenant's documents.",
            },
            {
                "name": "Search",
                "description": "Cached full-text search scoped to the calling tenant.",
            },
            {
                "name": "Health",
                "description": "Dependency reachability checks.",
            },
        ]
        for tag in desired_tags:
            if tag["name"] not in existing_tag_names:
                tags.append(tag)

        paths = schema.get("paths", {})
        for path, methods in paths.items():
            if path.endswith("/health"):
                for method_obj in methods.values():
                    if isinstance(method_obj, dict):
                        method_obj["security"] = []

        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]

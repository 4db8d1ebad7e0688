"""Pydantic schemas for documents, search results and health reports."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    """Base model exposing camelCase field names on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Document(_CamelModel):
    """A stored document.

    Ids are global across tenants; tenant_id is the only ownership marker.
    """

    id: str = Field(..., description="Server-generated globally unique id.")
    tenant_id: str = Field(..., description="Tenant that owns the document.")
    title: str = Field(..., description="Document title (full-text indexed).")
    content: str = Field(..., description="Document body (full-text indexed).")
    created_at: datetime = Field(..., description="UTC creation timestamp.")


class CreateDocumentRequest(BaseModel):
    """Payload accepted by POST /documents."""

    title: str = Field(..., min_length=1, description="Document title.")
    content: str = Field(..., min_length=1, description="Document body.")


class SearchResponse(BaseModel):
    """Search results with their provenance.

    The shape is identical whether results came from the cache or the store.
    """

    source: Literal["cache", "store"] = Field(
        ..., description="'cache' when served from the search cache, 'store' for a live query."
    )
    results: list[Document] = Field(
        default_factory=list,
        description="Matching documents in relevance order.",
    )


class HealthResponse(BaseModel):
    """Dependency health report."""

    status: Literal["up", "degraded"]
    dependencies: dict[str, Literal["up", "down"]]

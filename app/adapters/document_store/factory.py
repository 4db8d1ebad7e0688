"""Factory pattern for creating document store instances."""

from app.adapters.document_store.base import AbstractDocumentStore
from app.adapters.document_store.elasticsearch_store import ElasticsearchDocumentStore
from app.adapters.document_store.in_memory import InMemoryDocumentStore
from app.core.config import ElasticsearchSettings, settings
from app.core.errors import ValidationAppError


def create_document_store(
    es_settings: ElasticsearchSettings | None = None,
) -> AbstractDocumentStore:
    """Instantiate the document store selected by configuration.

    Args:
        es_settings: Optional settings override; defaults to global settings.

    Returns:
        AbstractDocumentStore: Configured document store.

    Raises:
        ValidationAppError: If the configured backend is unknown.
    """
    cfg = es_settings or settings.elasticsearch
    backend = cfg.backend.lower()

    if backend == "elasticsearch":
        return ElasticsearchDocumentStore(
            node=cfg.node,
            index=cfg.index,
            request_timeout_seconds=cfg.request_timeout_seconds,
            max_retries=cfg.max_retries,
            search_size=cfg.search_size,
        )

    if backend == "memory":
        return InMemoryDocumentStore(search_size=cfg.search_size)

    raise ValidationAppError(
        code="document_store_unknown_backend",
        message=(
            f"Unknown document store backend: '{backend}'. "
            "Supported backends: elasticsearch, memory"
        ),
    )

"""Document store adapter layer - abstracts over full-text stores."""

from app.adapters.document_store.base import AbstractDocumentStore
from app.adapters.document_store.elasticsearch_store import ElasticsearchDocumentStore
from app.adapters.document_store.factory import create_document_store
from app.adapters.document_store.in_memory import InMemoryDocumentStore

__all__ = [
    "AbstractDocumentStore",
    "ElasticsearchDocumentStore",
    "InMemoryDocumentStore",
    "create_document_store",
]

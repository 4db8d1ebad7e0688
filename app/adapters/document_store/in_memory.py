"""In-memory document store.

Notes:
- Per-process only, intended for local development and tests.
- Ranking is a plain term-frequency score over title and content; it only
  approximates a real full-text engine (no stemming, no field boosts).
- Writes are visible immediately, so wait_for_visibility is always honored.
"""

from __future__ import annotations

import copy
import re
import threading
from typing import Any

from app.adapters.document_store.base import AbstractDocumentStore

_TOKEN_RE = re.compile(r"\w+", re.UNICODE)


def _tokenize(text: str) -> list[str]:
    return _TOKEN_RE.findall(text.lower())


class InMemoryDocumentStore(AbstractDocumentStore):
    """Dictionary-backed document store keyed by global id."""

    def __init__(self, *, search_size: int = 10) -> None:
        self._search_size = search_size
        self._lock = threading.RLock()
        self._documents: dict[str, dict[str, Any]] = {}

    def __repr__(self) -> str:  # pragma: no cover - representation only
        return f"InMemoryDocumentStore(size={len(self._documents)})"

    async def create(
        self,
        document_id: str,
        document: dict[str, Any],
        *,
        wait_for_visibility: bool = True,
    ) -> None:
        with self._lock:
            self._documents[document_id] = copy.deepcopy(document)

    async def get_by_id(self, document_id: str) -> dict[str, Any] | None:
        with self._lock:
            document = self._documents.get(document_id)
            return copy.deepcopy(document) if document is not None else None

    async def delete_by_id(self, document_id: str) -> bool:
        with self._lock:
            return self._documents.pop(document_id, None) is not None

    async def query(self, tenant_id: str, text: str) -> list[dict[str, Any]]:
        terms = set(_tokenize(text))
        if not terms:
            return []

        scored: list[tuple[int, int, dict[str, Any]]] = []
        with self._lock:
            for position, document in enumerate(self._documents.values()):
                if document.get("tenantId") != tenant_id:
                    continue
                tokens = _tokenize(f"{document.get('title', '')} {document.get('content', '')}")
                score = sum(1 for token in tokens if token in terms)
                if score:
                    scored.append((score, position, copy.deepcopy(document)))

        # Highest score first; insertion order breaks ties
        scored.sort(key=lambda item: (-item[0], item[1]))
        return [document for _, _, document in scored[: self._search_size]]

    async def ping(self) -> bool:
        return True

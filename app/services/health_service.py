"""Dependency health checks for the document and counter stores."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from app.adapters.counter_store.base import AbstractCounterStore
from app.adapters.document_store.base import AbstractDocumentStore
from app.schemas.document import HealthResponse


@dataclass(frozen=True)
class DependencyStatus:
    """Reachability of each external store."""

    store_up: bool
    counter_up: bool

    @property
    def status(self) -> str:
        return "up" if self.store_up and self.counter_up else "degraded"

    def to_response(self) -> HealthResponse:
        return HealthResponse(
            status=self.status,
            dependencies={
                "elasticsearch": "up" if self.store_up else "down",
                "redis": "up" if self.counter_up else "down",
            },
        )


class HealthService:
    def __init__(
        self,
        document_store: AbstractDocumentStore,
        counter_store: AbstractCounterStore,
    ) -> None:
        self._document_store = document_store
        self._counter_store = counter_store

    async def check_dependencies(self) -> DependencyStatus:
        """Ping both stores concurrently."""

        store_up, counter_up = await asyncio.gather(
            self._document_store.ping(),
            self._counter_store.ping(),
        )
        return DependencyStatus(store_up=store_up, counter_up=counter_up)

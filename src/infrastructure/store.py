"""
Batch store abstraction.

The service layer only talks to ``BatchStore``; the concrete store is
chosen at startup (``settings.store_backend``) and injected into the app.

* ``InMemoryBatchStore`` -- process-lifetime dict, lost on restart (default).
* ``SqlBatchStore``      -- SQLAlchemy, see ``repositories.py``.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import Optional

from src.domain.entities import Batch, BatchNotFound, Event


class BatchStore(ABC):
    def __init__(self) -> None:
        self._append_locks: dict[str, asyncio.Lock] = {}

    def append_lock(self, batch_id: str) -> asyncio.Lock:
        """Held while an event is sealed against the batch tail and appended."""
        return self._append_locks.setdefault(batch_id, asyncio.Lock())

    @abstractmethod
    async def add_batch(self, batch: Batch) -> Batch: ...

    @abstractmethod
    async def get_batch(self, batch_id: str) -> Optional[Batch]: ...

    @abstractmethod
    async def list_batches(self) -> list[Batch]:
        """All batches in creation order."""

    @abstractmethod
    async def append_event(self, event: Event) -> Batch:
        """Append a sealed event to its batch; raise ``BatchNotFound`` if absent."""

    @abstractmethod
    async def clear(self) -> None: ...

    async def close(self) -> None:
        """Release backing resources, if any."""


class InMemoryBatchStore(BatchStore):
    def __init__(self) -> None:
        super().__init__()
        self._batches: dict[str, Batch] = {}

    async def add_batch(self, batch: Batch) -> Batch:
        if batch.id in self._batches:
            raise ValueError(f"Batch already exists: {batch.id}")
        self._batches[batch.id] = batch
        return batch

    async def get_batch(self, batch_id: str) -> Optional[Batch]:
        return self._batches.get(batch_id)

    async def list_batches(self) -> list[Batch]:
        return list(self._batches.values())

    async def append_event(self, event: Event) -> Batch:
        batch = self._batches.get(event.batch_id)
        if batch is None:
            raise BatchNotFound(event.batch_id)
        batch.append(event)
        return batch

    async def clear(self) -> None:
        self._batches.clear()

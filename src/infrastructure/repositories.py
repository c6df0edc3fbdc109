"""
Repository Pattern -- abstracts DB access so domain logic stays DB-agnostic.

``BatchRepository`` receives an ``AsyncSession`` (unit-of-work) and exposes
batch-relevant queries only.  ``SqlBatchStore`` adapts it to the
``BatchStore`` interface, opening one session per operation and mapping
rows to domain entities.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from .models import BatchModel, EventModel
from .store import BatchStore
from src.domain.entities import (
    Batch,
    BatchNotFound,
    Event,
    event_from_payload,
    event_to_payload,
)
from src.domain.enums import BatchStatus


class BatchRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, batch: BatchModel) -> BatchModel:
        self.session.add(batch)
        await self.session.flush()
        return batch

    async def get_by_id(self, batch_id: str) -> Optional[BatchModel]:
        result = await self.session.execute(
            select(BatchModel).where(BatchModel.id == batch_id)
        )
        return result.scalar_one_or_none()

    async def get_all(self) -> list[BatchModel]:
        result = await self.session.execute(
            select(BatchModel).order_by(BatchModel.seq)
        )
        return list(result.scalars().all())

    async def add_event(self, batch: BatchModel, event: EventModel) -> EventModel:
        batch.events.append(event)
        await self.session.flush()
        return event

    async def delete_all(self) -> None:
        for batch in await self.get_all():
            await self.session.delete(batch)
        await self.session.flush()


# ── Row <-> entity mapping ────────────────────────────────────────────


def event_to_row(event: Event) -> EventModel:
    return EventModel(
        id=event.id,
        batch_id=event.batch_id,
        kind=event.kind.value,
        timestamp=event.timestamp.isoformat(),
        payload=event_to_payload(event),
        prev_hash=event.prev_hash,
        hash=event.hash,
    )


def row_to_event(row: EventModel) -> Event:
    return event_from_payload(
        row.kind,
        id=row.id,
        batch_id=row.batch_id,
        timestamp=datetime.fromisoformat(row.timestamp),
        payload=row.payload,
        prev_hash=row.prev_hash,
        hash=row.hash,
    )


def row_to_batch(row: BatchModel) -> Batch:
    return Batch(
        id=row.id,
        species=row.species,
        harvest_date=row.harvest_date,
        total_quantity=row.total_quantity,
        unit=row.unit,
        status=BatchStatus(row.status),
        qr_code=row.qr_code,
        events=[row_to_event(e) for e in row.events],
    )


# ── Store adapter ─────────────────────────────────────────────────────


class SqlBatchStore(BatchStore):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession], engine=None):
        super().__init__()
        self.session_factory = session_factory
        self.engine = engine

    async def add_batch(self, batch: Batch) -> Batch:
        async with self.session_factory() as session:
            repo = BatchRepository(session)
            if await repo.get_by_id(batch.id):
                raise ValueError(f"Batch already exists: {batch.id}")
            row = BatchModel(
                id=batch.id,
                species=batch.species,
                harvest_date=batch.harvest_date,
                total_quantity=batch.total_quantity,
                unit=batch.unit,
                status=batch.status.value,
                qr_code=batch.qr_code,
                events=[event_to_row(e) for e in batch.events],
            )
            await repo.create(row)
            await session.commit()
        return batch

    async def get_batch(self, batch_id: str) -> Optional[Batch]:
        async with self.session_factory() as session:
            row = await BatchRepository(session).get_by_id(batch_id)
            return row_to_batch(row) if row else None

    async def list_batches(self) -> list[Batch]:
        async with self.session_factory() as session:
            return [row_to_batch(r) for r in await BatchRepository(session).get_all()]

    async def append_event(self, event: Event) -> Batch:
        async with self.session_factory() as session:
            repo = BatchRepository(session)
            row = await repo.get_by_id(event.batch_id)
            if row is None:
                raise BatchNotFound(event.batch_id)

            # Apply the lifecycle rule on the entity, then persist the result
            batch = row_to_batch(row)
            batch.append(event)
            row.status = batch.status.value
            await repo.add_event(row, event_to_row(event))
            await session.commit()
        return batch

    async def clear(self) -> None:
        async with self.session_factory() as session:
            await BatchRepository(session).delete_all()
            await session.commit()

    async def close(self) -> None:
        if self.engine is not None:
            await self.engine.dispose()

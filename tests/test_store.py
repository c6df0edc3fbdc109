"""
Contract tests run against both ``BatchStore`` implementations
(in-memory dict and SQLAlchemy on in-memory SQLite).
"""

import pytest

from src.domain.entities import BatchNotFound
from src.domain.enums import BatchStatus, ProcessingStepType
from src.domain.ledger import seal, verify_chain
from tests.factories import collection, new_batch, processing, quality_test


class TestBatchStoreContract:
    @pytest.mark.asyncio
    async def test_add_and_get(self, any_store):
        await any_store.add_batch(new_batch("B-1"))
        batch = await any_store.get_batch("B-1")
        assert batch is not None
        assert batch.species == "Withania somnifera (Ashwagandha)"
        assert batch.status == BatchStatus.HARVESTED
        assert batch.unit == "kg"

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, any_store):
        assert await any_store.get_batch("nope") is None

    @pytest.mark.asyncio
    async def test_duplicate_id_rejected(self, any_store):
        await any_store.add_batch(new_batch("B-1"))
        with pytest.raises(ValueError):
            await any_store.add_batch(new_batch("B-1"))

    @pytest.mark.asyncio
    async def test_list_in_creation_order(self, any_store):
        for bid in ("B-3", "B-1", "B-2"):
            await any_store.add_batch(new_batch(bid))
        assert [b.id for b in await any_store.list_batches()] == ["B-3", "B-1", "B-2"]

    @pytest.mark.asyncio
    async def test_append_event_advances_status(self, any_store):
        await any_store.add_batch(new_batch("B-1"))
        await any_store.append_event(collection("B-1"))
        batch = await any_store.append_event(processing("B-1"))
        assert batch.status == BatchStatus.PROCESSING

        stored = await any_store.get_batch("B-1")
        assert stored.status == BatchStatus.PROCESSING
        assert [e.id for e in stored.events] == ["collection-001", "processing-001"]

    @pytest.mark.asyncio
    async def test_status_does_not_roll_back(self, any_store):
        await any_store.add_batch(new_batch("B-1"))
        await any_store.append_event(
            processing("B-1", step=ProcessingStepType.PACKAGING)
        )
        await any_store.append_event(quality_test("B-1"))
        stored = await any_store.get_batch("B-1")
        assert stored.status == BatchStatus.PACKAGED

    @pytest.mark.asyncio
    async def test_append_to_missing_batch_raises(self, any_store):
        with pytest.raises(BatchNotFound):
            await any_store.append_event(collection("ghost"))

    @pytest.mark.asyncio
    async def test_sealed_events_survive_round_trip(self, any_store):
        await any_store.add_batch(new_batch("B-1"))
        prev = None
        for event in (collection("B-1"), processing("B-1"), quality_test("B-1")):
            seal(event, prev)
            prev = event.hash
            await any_store.append_event(event)

        stored = await any_store.get_batch("B-1")
        assert verify_chain(stored.events)
        assert stored.events[0].gps_location.latitude == 10.8505
        assert stored.events[2].result.passed is True

    @pytest.mark.asyncio
    async def test_clear(self, any_store):
        await any_store.add_batch(new_batch("B-1"))
        await any_store.append_event(collection("B-1"))
        await any_store.clear()
        assert await any_store.list_batches() == []

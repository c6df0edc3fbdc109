"""Tests for the app factory: store selection, startup seeding, rate limits."""

import pytest
from httpx import ASGITransport, AsyncClient

from src.api.app import build_store, create_app
from src.api.middleware import limiter
from src.config import Settings
from src.domain.enums import BatchStatus
from src.domain.ledger import verify_chain
from src.infrastructure.repositories import SqlBatchStore
from src.infrastructure.store import InMemoryBatchStore
from tests.factories import new_batch


def _settings(**overrides) -> Settings:
    values = {
        "database_url": "sqlite+aiosqlite:///:memory:",
        "seed_demo_data": True,
        **overrides,
    }
    return Settings(_env_file=None, **values)


class TestLifespan:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "backend,store_cls",
        [("memory", InMemoryBatchStore), ("sql", SqlBatchStore)],
    )
    async def test_builds_store_and_seeds_demo_batch(self, backend, store_cls):
        app = create_app(app_settings=_settings(store_backend=backend))
        async with app.router.lifespan_context(app):
            store = app.state.store
            assert isinstance(store, store_cls)
            batches = await store.list_batches()
            assert len(batches) == 1
            assert batches[0].status == BatchStatus.TESTED
            assert verify_chain(batches[0].events)

    @pytest.mark.asyncio
    async def test_store_with_batches_is_not_reseeded(self, memory_store):
        await memory_store.add_batch(new_batch("B-1"))
        app = create_app(store=memory_store, app_settings=_settings())
        async with app.router.lifespan_context(app):
            assert app.state.store is memory_store
            assert [b.id for b in await memory_store.list_batches()] == ["B-1"]

    @pytest.mark.asyncio
    async def test_seeding_disabled(self):
        app = create_app(app_settings=_settings(seed_demo_data=False))
        async with app.router.lifespan_context(app):
            assert await app.state.store.list_batches() == []


class TestBuildStore:
    @pytest.mark.asyncio
    async def test_unknown_backend_rejected(self):
        with pytest.raises(ValueError, match="Unknown store backend"):
            await build_store(_settings(store_backend="mongo"))


class TestRateLimit:
    @pytest.mark.asyncio
    async def test_limit_comes_from_app_settings(self, memory_store):
        limiter.reset()
        app = create_app(
            store=memory_store,
            app_settings=_settings(seed_demo_data=False, rate_limit="2/minute"),
        )
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            codes = [(await ac.get("/api/v1/batches")).status_code for _ in range(3)]
        assert codes == [200, 200, 429]

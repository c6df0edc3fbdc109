"""
Shared test fixtures.

The API is exercised against an injected ``InMemoryBatchStore`` (no
lifespan needed); the SQL store runs on an in-memory SQLite database via
aiosqlite, created fresh for every test.
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.config import Settings
from src.infrastructure.database import (
    build_engine,
    build_session_factory,
    create_schema,
)
from src.infrastructure.repositories import SqlBatchStore
from src.infrastructure.store import BatchStore, InMemoryBatchStore
from src.services.traceability import TraceabilityService

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"


async def _sql_store() -> SqlBatchStore:
    engine = build_engine(TEST_DB_URL)
    await create_schema(engine)
    return SqlBatchStore(build_session_factory(engine), engine=engine)


# ── Fixtures ──────────────────────────────────────────────────────────


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        store_backend="memory",
        seed_demo_data=False,
        verify_base_url="https://ayur-trace.com/verify",
        _env_file=None,
    )


@pytest.fixture
def memory_store() -> InMemoryBatchStore:
    return InMemoryBatchStore()


@pytest_asyncio.fixture
async def sql_store() -> AsyncGenerator[SqlBatchStore, None]:
    """Fresh schema on a private in-memory SQLite engine."""
    store = await _sql_store()
    yield store
    await store.close()


@pytest_asyncio.fixture(params=["memory", "sql"])
async def any_store(request) -> AsyncGenerator[BatchStore, None]:
    """Both store implementations, for contract tests."""
    store = InMemoryBatchStore() if request.param == "memory" else await _sql_store()
    yield store
    await store.close()


@pytest.fixture
def service(memory_store, test_settings) -> TraceabilityService:
    return TraceabilityService(memory_store, test_settings)


@pytest_asyncio.fixture
async def client(memory_store, test_settings) -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient against an app with an injected in-memory store."""
    from src.api.app import create_app
    from src.api.middleware import limiter

    limiter.reset()
    app = create_app(store=memory_store, app_settings=test_settings)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

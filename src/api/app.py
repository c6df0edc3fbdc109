"""
FastAPI application factory.

* Registers routes for batches, verification and admin.
* Builds the batch store on startup (unless one was injected) and loads
  the demo batch into an empty store via lifespan events.
* Applies rate-limiting middleware.
* Swagger / OpenAPI UI available at ``/docs``.
"""

from contextlib import asynccontextmanager
import logging
from typing import Optional

from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from src.api.middleware import configure_rate_limit, limiter
from src.api.routes import admin, batches, verify
from src.config import Settings, settings as default_settings
from src.infrastructure.database import (
    build_engine,
    build_session_factory,
    create_schema,
)
from src.infrastructure.repositories import SqlBatchStore
from src.infrastructure.store import BatchStore, InMemoryBatchStore
from src.services.demo import load_demo_data
from src.services.traceability import TraceabilityService

logger = logging.getLogger(__name__)


async def build_store(app_settings: Settings) -> BatchStore:
    """Create the store selected by ``store_backend``."""
    if app_settings.store_backend == "memory":
        return InMemoryBatchStore()
    if app_settings.store_backend == "sql":
        engine = build_engine(app_settings.database_url)
        await create_schema(engine)
        return SqlBatchStore(build_session_factory(engine), engine=engine)
    raise ValueError(f"Unknown store backend: {app_settings.store_backend!r}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the store and seed demo data on startup; close on shutdown."""
    app_settings: Settings = app.state.settings
    owned = app.state.store is None
    if owned:
        app.state.store = await build_store(app_settings)
    logger.info("Batch store ready (%s)", type(app.state.store).__name__)

    if app_settings.seed_demo_data and not await app.state.store.list_batches():
        batch = await load_demo_data(TraceabilityService(app.state.store, app_settings))
        logger.info("Loaded demo batch %s", batch.id)

    yield

    if owned:
        await app.state.store.close()
    logger.info("Batch store closed")


def create_app(
    store: Optional[BatchStore] = None, app_settings: Optional[Settings] = None
) -> FastAPI:
    app_settings = app_settings or default_settings
    logging.basicConfig(level=app_settings.log_level)

    app = FastAPI(
        title="Herb Traceability API",
        description=(
            "Records harvest, processing, testing and transfer events for "
            "Ayurvedic herb batches, scores compliance against approved "
            "collection zones, and serves QR codes that link consumers to "
            "each batch's provenance."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.store = store

    # Rate limiter
    app.state.limiter = limiter
    configure_rate_limit(app_settings.rate_limit)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Routers
    app.include_router(batches.router, prefix="/api/v1")
    app.include_router(verify.router, prefix="/api/v1")
    app.include_router(admin.router, prefix="/api/v1")

    return app

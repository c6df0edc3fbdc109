"""
Seed script -- populates the SQL store with sample data for reviewers.

Run (uses DATABASE_URL from the environment / .env):
    python seed.py

Creates:
  - the fully traced Ashwagandha demo batch (valid, score 100)
  - 4 extra batches at different lifecycle stages, including one
    collected outside every approved zone
"""

import asyncio
import logging
import sys
from datetime import datetime, timedelta, timezone

from src.config import settings
from src.domain.entities import (
    CollectionEvent,
    GpsLocation,
    LabResult,
    ProcessingEvent,
    QualityTestEvent,
    TransferEvent,
    new_event_id,
)
from src.domain.enums import (
    EntityType,
    EventKind,
    ProcessingStepType,
    QualityTestType,
)
from src.infrastructure.database import build_engine, build_session_factory, create_schema
from src.infrastructure.repositories import SqlBatchStore
from src.services.demo import load_demo_data
from src.services.traceability import TraceabilityService

logger = logging.getLogger("seed")

T0 = datetime(2024, 2, 1, 7, 0, tzinfo=timezone.utc)

# (species, quantity kg, collector, site name, lat, lng, stages)
BATCHES = [
    ("Bacopa monnieri (Brahmi)", 80, "Lakshmi Menon", "Wayanad, Kerala", 11.6854, 76.1320, 2),
    ("Tinospora cordifolia (Giloy)", 120, "Suresh Gowda", "Dharwad, Karnataka", 15.4589, 75.0078, 3),
    ("Ocimum sanctum (Tulsi)", 60, "Anil Sharma", "Jaipur, Rajasthan", 26.9124, 75.7873, 1),
    ("Curcuma longa (Turmeric)", 200, "Meena Pillai", "Thrissur, Kerala", 10.5276, 76.2144, 4),
]


async def seed_batches(service: TraceabilityService) -> int:
    created = 0
    for i, (species, qty, collector, site, lat, lng, stages) in enumerate(BATCHES):
        start = T0 + timedelta(days=7 * i)
        batch = await service.create_batch(species, start.date(), qty)

        await service.record_event(
            CollectionEvent(
                id=new_event_id(EventKind.COLLECTION),
                batch_id=batch.id,
                timestamp=start,
                collector_id=f"farmer-{i + 2:03d}",
                collector_name=collector,
                species=species.split(" (")[0],
                gps_location=GpsLocation(lat, lng),
                location_name=site,
            )
        )
        if stages >= 2:
            await service.record_event(
                ProcessingEvent(
                    id=new_event_id(EventKind.PROCESSING),
                    batch_id=batch.id,
                    timestamp=start + timedelta(days=1),
                    processor_id="processor-001",
                    processor_name="Kerala Ayurveda Processing Co.",
                    step_type=ProcessingStepType.DRYING,
                    temperature_c=42,
                    duration_hours=48,
                )
            )
        if stages >= 3:
            await service.record_event(
                QualityTestEvent(
                    id=new_event_id(EventKind.QUALITY_TEST),
                    batch_id=batch.id,
                    timestamp=start + timedelta(days=3),
                    lab_id="lab-001",
                    lab_name="AYUSH Certified Testing Lab",
                    test_type=QualityTestType.PESTICIDE,
                    result=LabResult(
                        passed=True, value=0.01, unit="mg/kg", standard="≤0.1 mg/kg"
                    ),
                )
            )
        if stages >= 4:
            await service.record_event(
                TransferEvent(
                    id=new_event_id(EventKind.TRANSFER),
                    batch_id=batch.id,
                    timestamp=start + timedelta(days=5),
                    from_entity="AYUSH Certified Testing Lab",
                    to_entity="Himalaya Herbals Manufacturing",
                    entity_type=EntityType.MANUFACTURER,
                    quantity=qty,
                )
            )
        created += 1
    return created


async def seed() -> None:
    engine = build_engine(settings.database_url)
    await create_schema(engine)
    store = SqlBatchStore(build_session_factory(engine), engine=engine)
    service = TraceabilityService(store, settings)

    try:
        if await store.list_batches():
            logger.info("Database already seeded -- skipping")
            return
        demo = await load_demo_data(service)
        logger.info("Demo batch %s", demo.id)
        n = await seed_batches(service)
        logger.info("Seeded %d additional batches (harvest dates from %s)", n, T0.date().isoformat())
    finally:
        await store.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, stream=sys.stdout)
    asyncio.run(seed())

"""
Demo data -- one fully traced Ashwagandha batch.

Creates:
  - batch: Withania somnifera (Ashwagandha), 150 kg, harvested 2024-01-15
  - collection in Munnar, Kerala (inside the Kerala approved zone)
  - 72 h shade drying at 40 °C
  - moisture test, 8.2 % against the AYUSH <=10 % guideline (passed)

The batch verifies as valid with a compliance score of 100.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

from src.domain.entities import (
    Batch,
    CollectionEvent,
    GpsLocation,
    LabResult,
    ProcessingEvent,
    QualityMetrics,
    QualityTestEvent,
)
from src.domain.enums import ProcessingStepType, QualityTestType

from .traceability import TraceabilityService

SPECIES = "Withania somnifera (Ashwagandha)"


def _utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


async def load_demo_data(service: TraceabilityService) -> Batch:
    batch = await service.create_batch(SPECIES, date(2024, 1, 15), 150)

    await service.record_event(
        CollectionEvent(
            id="collection-001",
            batch_id=batch.id,
            timestamp=_utc(2024, 1, 15, 6, 30),
            collector_id="farmer-001",
            collector_name="Rajesh Kumar",
            species="Withania somnifera",
            gps_location=GpsLocation(10.8505, 76.2711),
            location_name="Munnar, Kerala",
            quality_metrics=QualityMetrics(
                moisture=12.5,
                appearance="Fresh, unblemished roots",
                aroma="Strong, characteristic",
            ),
            photos=["harvest-001.jpg"],
        )
    )
    await service.record_event(
        ProcessingEvent(
            id="processing-001",
            batch_id=batch.id,
            timestamp=_utc(2024, 1, 16, 10, 0),
            processor_id="processor-001",
            processor_name="Kerala Ayurveda Processing Co.",
            step_type=ProcessingStepType.DRYING,
            temperature_c=40,
            duration_hours=72,
            notes="Shade dried at controlled temperature",
        )
    )
    return await service.record_event(
        QualityTestEvent(
            id="quality-001",
            batch_id=batch.id,
            timestamp=_utc(2024, 1, 18, 14, 0),
            lab_id="lab-001",
            lab_name="AYUSH Certified Testing Lab",
            test_type=QualityTestType.MOISTURE,
            result=LabResult(
                passed=True, value=8.2, unit="%", standard="AYUSH Guidelines ≤10%"
            ),
            certificate_url="cert-moisture-001.pdf",
        )
    )

"""
Domain entities with business logic.

Patterns used
-------------
- **Explicit tagged union** for events: every event class carries a fixed
  ``kind`` discriminant, so consumers branch on ``event.kind`` instead of
  probing for fields.
- **Monotonic lifecycle** on ``Batch``: appending an event can only move
  the status forward (harvested -> ... -> distributed), never back.
"""

from __future__ import annotations

import secrets
import time
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional, Union

from .enums import (
    BatchStatus,
    EntityType,
    EventKind,
    ProcessingStepType,
    QualityTestType,
)

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


class BatchNotFound(Exception):
    """Raised when an operation targets a batch id that does not exist."""

    def __init__(self, batch_id: str):
        super().__init__(f"Batch not found: {batch_id}")
        self.batch_id = batch_id


class RoleNotPermitted(Exception):
    """Raised when a role records an event kind it is not allowed to."""


# ── Value Objects ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class GpsLocation:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class QualityMetrics:
    moisture: float = 12.0
    appearance: str = "Good quality"
    aroma: str = "Normal"


@dataclass(frozen=True)
class LabResult:
    passed: bool
    value: float
    unit: str = "%"
    standard: str = ""


# ── Events ────────────────────────────────────────────────────────────


@dataclass
class CollectionEvent:
    id: str
    batch_id: str
    timestamp: datetime
    collector_id: str
    collector_name: str
    species: str
    gps_location: GpsLocation
    location_name: str = ""
    quality_metrics: QualityMetrics = field(default_factory=QualityMetrics)
    photos: list[str] = field(default_factory=list)
    prev_hash: str = ""
    hash: str = ""
    kind: EventKind = field(default=EventKind.COLLECTION, init=False)


@dataclass
class ProcessingEvent:
    id: str
    batch_id: str
    timestamp: datetime
    processor_id: str
    processor_name: str
    step_type: ProcessingStepType
    duration_hours: float = 24.0
    temperature_c: Optional[float] = None
    notes: str = "Processing completed"
    prev_hash: str = ""
    hash: str = ""
    kind: EventKind = field(default=EventKind.PROCESSING, init=False)


@dataclass
class QualityTestEvent:
    id: str
    batch_id: str
    timestamp: datetime
    lab_id: str
    lab_name: str
    test_type: QualityTestType
    result: LabResult
    certificate_url: Optional[str] = None
    prev_hash: str = ""
    hash: str = ""
    kind: EventKind = field(default=EventKind.QUALITY_TEST, init=False)


@dataclass
class TransferEvent:
    id: str
    batch_id: str
    timestamp: datetime
    from_entity: str
    to_entity: str
    entity_type: EntityType
    quantity: float
    unit: str = "kg"
    signature: str = ""
    prev_hash: str = ""
    hash: str = ""
    kind: EventKind = field(default=EventKind.TRANSFER, init=False)


Event = Union[CollectionEvent, ProcessingEvent, QualityTestEvent, TransferEvent]


def status_for_event(event: Event) -> Optional[BatchStatus]:
    """Lifecycle status an event implies, or ``None`` if it implies none."""
    if event.kind == EventKind.COLLECTION:
        return BatchStatus.HARVESTED
    if event.kind == EventKind.PROCESSING:
        if event.step_type == ProcessingStepType.PACKAGING:
            return BatchStatus.PACKAGED
        return BatchStatus.PROCESSING
    if event.kind == EventKind.QUALITY_TEST:
        return BatchStatus.TESTED
    if event.kind == EventKind.TRANSFER:
        if event.entity_type == EntityType.MANUFACTURER:
            return BatchStatus.MANUFACTURED
        if event.entity_type == EntityType.RETAILER:
            return BatchStatus.DISTRIBUTED
        return None
    raise ValueError(f"Unknown event kind: {event.kind!r}")


# ── Aggregate ─────────────────────────────────────────────────────────


@dataclass
class Batch:
    id: str
    species: str
    harvest_date: date
    total_quantity: float
    unit: str = "kg"
    status: BatchStatus = BatchStatus.HARVESTED
    qr_code: str = ""
    events: list[Event] = field(default_factory=list)

    def append(self, event: Event) -> None:
        """Append *event* and move the status forward if it implies so."""
        if event.batch_id != self.id:
            raise ValueError(
                f"Event {event.id} belongs to batch {event.batch_id}, not {self.id}"
            )
        self.events.append(event)
        self.advance_to(status_for_event(event))

    def advance_to(self, new_status: Optional[BatchStatus]) -> None:
        if new_status is not None and new_status.rank > self.status.rank:
            self.status = new_status

    @property
    def collection_events(self) -> list[CollectionEvent]:
        return [e for e in self.events if e.kind == EventKind.COLLECTION]

    @property
    def last_hash(self) -> str:
        return self.events[-1].hash if self.events else ""


# ── Identifiers ───────────────────────────────────────────────────────


def generate_batch_id(prefix: str = "ASH") -> str:
    """``PREFIX-<epoch ms>-<9 base36 chars>``, e.g. ``ASH-1705300200000-k3j9x0a1b``."""
    suffix = "".join(secrets.choice(_BASE36) for _ in range(9))
    return f"{prefix}-{int(time.time() * 1000)}-{suffix}"


def new_event_id(kind: EventKind) -> str:
    return f"{kind.value}-{int(time.time() * 1000)}-{uuid.uuid4().hex[:6]}"


def new_actor_id(role: str) -> str:
    return f"{role}-{uuid.uuid4().hex[:8]}"


# ── Serialisation (kind-specific fields only) ─────────────────────────


def event_to_payload(event: Event) -> dict[str, Any]:
    """Kind-specific fields of *event* as a JSON-safe dict."""
    if event.kind == EventKind.COLLECTION:
        return {
            "collector_id": event.collector_id,
            "collector_name": event.collector_name,
            "species": event.species,
            "gps_location": {
                "latitude": event.gps_location.latitude,
                "longitude": event.gps_location.longitude,
            },
            "location_name": event.location_name,
            "quality_metrics": {
                "moisture": event.quality_metrics.moisture,
                "appearance": event.quality_metrics.appearance,
                "aroma": event.quality_metrics.aroma,
            },
            "photos": list(event.photos),
        }
    if event.kind == EventKind.PROCESSING:
        return {
            "processor_id": event.processor_id,
            "processor_name": event.processor_name,
            "step_type": event.step_type.value,
            "duration_hours": event.duration_hours,
            "temperature_c": event.temperature_c,
            "notes": event.notes,
        }
    if event.kind == EventKind.QUALITY_TEST:
        return {
            "lab_id": event.lab_id,
            "lab_name": event.lab_name,
            "test_type": event.test_type.value,
            "result": {
                "passed": event.result.passed,
                "value": event.result.value,
                "unit": event.result.unit,
                "standard": event.result.standard,
            },
            "certificate_url": event.certificate_url,
        }
    if event.kind == EventKind.TRANSFER:
        return {
            "from_entity": event.from_entity,
            "to_entity": event.to_entity,
            "entity_type": event.entity_type.value,
            "quantity": event.quantity,
            "unit": event.unit,
            "signature": event.signature,
        }
    raise ValueError(f"Unknown event kind: {event.kind!r}")


def event_from_payload(
    kind: EventKind | str,
    *,
    id: str,
    batch_id: str,
    timestamp: datetime,
    payload: dict[str, Any],
    prev_hash: str = "",
    hash: str = "",
) -> Event:
    """Inverse of :func:`event_to_payload`."""
    kind = EventKind(kind)
    common = dict(
        id=id, batch_id=batch_id, timestamp=timestamp,
        prev_hash=prev_hash, hash=hash,
    )
    if kind == EventKind.COLLECTION:
        return CollectionEvent(
            **common,
            collector_id=payload["collector_id"],
            collector_name=payload["collector_name"],
            species=payload["species"],
            gps_location=GpsLocation(**payload["gps_location"]),
            location_name=payload.get("location_name", ""),
            quality_metrics=QualityMetrics(**payload.get("quality_metrics", {})),
            photos=list(payload.get("photos", [])),
        )
    if kind == EventKind.PROCESSING:
        return ProcessingEvent(
            **common,
            processor_id=payload["processor_id"],
            processor_name=payload["processor_name"],
            step_type=ProcessingStepType(payload["step_type"]),
            duration_hours=payload["duration_hours"],
            temperature_c=payload.get("temperature_c"),
            notes=payload.get("notes", ""),
        )
    if kind == EventKind.QUALITY_TEST:
        return QualityTestEvent(
            **common,
            lab_id=payload["lab_id"],
            lab_name=payload["lab_name"],
            test_type=QualityTestType(payload["test_type"]),
            result=LabResult(**payload["result"]),
            certificate_url=payload.get("certificate_url"),
        )
    return TransferEvent(
        **common,
        from_entity=payload["from_entity"],
        to_entity=payload["to_entity"],
        entity_type=EntityType(payload["entity_type"]),
        quantity=payload["quantity"],
        unit=payload.get("unit", "kg"),
        signature=payload.get("signature", ""),
    )

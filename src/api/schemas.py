"""Pydantic request / response schemas for the REST API."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field

from src.domain.compliance import ApprovedZone, ComplianceReport, VerificationResult
from src.domain.entities import (
    Batch,
    CollectionEvent,
    Event,
    GpsLocation,
    LabResult,
    ProcessingEvent,
    QualityMetrics,
    QualityTestEvent,
    TransferEvent,
    event_to_payload,
    new_actor_id,
    new_event_id,
)
from src.domain.enums import (
    BatchStatus,
    EntityType,
    EventKind,
    ProcessingStepType,
    QualityTestType,
)
from src.domain.timeline import MapView, TimelineEntry


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _aware(ts: Optional[datetime]) -> datetime:
    if ts is None:
        return _now()
    return ts if ts.tzinfo else ts.replace(tzinfo=timezone.utc)


# ── Requests ──────────────────────────────────────────────────────────


class GpsLocationIn(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class QualityMetricsIn(BaseModel):
    moisture: float = Field(12.0, ge=0, le=100)
    appearance: str = "Good quality"
    aroma: str = "Normal"


class LabResultIn(BaseModel):
    passed: bool
    value: float = 0.0
    unit: str = "%"
    standard: str = ""


class CollectionEventIn(BaseModel):
    kind: Literal["collection"] = "collection"
    collector_name: str = Field(..., min_length=1)
    collector_id: Optional[str] = None
    species: Optional[str] = Field(
        None, description="Defaults to the batch species."
    )
    gps_location: GpsLocationIn
    location_name: str = ""
    quality_metrics: QualityMetricsIn = Field(default_factory=QualityMetricsIn)
    photos: list[str] = []
    timestamp: Optional[datetime] = None

    def to_event(self, batch: Batch) -> CollectionEvent:
        return CollectionEvent(
            id=new_event_id(EventKind.COLLECTION),
            batch_id=batch.id,
            timestamp=_aware(self.timestamp),
            collector_id=self.collector_id or new_actor_id("farmer"),
            collector_name=self.collector_name,
            species=self.species or batch.species,
            gps_location=GpsLocation(**self.gps_location.model_dump()),
            location_name=self.location_name,
            quality_metrics=QualityMetrics(**self.quality_metrics.model_dump()),
            photos=list(self.photos),
        )


class ProcessingEventIn(BaseModel):
    kind: Literal["processing"] = "processing"
    processor_name: str = Field(..., min_length=1)
    processor_id: Optional[str] = None
    step_type: ProcessingStepType
    temperature_c: Optional[float] = None
    duration_hours: float = Field(24.0, ge=0)
    notes: str = "Processing completed"
    timestamp: Optional[datetime] = None

    def to_event(self, batch: Batch) -> ProcessingEvent:
        return ProcessingEvent(
            id=new_event_id(EventKind.PROCESSING),
            batch_id=batch.id,
            timestamp=_aware(self.timestamp),
            processor_id=self.processor_id or new_actor_id("processor"),
            processor_name=self.processor_name,
            step_type=self.step_type,
            duration_hours=self.duration_hours,
            temperature_c=self.temperature_c,
            notes=self.notes,
        )


class QualityTestEventIn(BaseModel):
    kind: Literal["quality_test"] = "quality_test"
    lab_name: str = Field(..., min_length=1)
    lab_id: Optional[str] = None
    test_type: QualityTestType
    result: LabResultIn
    certificate_url: Optional[str] = None
    timestamp: Optional[datetime] = None

    def to_event(self, batch: Batch) -> QualityTestEvent:
        return QualityTestEvent(
            id=new_event_id(EventKind.QUALITY_TEST),
            batch_id=batch.id,
            timestamp=_aware(self.timestamp),
            lab_id=self.lab_id or new_actor_id("lab"),
            lab_name=self.lab_name,
            test_type=self.test_type,
            result=LabResult(**self.result.model_dump()),
            certificate_url=self.certificate_url,
        )


class TransferEventIn(BaseModel):
    kind: Literal["transfer"] = "transfer"
    from_entity: str = Field(..., min_length=1)
    to_entity: str = Field(..., min_length=1)
    entity_type: EntityType
    quantity: float = Field(..., gt=0)
    unit: str = "kg"
    signature: str = ""
    timestamp: Optional[datetime] = None

    def to_event(self, batch: Batch) -> TransferEvent:
        return TransferEvent(
            id=new_event_id(EventKind.TRANSFER),
            batch_id=batch.id,
            timestamp=_aware(self.timestamp),
            from_entity=self.from_entity,
            to_entity=self.to_entity,
            entity_type=self.entity_type,
            quantity=self.quantity,
            unit=self.unit,
            signature=self.signature,
        )


EventIn = Annotated[
    Union[CollectionEventIn, ProcessingEventIn, QualityTestEventIn, TransferEventIn],
    Field(discriminator="kind"),
]


class BatchCreateRequest(BaseModel):
    species: str = Field(..., min_length=1)
    quantity: float = Field(..., gt=0)
    unit: Optional[str] = Field(None, max_length=16)
    harvest_date: Optional[date] = Field(None, description="Defaults to today.")
    collection: Optional[CollectionEventIn] = Field(
        None, description="Optional collection event recorded with the batch."
    )


class ScanRequest(BaseModel):
    payload: str = Field(..., min_length=1, description="Decoded QR text.")


# ── Responses ─────────────────────────────────────────────────────────


class EventResponse(BaseModel):
    id: str
    kind: EventKind
    batch_id: str
    timestamp: datetime
    data: dict[str, Any]
    prev_hash: str
    hash: str

    @classmethod
    def from_entity(cls, event: Event) -> "EventResponse":
        return cls(
            id=event.id,
            kind=event.kind,
            batch_id=event.batch_id,
            timestamp=event.timestamp,
            data=event_to_payload(event),
            prev_hash=event.prev_hash,
            hash=event.hash,
        )


class BatchSummaryResponse(BaseModel):
    id: str
    species: str
    harvest_date: date
    total_quantity: float
    unit: str
    status: BatchStatus
    qr_code: str
    event_count: int

    @classmethod
    def from_entity(cls, batch: Batch) -> "BatchSummaryResponse":
        return cls(
            id=batch.id,
            species=batch.species,
            harvest_date=batch.harvest_date,
            total_quantity=batch.total_quantity,
            unit=batch.unit,
            status=batch.status,
            qr_code=batch.qr_code,
            event_count=len(batch.events),
        )


class BatchResponse(BatchSummaryResponse):
    events: list[EventResponse] = []

    @classmethod
    def from_entity(cls, batch: Batch) -> "BatchResponse":
        summary = BatchSummaryResponse.from_entity(batch)
        return cls(
            **summary.model_dump(),
            events=[EventResponse.from_entity(e) for e in batch.events],
        )


class VerificationResponse(BaseModel):
    valid: bool
    violations: list[str]
    compliance_score: int

    model_config = {"from_attributes": True}

    @classmethod
    def from_result(cls, result: VerificationResult) -> "VerificationResponse":
        return cls.model_validate(result)


class ComplianceReportResponse(BaseModel):
    batch_id: str
    generated_at: datetime
    generated_by: str
    ayush_compliance: bool
    organic_certified: bool
    fair_trade: bool
    sustainability_score: int
    violations: list[str]

    model_config = {"from_attributes": True}

    @classmethod
    def from_report(cls, report: ComplianceReport) -> "ComplianceReportResponse":
        return cls.model_validate(report)


class TimelineEntryResponse(BaseModel):
    event_id: str
    kind: EventKind
    timestamp: datetime
    title: str
    details: dict[str, Any]

    model_config = {"from_attributes": True}


class MapMarkerResponse(BaseModel):
    latitude: float
    longitude: float
    species: str
    location_name: str
    collector_name: str
    date: str
    appearance: str

    model_config = {"from_attributes": True}


class MapViewResponse(BaseModel):
    markers: list[MapMarkerResponse]
    center: tuple[float, float]
    zoom: Optional[int] = None
    bounds: Optional[tuple[tuple[float, float], tuple[float, float]]] = None

    model_config = {"from_attributes": True}

    @classmethod
    def from_view(cls, view: MapView) -> "MapViewResponse":
        return cls.model_validate(view)


def timeline_response(entries: list[TimelineEntry]) -> list[TimelineEntryResponse]:
    return [TimelineEntryResponse.model_validate(e) for e in entries]


class VerifyBatchResponse(BaseModel):
    batch_id: str
    found: bool
    batch: Optional[BatchResponse] = None
    verification: VerificationResponse
    report: Optional[ComplianceReportResponse] = None
    chain_intact: bool = False
    timeline: list[TimelineEntryResponse] = []
    map: Optional[MapViewResponse] = None


class ZoneResponse(BaseModel):
    name: str
    latitude: float
    longitude: float
    radius_m: float

    model_config = {"from_attributes": True}

    @classmethod
    def from_zone(cls, zone: ApprovedZone) -> "ZoneResponse":
        return cls.model_validate(zone)


class StatsResponse(BaseModel):
    total_batches: int
    active_batches: int
    compliance_rate: float
    recent_batches: list[BatchSummaryResponse]


class HealthResponse(BaseModel):
    status: str = "ok"
    store: str


class ErrorResponse(BaseModel):
    detail: str

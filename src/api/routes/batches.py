"""
Batch endpoints
===============

POST /api/v1/batches                           -- create a batch (farmer)
GET  /api/v1/batches                           -- list batches
GET  /api/v1/batches/{batch_id}                -- batch with its events
POST /api/v1/batches/{batch_id}/events         -- record an event (role-gated)
GET  /api/v1/batches/{batch_id}/timeline       -- provenance timeline
GET  /api/v1/batches/{batch_id}/map            -- collection map markers
GET  /api/v1/batches/{batch_id}/compliance-report
GET  /api/v1/batches/{batch_id}/qrcode         -- PNG of the verify URL
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Request, Response

from src.api.dependencies import get_role, get_service
from src.api.middleware import current_rate_limit, limiter
from src.api.schemas import (
    BatchCreateRequest,
    BatchResponse,
    BatchSummaryResponse,
    ComplianceReportResponse,
    EventIn,
    MapViewResponse,
    TimelineEntryResponse,
    timeline_response,
)
from src.domain.entities import Batch, BatchNotFound, RoleNotPermitted
from src.domain.enums import UserRole
from src.domain.timeline import build_map_view, build_timeline
from src.infrastructure.qr_renderer import render_png
from src.services.traceability import TraceabilityService

router = APIRouter(prefix="/batches", tags=["batches"])


async def _load(service: TraceabilityService, batch_id: str) -> Batch:
    try:
        return await service.get_batch(batch_id)
    except BatchNotFound:
        raise HTTPException(status_code=404, detail="Batch not found")


@router.post(
    "",
    status_code=201,
    response_model=BatchResponse,
    summary="Create a batch",
    description=(
        "Registers a new harvested batch.  If ``collection`` is given, the "
        "collection event is recorded immediately."
    ),
)
@limiter.limit(current_rate_limit)
async def create_batch(
    request: Request,
    body: BatchCreateRequest,
    role: Optional[UserRole] = Depends(get_role),
    service: TraceabilityService = Depends(get_service),
):
    if role is not None and role != UserRole.FARMER:
        raise HTTPException(
            status_code=403, detail=f"Role '{role.value}' cannot create batches"
        )

    batch = await service.create_batch(
        species=body.species,
        harvest_date=body.harvest_date or date.today(),
        quantity=body.quantity,
        unit=body.unit,
    )
    if body.collection:
        batch = await service.record_event(body.collection.to_event(batch), role)
    return BatchResponse.from_entity(batch)


@router.get(
    "",
    response_model=list[BatchSummaryResponse],
    summary="List all batches",
)
@limiter.limit(current_rate_limit)
async def list_batches(
    request: Request,
    service: TraceabilityService = Depends(get_service),
):
    return [BatchSummaryResponse.from_entity(b) for b in await service.list_batches()]


@router.get(
    "/{batch_id}",
    response_model=BatchResponse,
    summary="Get a batch with its events",
)
@limiter.limit(current_rate_limit)
async def get_batch(
    request: Request,
    batch_id: str,
    service: TraceabilityService = Depends(get_service),
):
    return BatchResponse.from_entity(await _load(service, batch_id))


@router.post(
    "/{batch_id}/events",
    status_code=201,
    response_model=BatchResponse,
    summary="Record a supply-chain event",
    description=(
        "Body is one of the event kinds, selected by ``kind``.  With an "
        "``X-User-Role`` header, farmers may only record collection, "
        "processors processing, labs quality_test and manufacturers "
        "transfer events."
    ),
)
@limiter.limit(current_rate_limit)
async def record_event(
    request: Request,
    batch_id: str,
    body: EventIn = Body(...),
    role: Optional[UserRole] = Depends(get_role),
    service: TraceabilityService = Depends(get_service),
):
    batch = await _load(service, batch_id)
    try:
        batch = await service.record_event(body.to_event(batch), role)
    except RoleNotPermitted as exc:
        raise HTTPException(status_code=403, detail=str(exc))
    except BatchNotFound:
        raise HTTPException(status_code=404, detail="Batch not found")
    return BatchResponse.from_entity(batch)


@router.get(
    "/{batch_id}/timeline",
    response_model=list[TimelineEntryResponse],
    summary="Provenance timeline, oldest first",
)
@limiter.limit(current_rate_limit)
async def get_timeline(
    request: Request,
    batch_id: str,
    service: TraceabilityService = Depends(get_service),
):
    batch = await _load(service, batch_id)
    return timeline_response(build_timeline(batch.events))


@router.get(
    "/{batch_id}/map",
    response_model=MapViewResponse,
    summary="Collection points and viewport",
)
@limiter.limit(current_rate_limit)
async def get_map(
    request: Request,
    batch_id: str,
    service: TraceabilityService = Depends(get_service),
):
    batch = await _load(service, batch_id)
    return MapViewResponse.from_view(build_map_view(batch.events))


@router.get(
    "/{batch_id}/compliance-report",
    response_model=ComplianceReportResponse,
    summary="Generate a compliance report",
    description="Unknown batch ids yield a zero-score report with 'Batch not found'.",
)
@limiter.limit(current_rate_limit)
async def get_compliance_report(
    request: Request,
    batch_id: str,
    service: TraceabilityService = Depends(get_service),
):
    return ComplianceReportResponse.from_report(
        await service.compliance_report(batch_id)
    )


@router.get(
    "/{batch_id}/qrcode",
    summary="QR code (PNG) encoding the batch verify URL",
    responses={200: {"content": {"image/png": {}}}},
    response_class=Response,
)
@limiter.limit(current_rate_limit)
async def get_qrcode(
    request: Request,
    batch_id: str,
    service: TraceabilityService = Depends(get_service),
):
    batch = await _load(service, batch_id)
    return Response(content=render_png(service.qr_payload(batch)), media_type="image/png")

"""
Consumer verification endpoints
===============================

GET  /api/v1/verify/{batch_id} -- everything the verify page shows
POST /api/v1/verify/scan       -- same, from a scanned QR payload

An unknown batch id is not an error here: the response carries
``found=false`` and the fixed not-found verification result.
"""

from fastapi import APIRouter, Depends, HTTPException, Request

from src.api.dependencies import get_service
from src.api.middleware import current_rate_limit, limiter
from src.api.schemas import (
    BatchResponse,
    ComplianceReportResponse,
    MapViewResponse,
    ScanRequest,
    VerificationResponse,
    VerifyBatchResponse,
    timeline_response,
)
from src.domain.timeline import build_map_view, build_timeline
from src.services.traceability import TraceabilityService

router = APIRouter(prefix="/verify", tags=["verify"])


async def _verify(service: TraceabilityService, batch_id: str) -> VerifyBatchResponse:
    checked = await service.verify(batch_id)
    verification = VerificationResponse.from_result(checked.result)
    batch = checked.batch
    if batch is None:
        return VerifyBatchResponse(
            batch_id=batch_id, found=False, verification=verification
        )

    return VerifyBatchResponse(
        batch_id=batch.id,
        found=True,
        batch=BatchResponse.from_entity(batch),
        verification=verification,
        report=ComplianceReportResponse.from_report(checked.report),
        chain_intact=checked.chain_intact,
        timeline=timeline_response(build_timeline(batch.events)),
        map=MapViewResponse.from_view(build_map_view(batch.events)),
    )


@router.get(
    "/{batch_id}",
    response_model=VerifyBatchResponse,
    summary="Verify a batch",
)
@limiter.limit(current_rate_limit)
async def verify_batch(
    request: Request,
    batch_id: str,
    service: TraceabilityService = Depends(get_service),
):
    return await _verify(service, batch_id)


@router.post(
    "/scan",
    response_model=VerifyBatchResponse,
    summary="Verify a batch from a scanned QR payload",
    description="Accepts a verify URL (``.../verify/<batch_id>``) or a bare batch id.",
)
@limiter.limit(current_rate_limit)
async def scan(
    request: Request,
    body: ScanRequest,
    service: TraceabilityService = Depends(get_service),
):
    try:
        batch_id = service.resolve_qr(body.payload)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return await _verify(service, batch_id)

"""
Admin / dashboard endpoints
===========================

GET /api/v1/admin/health -- simple health check
GET /api/v1/admin/stats  -- dashboard overview (totals, compliance rate, recent)
GET /api/v1/admin/zones  -- approved collection zones
"""

from fastapi import APIRouter, Depends, Request

from src.api.dependencies import get_service
from src.api.middleware import current_rate_limit, limiter
from src.api.schemas import (
    BatchSummaryResponse,
    HealthResponse,
    StatsResponse,
    ZoneResponse,
)
from src.domain.compliance import APPROVED_ZONES
from src.services.traceability import TraceabilityService

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get(
    "/stats",
    response_model=StatsResponse,
    summary="Dashboard overview",
)
@limiter.limit(current_rate_limit)
async def get_stats(
    request: Request,
    service: TraceabilityService = Depends(get_service),
):
    stats = await service.dashboard_stats()
    return StatsResponse(
        total_batches=stats.total_batches,
        active_batches=stats.active_batches,
        compliance_rate=stats.compliance_rate,
        recent_batches=[BatchSummaryResponse.from_entity(b) for b in stats.recent_batches],
    )


@router.get(
    "/zones",
    response_model=list[ZoneResponse],
    summary="Approved collection zones",
)
async def get_zones():
    return [ZoneResponse.from_zone(z) for z in APPROVED_ZONES]


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health(request: Request):
    return HealthResponse(store=type(request.app.state.store).__name__)

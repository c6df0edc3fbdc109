"""FastAPI dependency injection helpers."""

from typing import Optional

from fastapi import Header, Request

from src.domain.enums import UserRole
from src.services.traceability import TraceabilityService


def get_service(request: Request) -> TraceabilityService:
    """Service bound to the store injected at app construction / startup."""
    return TraceabilityService(request.app.state.store, request.app.state.settings)


def get_role(
    x_user_role: Optional[UserRole] = Header(
        None, description="Acting role; omit for unrestricted demo access."
    ),
) -> Optional[UserRole]:
    return x_user_role

"""System-level routes for diagnostics."""
from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel

from ..config import get_settings
from ..services.media_service import compensation_snapshot

router = APIRouter(prefix="/system", tags=["system"])


class HealthResponse(BaseModel):
    status: str
    app: str
    version: str
    compensation: dict[str, object]


@router.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    """Liveness plus counters for best-effort image cleanup."""

    settings = get_settings()
    return HealthResponse(
        status="ok",
        app=settings.app_name,
        version=settings.api_version,
        compensation=compensation_snapshot(),
    )


__all__ = ["router"]

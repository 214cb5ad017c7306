from __future__ import annotations

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from src.api.schemas.common import HealthResponse, utc_now
from src.api.state import get_state

router = APIRouter(tags=["Health"])


class StoreDiagnosticsResponse(BaseModel):
    """Diagnostics describing the one-time alert load."""

    alerts_loaded: int = Field(..., ge=0, description="Number of alerts held in the store.")
    records_rejected: int = Field(..., ge=0, description="Records skipped because they failed validation.")
    fell_back_to_empty: bool = Field(..., description="Whether the data source was unusable and the store is empty.")
    source_path: str = Field(..., description="Path of the alerts data file.")
    timestamp: str = Field(..., description="UTC timestamp when the diagnostics were produced (ISO string).")


@router.get(
    "/",
    response_model=HealthResponse,
    summary="Health check",
    description="Basic service liveness check used by deployment and the frontend.",
    operation_id="health_check",
)
def health_check() -> HealthResponse:
    """Return service liveness status."""
    return HealthResponse(status="ok", message="Healthy", timestamp=utc_now())


@router.get(
    "/api/health/store",
    response_model=StoreDiagnosticsResponse,
    summary="Alert store diagnostics",
    description="Reports how many alerts were loaded at startup and whether loading fell back to an empty store.",
    operation_id="store_diagnostics",
)
def store_diagnostics(request: Request) -> StoreDiagnosticsResponse:
    """Return alert store load diagnostics."""
    result = get_state(request.app).load_result
    return StoreDiagnosticsResponse(
        alerts_loaded=result.loaded,
        records_rejected=result.rejected,
        fell_back_to_empty=result.fell_back,
        source_path=result.source_path,
        timestamp=utc_now().isoformat(),
    )

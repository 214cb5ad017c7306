from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, HTTPException, Path, Query, Request
from fastapi.responses import JSONResponse

from src.api.schemas.alerts import Alert, MonthBucket
from src.api.schemas.common import ErrorResponse
from src.api.services.filters import Err, ValidationReason, validate_filter_criteria
from src.api.state import get_state

router = APIRouter(prefix="/api/alerts", tags=["Alerts"])


def _bad_request(reason: ValidationReason) -> JSONResponse:
    return JSONResponse(status_code=400, content=ErrorResponse(**reason.to_dict()).model_dump())


@router.get(
    "",
    response_model=List[Alert],
    responses={400: {"model": ErrorResponse}},
    summary="List alerts",
    description=(
        "List alerts for one calendar month (defaults to the current UTC month), "
        "optionally filtered by severity, subject and a startDate/endDate range. "
        "Results keep load order; limit/offset page through them."
    ),
    operation_id="list_alerts",
)
def list_alerts(
    request: Request,
    month: Optional[str] = Query(default=None, description="Month as YYYY-MM."),
    severity: Optional[str] = Query(default=None, description="LOW|MEDIUM|HIGH|CRITICAL"),
    subject: Optional[str] = Query(default=None, description="Exact subject match."),
    start_date: Optional[str] = Query(default=None, alias="startDate", description="ISO datetime start (inclusive)"),
    end_date: Optional[str] = Query(default=None, alias="endDate", description="ISO datetime end (inclusive)"),
    limit: Optional[int] = Query(default=None, description="Max alerts to return."),
    offset: int = Query(0, description="Number of matching alerts to skip."),
):
    """List alerts matching the filters."""
    state = get_state(request.app)
    result = validate_filter_criteria(
        month=month,
        severity=severity,
        subject=subject,
        start=start_date,
        end=end_date,
        limit=state.config.list_default_limit if limit is None else limit,
        offset=offset,
        max_limit=state.config.list_max_limit,
    )
    if isinstance(result, Err):
        return _bad_request(result.reason)
    return state.engine.list_filtered(result.value)


@router.get(
    "/subjects",
    response_model=List[str],
    summary="List alert subjects",
    description="Distinct subject labels present in the alert store (order not guaranteed).",
    operation_id="list_alert_subjects",
)
def list_subjects(request: Request) -> List[str]:
    """List distinct subjects."""
    return get_state(request.app).engine.list_subjects()


def _month_counts(request: Request, months: int, subjects: Optional[List[str]]):
    state = get_state(request.app)
    if months > state.config.max_months:
        return _bad_request(
            ValidationReason(field="months", message=f"months must be at most {state.config.max_months}")
        )
    return state.engine.monthly_counts(months, subjects=subjects)


@router.get(
    "/numbers-by-months",
    response_model=List[MonthBucket],
    summary="Alert counts by month (default window)",
    description="Same as /numbers-by-months/{months} using the configured default number of months.",
    operation_id="count_alerts_by_default_months",
)
def count_by_default_months(
    request: Request,
    subject: Optional[List[str]] = Query(default=None, description="Subjects to count (repeatable)."),
):
    """Month-bucketed alert counts over the default window."""
    return _month_counts(request, get_state(request.app).config.default_months, subject)


@router.get(
    "/numbers-by-months/{months}",
    response_model=List[MonthBucket],
    responses={400: {"model": ErrorResponse}},
    summary="Alert counts by month",
    description=(
        "Per-month alert counts for the last `months` calendar months, current UTC month first. "
        "Repeat `subject` to restrict the count to those subjects."
    ),
    operation_id="count_alerts_by_months",
)
def count_by_months(
    request: Request,
    months: int = Path(..., ge=0, description="Number of monthly buckets, including the current month."),
    subject: Optional[List[str]] = Query(default=None, description="Subjects to count (repeatable)."),
):
    """Month-bucketed alert counts."""
    return _month_counts(request, months, subject)


@router.get(
    "/{alert_id}",
    response_model=Alert,
    responses={404: {"model": ErrorResponse}},
    summary="Get alert",
    description="Fetch a single alert by id.",
    operation_id="get_alert",
)
def get_alert(
    request: Request,
    alert_id: str = Path(..., description="Alert identifier."),
) -> Alert:
    """Get an alert by id."""
    alert = get_state(request.app).engine.get_by_id(alert_id)
    if alert is None:
        raise HTTPException(status_code=404, detail="alert not found")
    return alert

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Generic, Optional, TypeVar, Union

from pydantic import ValidationError

from src.api.schemas.alerts import FilterCriteria

T = TypeVar("T")

# Query-string names used by the frontend, mapped to FilterCriteria fields.
_FIELD_ALIASES = {"start": "startDate", "end": "endDate"}

_MESSAGES = {
    "month": "Month must be in YYYY-MM format",
    "severity": "Severity must be one of LOW, MEDIUM, HIGH, CRITICAL",
    "subject": "Subject must be between 2 and 100 characters",
    "start": "Invalid ISO8601 date",
    "end": "Invalid ISO8601 date",
    "limit": "limit must be a positive integer",
    "offset": "offset must be a non-negative integer",
}


@dataclass(frozen=True)
class ValidationReason:
    """Why a filter was rejected; enough detail for the caller to fix the request."""

    field: Optional[str]
    message: str
    code: str = "VALIDATION_ERROR"

    def to_dict(self) -> Dict[str, Any]:
        return {"detail": self.message, "code": self.code, "meta": {"field": self.field}}


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    reason: ValidationReason


FilterResult = Union[Ok[FilterCriteria], Err]


def _reason_from(exc: ValidationError) -> ValidationReason:
    err = exc.errors()[0]
    loc = err.get("loc") or ()
    field = str(loc[0]) if loc else None
    if field is None:
        # Model-level checks (e.g. start after end) carry their own message.
        msg = str(err.get("msg", "Validation failed")).removeprefix("Value error, ")
        return ValidationReason(field=None, message=msg)
    return ValidationReason(
        field=_FIELD_ALIASES.get(field, field),
        message=_MESSAGES.get(field, str(err.get("msg", "Validation failed"))),
    )


# PUBLIC_INTERFACE
def validate_filter_criteria(
    *,
    month: Optional[str] = None,
    severity: Optional[str] = None,
    subject: Optional[str] = None,
    start: Optional[str] = None,
    end: Optional[str] = None,
    limit: Optional[int] = None,
    offset: int = 0,
    max_limit: Optional[int] = None,
) -> FilterResult:
    """
    Validate raw filter inputs into a FilterCriteria.

    Returns Ok(criteria) or Err(reason); never raises for bad input and has no side effects.
    """
    if limit is not None and max_limit is not None and limit > max_limit:
        return Err(ValidationReason(field="limit", message=f"limit must be at most {max_limit}"))
    try:
        criteria = FilterCriteria(
            month=month,
            severity=severity,
            subject=subject,
            start=start,
            end=end,
            limit=limit,
            offset=offset,
        )
    except ValidationError as exc:
        return Err(_reason_from(exc))
    return Ok(criteria)

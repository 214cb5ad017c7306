from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from src.api.schemas.common import Severity, parse_timestamp

MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"


class Alert(BaseModel):
    """A single recorded alert, immutable once loaded."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Unique alert identifier.")
    subject: str = Field(..., min_length=2, max_length=100, description="Categorical label used for grouping.")
    timestamp: str = Field(..., description="Original ISO-8601 timestamp; interpreted in UTC.")
    severity: Severity = Field(..., description="Alert severity.")
    title: str = Field(..., min_length=2, max_length=100, description="Short title.")
    message: str = Field(..., min_length=2, max_length=500, description="Human-readable message.")
    metadata: Dict[str, Any] = Field(..., description="Open, schema-less metadata.")

    @field_validator("timestamp")
    @classmethod
    def _timestamp_must_parse(cls, v: str) -> str:
        try:
            parse_timestamp(v)
        except ValueError as exc:
            raise ValueError("Invalid ISO8601 date") from exc
        # Stored as given; UTC interpretation happens at query time.
        return v

    def timestamp_utc(self) -> datetime:
        """Return the timestamp as an aware UTC datetime."""
        return parse_timestamp(self.timestamp)

    def month_key(self) -> str:
        """UTC calendar month of the timestamp as 'YYYY-MM'."""
        ts = self.timestamp_utc()
        return f"{ts.year:04d}-{ts.month:02d}"


class MonthBucket(BaseModel):
    """Alert count for one calendar month."""

    month: str = Field(..., pattern=MONTH_PATTERN, description="Calendar month as YYYY-MM.")
    count: int = Field(..., ge=0, description="Number of alerts in the month.")


class FilterCriteria(BaseModel):
    """Request-scoped filter for the alert list; built fresh per query."""

    model_config = ConfigDict(frozen=True)

    month: Optional[str] = Field(
        default=None,
        pattern=MONTH_PATTERN,
        description="Target month as YYYY-MM; null means the current UTC month.",
    )
    severity: Optional[Severity] = Field(default=None, description="Exact severity match.")
    subject: Optional[str] = Field(default=None, min_length=2, max_length=100, description="Exact subject match.")

    start: Optional[datetime] = Field(default=None, description="Inclusive lower bound on the alert timestamp.")
    end: Optional[datetime] = Field(default=None, description="Inclusive upper bound on the alert timestamp.")

    limit: Optional[int] = Field(default=None, ge=1, description="Max number of alerts to return.")
    offset: int = Field(0, ge=0, description="Number of matching alerts to skip.")

    @field_validator("start", "end", mode="before")
    @classmethod
    def _parse_bound(cls, v: Any) -> Any:
        if isinstance(v, str):
            try:
                return parse_timestamp(v)
            except ValueError as exc:
                raise ValueError("Invalid ISO8601 date") from exc
        if isinstance(v, datetime) and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @model_validator(mode="after")
    def _bounds_ordered(self) -> "FilterCriteria":
        if self.start is not None and self.end is not None and self.start > self.end:
            raise ValueError("startDate must not be after endDate")
        return self


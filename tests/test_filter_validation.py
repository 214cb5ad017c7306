from __future__ import annotations

from datetime import datetime, timezone

import pytest

from src.api.schemas.common import Severity
from src.api.services.filters import Err, Ok, validate_filter_criteria


def test_valid_filters_return_ok():
    result = validate_filter_criteria(month="2024-01", severity="LOW", subject="payments")
    assert isinstance(result, Ok)
    assert result.value.month == "2024-01"
    assert result.value.severity is Severity.LOW
    assert result.value.subject == "payments"


def test_all_filters_optional():
    result = validate_filter_criteria()
    assert isinstance(result, Ok)
    assert result.value.month is None
    assert result.value.offset == 0


@pytest.mark.parametrize("month", ["2024-13", "2024-00", "2024-1", "24-01", "2024/01", "january"])
def test_bad_month_is_rejected(month: str):
    result = validate_filter_criteria(month=month)
    assert isinstance(result, Err)
    assert result.reason.field == "month"
    assert result.reason.code == "VALIDATION_ERROR"
    assert "YYYY-MM" in result.reason.message


@pytest.mark.parametrize("severity", ["low", "URGENT", ""])
def test_bad_severity_is_rejected(severity: str):
    result = validate_filter_criteria(severity=severity)
    assert isinstance(result, Err)
    assert result.reason.field == "severity"


@pytest.mark.parametrize("subject", ["x", "s" * 101])
def test_subject_length_bounds(subject: str):
    result = validate_filter_criteria(subject=subject)
    assert isinstance(result, Err)
    assert result.reason.field == "subject"


def test_unparseable_date_bound_uses_query_name():
    result = validate_filter_criteria(start="yesterday")
    assert isinstance(result, Err)
    assert result.reason.field == "startDate"


def test_start_after_end_is_rejected():
    result = validate_filter_criteria(start="2024-02-10T00:00:00Z", end="2024-02-01T00:00:00Z")
    assert isinstance(result, Err)
    assert result.reason.field is None
    assert "after" in result.reason.message


def test_limit_above_max_is_rejected():
    result = validate_filter_criteria(limit=101, max_limit=100)
    assert isinstance(result, Err)
    assert result.reason.field == "limit"


@pytest.mark.parametrize("kwargs", [{"limit": 0}, {"offset": -1}])
def test_paging_bounds(kwargs):
    result = validate_filter_criteria(**kwargs)
    assert isinstance(result, Err)
    assert result.reason.field == next(iter(kwargs))


def test_reason_serializes_to_error_envelope():
    result = validate_filter_criteria(month="2024-13")
    assert isinstance(result, Err)
    body = result.reason.to_dict()
    assert body["code"] == "VALIDATION_ERROR"
    assert body["meta"] == {"field": "month"}


@pytest.mark.parametrize(
    ("kwargs", "field"),
    [
        ({"start": "0001-01-01T00:00:00+01:00"}, "startDate"),
        ({"start": "9999-12-31T23:00:00-05:00"}, "startDate"),
        ({"end": "0001-01-01T00:00:00+01:00"}, "endDate"),
        ({"end": "9999-12-31T23:00:00-05:00"}, "endDate"),
    ],
)
def test_out_of_range_date_bounds_are_rejected(kwargs, field: str):
    result = validate_filter_criteria(**kwargs)
    assert isinstance(result, Err)
    assert result.reason.field == field
    assert result.reason.code == "VALIDATION_ERROR"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("2024-02-01T08:00:00", datetime(2024, 2, 1, 8, 0, tzinfo=timezone.utc)),
        ("2024-02-01", datetime(2024, 2, 1, 0, 0, tzinfo=timezone.utc)),
        ("2024-02-01T09:00:00+01:00", datetime(2024, 2, 1, 8, 0, tzinfo=timezone.utc)),
        ("2024-02-01T08:00:00Z", datetime(2024, 2, 1, 8, 0, tzinfo=timezone.utc)),
    ],
)
def test_date_bounds_are_normalized_to_utc(raw: str, expected: datetime):
    result = validate_filter_criteria(start=raw, end=raw)
    assert isinstance(result, Ok)
    assert result.value.start == expected
    assert result.value.end == expected
    assert result.value.start.utcoffset().total_seconds() == 0

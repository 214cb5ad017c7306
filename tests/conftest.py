from __future__ import annotations

import json
from collections.abc import AsyncIterator, Callable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import httpx
import pytest

from src.api.config import BackendConfig
from src.api.db.alerts_source import build_store
from src.api.services.alerts_query import AlertQueryEngine
from src.api.store import AlertStore

# "Now" for every deterministic test: late February 2024 (a leap year).
FIXED_NOW = datetime(2024, 2, 20, 12, 0, tzinfo=timezone.utc)


def _record(**overrides: Any) -> dict:
    base = {
        "id": "00000000-0000-0000-0000-000000000000",
        "subject": "alpha",
        "timestamp": "2024-01-15T00:00:00Z",
        "severity": "LOW",
        "title": "Test alert",
        "message": "Something happened",
        "metadata": {},
    }
    base.update(overrides)
    return base


@pytest.fixture
def make_record() -> Callable[..., dict]:
    """Factory for raw alert dicts with valid defaults."""
    return _record


@pytest.fixture
def scenario_records() -> list[dict]:
    """The two-alert store used by the documented January/February scenario."""
    return [
        _record(id="1", subject="alpha", timestamp="2024-01-15T00:00:00Z", severity="LOW"),
        _record(id="2", subject="beta", timestamp="2024-02-15T00:00:00Z", severity="HIGH"),
    ]


@pytest.fixture
def dashboard_records() -> list[dict]:
    """A wider dataset spanning a year boundary, several subjects and severities."""
    return [
        _record(id="a1", subject="payments", timestamp="2023-11-02T10:00:00Z", severity="MEDIUM"),
        _record(id="a2", subject="auth", timestamp="2023-12-31T23:30:00Z", severity="CRITICAL"),
        # 00:30 at +02:00 is still 2023-12-31 in UTC.
        _record(id="a3", subject="payments", timestamp="2024-01-01T00:30:00+02:00", severity="HIGH"),
        _record(id="a4", subject="auth", timestamp="2024-01-10T08:00:00Z", severity="LOW"),
        _record(id="a5", subject="storage", timestamp="2024-01-20T08:00:00Z", severity="LOW"),
        _record(id="a6", subject="payments", timestamp="2024-02-01T00:00:00Z", severity="HIGH"),
        _record(id="a7", subject="auth", timestamp="2024-02-19T18:00:00Z", severity="HIGH"),
        _record(id="a8", subject="payments", timestamp="2024-02-29T12:00:00Z", severity="LOW"),
        _record(id="a9", subject="storage", timestamp="2022-06-01T00:00:00Z", severity="MEDIUM"),
    ]


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    return lambda: FIXED_NOW


@pytest.fixture
def scenario_engine(scenario_records: list[dict], fixed_clock) -> AlertQueryEngine:
    store, _ = build_store(scenario_records)
    return AlertQueryEngine(store, clock=fixed_clock)


@pytest.fixture
def dashboard_engine(dashboard_records: list[dict], fixed_clock) -> AlertQueryEngine:
    store, _ = build_store(dashboard_records)
    return AlertQueryEngine(store, clock=fixed_clock)


@pytest.fixture
def empty_engine(fixed_clock) -> AlertQueryEngine:
    return AlertQueryEngine(AlertStore.empty(), clock=fixed_clock)


@pytest.fixture
def alerts_file(tmp_path: Path, dashboard_records: list[dict]) -> Path:
    """JSON data file holding the dashboard dataset."""
    path = tmp_path / "alerts.json"
    path.write_text(json.dumps(dashboard_records), encoding="utf-8")
    return path


@pytest.fixture
def backend_config(alerts_file: Path) -> BackendConfig:
    return BackendConfig(alerts_data_path=str(alerts_file), max_months=24, list_default_limit=50, list_max_limit=100)


@pytest.fixture
def app(backend_config: BackendConfig, fixed_clock):
    """FastAPI app over the dashboard dataset with a pinned clock."""
    from src.api.main import create_app

    return create_app(backend_config, clock=fixed_clock)


@pytest.fixture
async def async_client(app) -> AsyncIterator[httpx.AsyncClient]:
    """Async HTTP client bound to the FastAPI ASGI app."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture(scope="module")
def anyio_backend() -> str:
    """Run anyio-marked tests on asyncio only (the project does not depend on trio)."""
    return "asyncio"

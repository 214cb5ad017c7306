from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from fastapi import FastAPI

from src.api.config import BackendConfig
from src.api.db.alerts_source import AlertLoadResult, load_alert_store
from src.api.services.alerts_query import AlertQueryEngine


@dataclass
class AppState:
    """Typed app.state container for shared singletons."""

    config: BackendConfig
    load_result: AlertLoadResult
    engine: AlertQueryEngine


# PUBLIC_INTERFACE
def init_state(app: FastAPI, config: BackendConfig, clock: Optional[Callable[[], datetime]] = None) -> None:
    """
    Load the alert store and attach the query engine to app.state.

    Runs to completion (or falls back to an empty store) before the app serves requests.
    """
    load_result = load_alert_store(config.alerts_data_path)
    app.state.state = AppState(
        config=config,
        load_result=load_result,
        engine=AlertQueryEngine(load_result.store, clock=clock),
    )


# PUBLIC_INTERFACE
def get_state(app: FastAPI) -> AppState:
    """Fetch typed AppState from a FastAPI app."""
    return app.state.state  # type: ignore[attr-defined]

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, List, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.config import BackendConfig, load_config
from src.api.routers import alerts, health
from src.api.state import init_state

openapi_tags = [
    {"name": "Health", "description": "Service health and alert store diagnostics."},
    {"name": "Alerts", "description": "Read-only alert queries: filtered lists, lookups, subjects and monthly counts."},
]

logger = logging.getLogger(__name__)


def _allowed_origins(config: BackendConfig) -> List[str]:
    # Local frontend by default, plus explicit frontend URL and optional extra origins.
    origins: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]
    origins.extend(config.cors_origins)
    # De-dupe while preserving order
    return list(dict.fromkeys(origins))


# PUBLIC_INTERFACE
def create_app(config: BackendConfig, clock: Optional[Callable[[], datetime]] = None) -> FastAPI:
    """Build the API: load the alert store, then wire CORS and routers."""
    app = FastAPI(
        title="Alert Dashboard API",
        description=(
            "Read-only backend for the alert monitoring dashboard. "
            "Alerts are loaded once at startup from a JSON file and served from memory."
        ),
        version="1.0.0",
        openapi_tags=openapi_tags,
    )

    # Level applies to this package only; handlers stay with the host process.
    logging.getLogger("src.api").setLevel(getattr(logging, config.log_level, logging.INFO))

    # Store is loaded before the app is returned, so no request sees a partial load.
    init_state(app, config, clock=clock)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_allowed_origins(config),
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(alerts.router)
    return app


app = create_app(load_config())

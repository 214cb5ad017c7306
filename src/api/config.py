from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple

logger = logging.getLogger(__name__)


def _env_int(name: str, default: int) -> int:
    """Parse an int env var with a default."""
    try:
        return int(os.getenv(name, str(default)))
    except Exception:
        return int(default)


def _env_str(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()


def _clamp_int(v: int, lo: int, hi: int) -> int:
    """Clamp integer to [lo, hi]."""
    return max(lo, min(hi, int(v)))


@dataclass(frozen=True)
class BackendConfig:
    """Runtime configuration loaded from env."""

    # JSON file holding the alert dataset loaded at startup.
    alerts_data_path: str

    # Month-bucket aggregation bounds.
    default_months: int = 12
    max_months: int = 120

    # Simple offset/limit paging for the filtered list.
    list_default_limit: int = 100
    list_max_limit: int = 500

    log_level: str = "INFO"

    # Extra CORS origins beyond the local frontend defaults.
    cors_origins: Tuple[str, ...] = ()


def _default_data_path() -> Path:
    # repo_root/src/api/config.py -> repo_root
    repo_root = Path(__file__).resolve().parents[2]
    return repo_root / "data" / "alerts.json"


def _env_cors_origins() -> List[str]:
    # Support both:
    # - standardized: FRONTEND_URL
    # - legacy: REACT_APP_FRONTEND_URL
    origins: List[str] = []
    frontend_url = os.getenv("FRONTEND_URL") or os.getenv("REACT_APP_FRONTEND_URL")
    if frontend_url:
        origins.append(frontend_url)
    # Comma-separated list for preview deployments, etc.
    raw = os.getenv("CORS_ALLOW_ORIGINS") or ""
    origins.extend(p.strip() for p in raw.split(",") if p.strip())
    return origins


# PUBLIC_INTERFACE
def load_config() -> BackendConfig:
    """Load BackendConfig from env vars, clamping numeric settings to sane bounds."""
    data_path = _env_str("ALERTS_DATA_FILE", str(_default_data_path()))

    max_months = _clamp_int(_env_int("ALERTS_MAX_MONTHS", 120), 1, 240)
    default_months = _clamp_int(_env_int("ALERTS_DEFAULT_MONTHS", 12), 1, max_months)

    list_max_limit = _clamp_int(_env_int("ALERTS_LIST_MAX_LIMIT", 500), 1, 1000)
    list_default_limit = _clamp_int(_env_int("ALERTS_LIST_DEFAULT_LIMIT", 100), 1, list_max_limit)

    log_level = _env_str("LOG_LEVEL", "INFO").upper()

    logger.info(
        "Resolved backend config data_path=%s max_months=%s list_max_limit=%s",
        data_path,
        max_months,
        list_max_limit,
    )

    return BackendConfig(
        alerts_data_path=data_path,
        default_months=default_months,
        max_months=max_months,
        list_default_limit=list_default_limit,
        list_max_limit=list_max_limit,
        log_level=log_level,
        cors_origins=tuple(_env_cors_origins()),
    )

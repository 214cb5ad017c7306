from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, List, Set, Tuple

from pydantic import ValidationError

from src.api.schemas.alerts import Alert
from src.api.store import AlertStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AlertLoadResult:
    """Outcome of the one-time bulk load, kept for diagnostics."""

    store: AlertStore
    source_path: str
    loaded: int
    rejected: int
    # True when the whole source was unusable and the store fell back to empty.
    fell_back: bool


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    err = errors[0]
    loc = ".".join(str(p) for p in err.get("loc", ()))
    return f"{loc}: {err.get('msg', 'invalid')}" if loc else str(err.get("msg", "invalid"))


# PUBLIC_INTERFACE
def build_store(records: Iterable[Any]) -> Tuple[AlertStore, int]:
    """
    Validate raw records into an AlertStore.

    Invalid records are skipped and logged; returns (store, rejected_count).
    """
    alerts: List[Alert] = []
    seen_ids: Set[str] = set()
    rejected = 0
    for idx, raw in enumerate(records):
        try:
            alert = Alert.model_validate(raw)
        except ValidationError as exc:
            rejected += 1
            logger.warning("Rejected alert record index=%s reason=%s", idx, _first_error(exc))
            continue
        if alert.id in seen_ids:
            # Kept; lookups return the first occurrence.
            logger.warning("Duplicate alert id=%s at index=%s", alert.id, idx)
        seen_ids.add(alert.id)
        alerts.append(alert)
    return AlertStore(alerts), rejected


# PUBLIC_INTERFACE
def load_alert_store(path: str) -> AlertLoadResult:
    """
    Load alerts from a JSON file holding an array of alert objects.

    Never raises: an unreadable or malformed source yields an empty store.
    """
    source = Path(path)
    try:
        raw = json.loads(source.read_text(encoding="utf-8"))
    except FileNotFoundError:
        logger.warning("Alerts data file not found at %s; starting with an empty store", str(source))
        return AlertLoadResult(store=AlertStore.empty(), source_path=str(source), loaded=0, rejected=0, fell_back=True)
    except Exception:
        logger.exception("Failed reading/parsing alerts data file at %s; starting with an empty store", str(source))
        return AlertLoadResult(store=AlertStore.empty(), source_path=str(source), loaded=0, rejected=0, fell_back=True)

    if not isinstance(raw, list):
        logger.error(
            "Alerts data file at %s must contain a JSON array (got %s); starting with an empty store",
            str(source),
            type(raw).__name__,
        )
        return AlertLoadResult(store=AlertStore.empty(), source_path=str(source), loaded=0, rejected=0, fell_back=True)

    store, rejected = build_store(raw)
    logger.info("Loaded %s alerts from %s (rejected=%s)", len(store), str(source), rejected)
    return AlertLoadResult(store=store, source_path=str(source), loaded=len(store), rejected=rejected, fell_back=False)

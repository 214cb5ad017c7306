from __future__ import annotations

from typing import Iterable, Iterator, Tuple

from src.api.schemas.alerts import Alert


class AlertStore:
    """
    Read-only, process-lifetime collection of validated alerts.

    Written once by the bootstrap loader, then only read. Because it never
    changes after load, concurrent request handlers may iterate it without locks.
    Iteration order is the order alerts were loaded in.
    """

    __slots__ = ("_alerts",)

    def __init__(self, alerts: Iterable[Alert] = ()) -> None:
        self._alerts: Tuple[Alert, ...] = tuple(alerts)

    # PUBLIC_INTERFACE
    @classmethod
    def empty(cls) -> "AlertStore":
        """Store with no alerts (fallback when loading fails)."""
        return cls(())

    def __iter__(self) -> Iterator[Alert]:
        return iter(self._alerts)

    def __len__(self) -> int:
        return len(self._alerts)

    def __repr__(self) -> str:
        return f"AlertStore(size={len(self._alerts)})"

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from src.api.schemas.alerts import Alert, FilterCriteria, MonthBucket
from src.api.schemas.common import utc_now
from src.api.store import AlertStore

logger = logging.getLogger(__name__)


def _month_label(year: int, month_index: int) -> str:
    """Format a (year, zero-based month) pair as 'YYYY-MM'."""
    return f"{year:04d}-{month_index + 1:02d}"


def _shift_month(year: int, month_index: int, back: int) -> Tuple[int, int]:
    """
    Step `back` calendar months into the past from (year, zero-based month).

    Floor division borrows whole years; Python's modulo is already non-negative
    for a positive divisor, so the month index always lands in [0, 11].
    """
    m = month_index - back
    return year + m // 12, m % 12


def _utc_year_month(alert: Alert) -> Tuple[int, int]:
    ts = alert.timestamp_utc()
    return ts.year, ts.month - 1


class AlertQueryEngine:
    """
    Pure query layer over an AlertStore.

    Holds no mutable state of its own; `clock` supplies "now" and is read once per call.
    """

    def __init__(self, store: AlertStore, clock: Optional[Callable[[], datetime]] = None) -> None:
        self._store = store
        self._clock = clock or utc_now

    @property
    def store(self) -> AlertStore:
        return self._store

    def _now_utc(self) -> datetime:
        now = self._clock()
        if now.tzinfo is None:
            return now.replace(tzinfo=timezone.utc)
        return now.astimezone(timezone.utc)

    # PUBLIC_INTERFACE
    def list_subjects(self) -> List[str]:
        """Distinct subjects, each exactly once. Callers must not rely on the order."""
        return list(dict.fromkeys(alert.subject for alert in self._store))

    # PUBLIC_INTERFACE
    def get_by_id(self, alert_id: str) -> Optional[Alert]:
        """Return the alert with this id, or None. On duplicate ids the first loaded wins."""
        return next((alert for alert in self._store if alert.id == alert_id), None)

    # PUBLIC_INTERFACE
    def list_filtered(self, criteria: FilterCriteria) -> List[Alert]:
        """
        Alerts in one UTC calendar month, optionally narrowed by severity, subject and time bounds.

        The month defaults to the current UTC month. Store order is preserved,
        then offset/limit are applied.
        """
        if criteria.month is not None:
            target = criteria.month
        else:
            now = self._now_utc()
            target = _month_label(now.year, now.month - 1)

        matches: List[Alert] = []
        for alert in self._store:
            if alert.month_key() != target:
                continue
            if criteria.severity is not None and alert.severity != criteria.severity:
                continue
            if criteria.subject is not None and alert.subject != criteria.subject:
                continue
            if criteria.start is not None or criteria.end is not None:
                ts = alert.timestamp_utc()
                if criteria.start is not None and ts < criteria.start:
                    continue
                if criteria.end is not None and ts > criteria.end:
                    continue
            matches.append(alert)

        stop = None if criteria.limit is None else criteria.offset + criteria.limit
        return matches[criteria.offset : stop]

    # PUBLIC_INTERFACE
    def monthly_counts(self, months: int, subjects: Optional[Iterable[str]] = None) -> List[MonthBucket]:
        """
        Count alerts per calendar month, current UTC month first, walking backward.

        Returns exactly `months` buckets. A non-empty `subjects` restricts the count
        to those subjects; empty or None counts every subject.
        """
        if months < 0:
            raise ValueError("months must be >= 0")

        subject_set = frozenset(subjects or ())
        now = self._now_utc()

        counts: Dict[Tuple[int, int], int] = {}
        for alert in self._store:
            if subject_set and alert.subject not in subject_set:
                continue
            key = _utc_year_month(alert)
            counts[key] = counts.get(key, 0) + 1

        buckets: List[MonthBucket] = []
        for i in range(months):
            year, month_index = _shift_month(now.year, now.month - 1, i)
            buckets.append(MonthBucket(month=_month_label(year, month_index), count=counts.get((year, month_index), 0)))

        logger.debug("monthly_counts months=%s subjects=%s buckets=%s", months, sorted(subject_set), len(buckets))
        return buckets

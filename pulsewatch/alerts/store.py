"""In-memory alert history with acknowledge/resolve lifecycle.

History is append-only for the life of the process; alerts are only ever
mutated through ``acknowledge`` and ``resolve``. A lock guards both the
history and the per-service failure counters so concurrent health
requests cannot interleave updates.
"""

from __future__ import annotations

import logging
import threading

from ..health.models import CheckResult, Status, utc_now_iso
from .models import Alert, AlertStatus

logger = logging.getLogger(__name__)


class AlertStore:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._history: list[Alert] = []
        self._index: dict[str, Alert] = {}
        self._consecutive_failures: dict[str, int] = {}

    def add(self, alert: Alert) -> None:
        with self._lock:
            self._history.append(alert)
            self._index[alert.id] = alert

    def get(self, alert_id: str) -> Alert | None:
        with self._lock:
            return self._index.get(alert_id)

    def history(self) -> list[Alert]:
        with self._lock:
            return list(self._history)

    def active(self) -> list[Alert]:
        with self._lock:
            return [a for a in self._history if a.status == AlertStatus.ACTIVE]

    def acknowledge(self, alert_id: str) -> bool:
        """active → acknowledged. Any other state is a no-op returning False."""
        with self._lock:
            alert = self._index.get(alert_id)
            if alert is None or alert.status != AlertStatus.ACTIVE:
                return False
            alert.status = AlertStatus.ACKNOWLEDGED
        logger.info("Alert %s acknowledged", alert_id)
        return True

    def resolve(self, alert_id: str) -> bool:
        """active|acknowledged → resolved. Resolved is terminal."""
        with self._lock:
            alert = self._index.get(alert_id)
            if alert is None or alert.status not in (AlertStatus.ACTIVE, AlertStatus.ACKNOWLEDGED):
                return False
            alert.status = AlertStatus.RESOLVED
            alert.resolved_at = utc_now_iso()
        logger.info("Alert %s resolved", alert_id)
        return True

    # -- Consecutive failures -----------------------------------------------

    def record_result(self, result: CheckResult) -> int:
        """Update the unhealthy streak for ``result.service`` and return it."""
        with self._lock:
            if result.status == Status.UNHEALTHY:
                count = self._consecutive_failures.get(result.service, 0) + 1
            else:
                count = 0
            self._consecutive_failures[result.service] = count
            return count

    def consecutive_failures(self, service: str) -> int:
        with self._lock:
            return self._consecutive_failures.get(service, 0)

    def clear(self) -> None:
        with self._lock:
            self._history.clear()
            self._index.clear()
            self._consecutive_failures.clear()

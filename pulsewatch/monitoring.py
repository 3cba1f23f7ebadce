"""Health checks with alerting as a side effect.

The single entry point schedulers and HTTP handlers call. The report
returned is exactly what the checker produced; alert processing can log
but never change it or raise through it.
"""

from __future__ import annotations

import logging

from .alerts.engine import AlertEngine
from .alerts.store import AlertStore
from .config import Settings
from .health.checker import HealthChecker
from .health.models import HealthReport

logger = logging.getLogger(__name__)


class HealthMonitor:
    def __init__(self, checker: HealthChecker, engine: AlertEngine) -> None:
        self.checker = checker
        self.engine = engine

    @classmethod
    def from_settings(cls, settings: Settings, store: AlertStore | None = None) -> HealthMonitor:
        return cls(
            HealthChecker.from_settings(settings),
            AlertEngine.from_settings(settings, store=store),
        )

    @property
    def store(self) -> AlertStore:
        return self.engine.store

    async def run_health_checks_with_alerting(self, quick: bool = False) -> HealthReport:
        report = (
            await self.checker.run_quick_check()
            if quick
            else await self.checker.run_all_checks()
        )
        try:
            await self.engine.process(report)
        except Exception:
            logger.exception("Alert processing failed for %s report", report.status.value)
        return report

    async def close(self) -> None:
        await self.engine.close()
        await self.checker.close()

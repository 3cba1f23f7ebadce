"""Health check scheduler — runs the full check + alerting at an interval.

A single asyncio task; no external scheduler dependency. Results are
passed to an optional callback after every run.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from .models import HealthReport

if TYPE_CHECKING:
    from ..monitoring import HealthMonitor

logger = logging.getLogger(__name__)


class HealthScheduler:
    def __init__(
        self,
        monitor: HealthMonitor,
        interval_seconds: float,
        on_report: Callable[[HealthReport], Any] | None = None,
    ) -> None:
        self.monitor = monitor
        self.interval_seconds = interval_seconds
        self.on_report = on_report
        self._task: asyncio.Task[None] | None = None
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        if self._running:
            return
        if self.interval_seconds <= 0:
            logger.info("Health check interval not set — scheduler idle")
            return
        self._running = True
        self._task = asyncio.create_task(self._loop(), name="health-scheduler")
        logger.info("Health scheduler started: every %gs", self.interval_seconds)

    async def stop(self) -> None:
        self._running = False
        if self._task is not None:
            self._task.cancel()
            await asyncio.gather(self._task, return_exceptions=True)
            self._task = None
        logger.info("Health scheduler stopped")

    async def run_once(self) -> HealthReport:
        report = await self.monitor.run_health_checks_with_alerting()
        if self.on_report:
            try:
                self.on_report(report)
            except Exception:
                logger.exception("Health report callback error")
        return report

    async def _loop(self) -> None:
        while self._running:
            try:
                report = await self.run_once()
                logger.debug(
                    "Scheduled check: %s (%d/%d healthy)",
                    report.status.value, report.summary.healthy, report.summary.total,
                )
                await asyncio.sleep(self.interval_seconds)
            except asyncio.CancelledError:
                break
            except Exception:
                logger.exception("Scheduled health check error")
                await asyncio.sleep(min(self.interval_seconds, 60))

"""Alert engine — turns a health report into alerts and delivers them.

Delivery fans out to every enabled channel for every alert of a report at
once and joins with ``return_exceptions=True``: a channel that raises or
hangs until its timeout never blocks or fails delivery to the others.
Every attempt is logged as an ``alert_delivery`` event and returned as a
DeliveryOutcome.
"""

from __future__ import annotations

import asyncio
import traceback

import structlog

from ..clients import EmailProvider
from ..clients.resend import ResendEmailProvider
from ..config import Settings
from ..health.models import HealthReport
from .models import Alert, AlertChannel, AlertConfig, DeliveryOutcome
from .rules import evaluate_report
from .store import AlertStore

logger = structlog.get_logger(__name__)


class AlertEngine:
    def __init__(
        self,
        config: AlertConfig,
        store: AlertStore,
        channels: list[AlertChannel],
        environment: str = "development",
        version: str = "1.0.0",
    ) -> None:
        self.config = config
        self.store = store
        self.channels = channels
        self.environment = environment
        self.version = version

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        store: AlertStore | None = None,
        email_provider: EmailProvider | None = None,
    ) -> AlertEngine:
        from ..notifications import build_channels

        config = AlertConfig.from_settings(settings)
        if email_provider is None and settings.resend_api_key:
            email_provider = ResendEmailProvider(
                settings.resend_api_key,
                sender=settings.alert_email_from,
                timeout=settings.channel_timeout_seconds,
            )
        channels = build_channels(
            config,
            environment=settings.environment,
            version=settings.app_version,
            email_provider=email_provider,
            timeout=settings.channel_timeout_seconds,
        )
        return cls(
            config,
            store or AlertStore(),
            channels,
            environment=settings.environment,
            version=settings.app_version,
        )

    @property
    def enabled_channels(self) -> list[AlertChannel]:
        return [c for c in self.channels if c.enabled]

    async def process(self, report: HealthReport) -> list[DeliveryOutcome]:
        """Evaluate rules against ``report`` and deliver any resulting alerts."""
        streaks = {r.service: self.store.record_result(r) for r in report.checks}

        if not self.config.enabled:
            return []

        alerts = evaluate_report(report, self.config.thresholds, self.environment, self.version)
        for alert in alerts:
            if alert.service in streaks:
                alert.metadata["consecutive_failures"] = streaks[alert.service]
            self.store.add(alert)

        # alerts go out together so a stalled channel cannot hold back later alerts
        per_alert = await asyncio.gather(*(self.send_alert(alert) for alert in alerts))
        outcomes = [outcome for batch in per_alert for outcome in batch]

        if alerts:
            logger.info("alerts_generated", count=len(alerts), report_status=report.status.value)
        return outcomes

    async def send_alert(self, alert: Alert) -> list[DeliveryOutcome]:
        """Deliver one alert to every enabled channel concurrently."""
        channels = self.enabled_channels
        if not channels:
            logger.warning("alert_dropped", alert_id=alert.id, reason="no enabled channels")
            return []

        results = await asyncio.gather(
            *(self._deliver(alert, channel) for channel in channels),
            return_exceptions=True,
        )

        outcomes: list[DeliveryOutcome] = []
        for channel, result in zip(channels, results):
            if isinstance(result, DeliveryOutcome):
                outcomes.append(result)
            else:
                # _deliver only lets BaseException subclasses such as
                # CancelledError through
                outcomes.append(DeliveryOutcome(
                    alert_id=alert.id,
                    channel=channel.type,
                    success=False,
                    error={"type": type(result).__name__, "message": str(result)},
                ))
        return outcomes

    async def _deliver(self, alert: Alert, channel: AlertChannel) -> DeliveryOutcome:
        try:
            await channel.sender.send(alert)
        except Exception as exc:
            error = {"type": type(exc).__name__, "message": str(exc)}
            self._log_delivery(alert, channel, False, exc)
            return DeliveryOutcome(alert.id, channel.type, False, error)
        self._log_delivery(alert, channel, True)
        return DeliveryOutcome(alert.id, channel.type, True)

    def _log_delivery(
        self,
        alert: Alert,
        channel: AlertChannel,
        success: bool,
        exc: Exception | None = None,
    ) -> None:
        fields = {
            "service": "alerting",
            "alert": {
                "id": alert.id,
                "type": alert.type.value,
                "severity": alert.severity.value,
                "title": alert.title,
            },
            "channel": channel.type.value,
            "success": success,
            "environment": self.environment,
        }
        if exc is None:
            logger.info("alert_delivery", **fields)
            return
        fields["error"] = {
            "name": type(exc).__name__,
            "message": str(exc),
            "stack": "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
        }
        logger.error("alert_delivery", **fields)

    async def close(self) -> None:
        for channel in self.channels:
            await channel.sender.close()

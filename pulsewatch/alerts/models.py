"""Alert records, channel descriptors and alerting configuration."""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from ..config import DEFAULT_ALERT_RECIPIENT, Settings
from ..health.models import utc_now_iso

if TYPE_CHECKING:
    from ..notifications.base import Channel


class AlertType(str, Enum):
    HEALTH_CHECK_FAILURE = "health_check_failure"
    PERFORMANCE_DEGRADATION = "performance_degradation"
    SECURITY_INCIDENT = "security_incident"
    SYSTEM_ERROR = "system_error"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class AlertStatus(str, Enum):
    ACTIVE = "active"
    ACKNOWLEDGED = "acknowledged"
    RESOLVED = "resolved"


class ChannelType(str, Enum):
    WEBHOOK = "webhook"
    EMAIL = "email"
    SLACK = "slack"
    DISCORD = "discord"


def new_alert_id() -> str:
    return f"alert_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


@dataclass
class Alert:
    """A single notification derived from one rule firing on one result."""

    type: AlertType
    severity: Severity
    title: str
    message: str
    service: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    id: str = field(default_factory=new_alert_id)
    created_at: str = field(default_factory=utc_now_iso)
    resolved_at: str | None = None
    status: AlertStatus = AlertStatus.ACTIVE

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "severity": self.severity.value,
            "title": self.title,
            "message": self.message,
            "service": self.service,
            "metadata": self.metadata,
            "created_at": self.created_at,
            "resolved_at": self.resolved_at,
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Alert:
        return cls(
            id=data["id"],
            type=AlertType(data["type"]),
            severity=Severity(data["severity"]),
            title=data["title"],
            message=data["message"],
            service=data.get("service"),
            metadata=dict(data.get("metadata") or {}),
            created_at=data["created_at"],
            resolved_at=data.get("resolved_at"),
            status=AlertStatus(data.get("status", AlertStatus.ACTIVE.value)),
        )


@dataclass
class AlertChannel:
    """A delivery target: its type, config and whether it is switched on."""

    type: ChannelType
    sender: Channel
    config: dict[str, Any] = field(default_factory=dict)
    enabled: bool = True


@dataclass
class DeliveryOutcome:
    """Result of one alert → channel attempt."""

    alert_id: str
    channel: ChannelType
    success: bool
    error: dict[str, str] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "alert_id": self.alert_id,
            "channel": self.channel.value,
            "success": self.success,
            "error": self.error,
        }


@dataclass
class AlertThresholds:
    response_time_ms: int = 5000
    error_rate_percent: int = 10
    consecutive_failures: int = 3


@dataclass
class AlertConfig:
    enabled: bool = False
    webhook_url: str = ""
    email_recipients: list[str] = field(default_factory=list)
    fallback_email: str = DEFAULT_ALERT_RECIPIENT
    slack_webhook: str = ""
    slack_enabled: bool = False
    discord_webhook: str = ""
    discord_enabled: bool = False
    thresholds: AlertThresholds = field(default_factory=AlertThresholds)

    @classmethod
    def from_settings(cls, settings: Settings) -> AlertConfig:
        return cls(
            enabled=settings.alerting_enabled,
            webhook_url=settings.alert_webhook_url,
            email_recipients=settings.email_recipients,
            fallback_email=settings.alert_fallback_email or DEFAULT_ALERT_RECIPIENT,
            slack_webhook=settings.slack_webhook_url,
            slack_enabled=settings.slack_alerts_enabled,
            discord_webhook=settings.discord_webhook_url,
            discord_enabled=settings.discord_alerts_enabled,
            thresholds=AlertThresholds(
                response_time_ms=settings.alert_response_time_threshold,
                error_rate_percent=settings.alert_error_rate_threshold,
                consecutive_failures=settings.alert_consecutive_failures,
            ),
        )

    @property
    def effective_email_recipients(self) -> list[str]:
        return self.email_recipients or [self.fallback_email]

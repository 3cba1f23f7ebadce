"""Shared channel plumbing — severity styling, field rendering, JSON POST."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

import httpx

from ..alerts.models import Alert, ChannelType, Severity
from ..errors import ChannelError

FOOTER = "pulsewatch monitoring"
USER_AGENT = "pulsewatch-monitoring/1.0"

# Slack attachment colours
SLACK_COLOR = {
    Severity.CRITICAL: "danger",
    Severity.HIGH: "warning",
    Severity.MEDIUM: "good",
    Severity.LOW: "#36a64f",
}

# Discord embed / email banner colours
HEX_COLOR = {
    Severity.CRITICAL: 0xFF0000,
    Severity.HIGH: 0xFF8C00,
    Severity.MEDIUM: 0xFFD700,
    Severity.LOW: 0x00FF00,
}

EMOJI = {
    Severity.CRITICAL: "🚨",
    Severity.HIGH: "⚠️",
    Severity.MEDIUM: "⚡",
    Severity.LOW: "ℹ️",
}


def type_label(alert: Alert) -> str:
    return alert.type.value.replace("_", " ").upper()


def readable_time(iso: str) -> str:
    try:
        return datetime.fromisoformat(iso).strftime("%Y-%m-%d %H:%M:%S %Z").strip()
    except ValueError:
        return iso


def alert_fields(alert: Alert, environment: str) -> list[tuple[str, str]]:
    """The (label, value) table every channel renders."""
    return [
        ("Alert Type", type_label(alert)),
        ("Severity", alert.severity.value.upper()),
        ("Service", alert.service or "System"),
        ("Environment", environment),
        ("Message", alert.message),
        ("Timestamp", readable_time(alert.created_at)),
    ]


class Channel(ABC):
    """One alert delivery mechanism. ``send`` raises on failure."""

    channel_type: ChannelType

    @abstractmethod
    async def send(self, alert: Alert) -> None: ...

    async def close(self) -> None:
        return None


class HTTPChannel(Channel):
    """Channel that POSTs a JSON body to a single URL."""

    def __init__(
        self,
        url: str,
        environment: str = "development",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url
        self.environment = environment
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    @abstractmethod
    def build_payload(self, alert: Alert) -> dict[str, Any]: ...

    def headers(self) -> dict[str, str]:
        return {"Content-Type": "application/json"}

    async def send(self, alert: Alert) -> None:
        name = self.channel_type.value
        try:
            resp = await self._client.post(self.url, json=self.build_payload(alert), headers=self.headers())
        except httpx.HTTPError as exc:
            raise ChannelError(name, f"request failed: {type(exc).__name__}: {exc}") from exc
        if not resp.is_success:
            raise ChannelError(
                name,
                f"endpoint returned {resp.status_code}: {resp.text[:200]}",
                status_code=resp.status_code,
            )

    async def close(self) -> None:
        await self._client.aclose()

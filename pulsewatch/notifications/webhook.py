"""Generic JSON webhook channel."""

from __future__ import annotations

from typing import Any

from ..alerts.models import Alert, ChannelType
from ..health.models import utc_now_iso
from .base import USER_AGENT, HTTPChannel


class WebhookChannel(HTTPChannel):
    """POSTs ``{alert, system_info}`` to an arbitrary consumer."""

    channel_type = ChannelType.WEBHOOK

    def __init__(self, url: str, version: str = "1.0.0", **kwargs: Any) -> None:
        super().__init__(url, **kwargs)
        self.version = version

    def headers(self) -> dict[str, str]:
        return {"Content-Type": "application/json", "User-Agent": USER_AGENT}

    def build_payload(self, alert: Alert) -> dict[str, Any]:
        return {
            "alert": alert.to_dict(),
            "system_info": {
                "environment": self.environment,
                "version": self.version,
                "timestamp": utc_now_iso(),
            },
        }

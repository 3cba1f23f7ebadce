"""Slack incoming-webhook channel."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from ..alerts.models import Alert, ChannelType
from .base import EMOJI, FOOTER, SLACK_COLOR, HTTPChannel, alert_fields

# Fields rendered full-width; the rest sit two per row
_WIDE_FIELDS = {"Message"}


class SlackChannel(HTTPChannel):
    channel_type = ChannelType.SLACK

    def build_payload(self, alert: Alert) -> dict[str, Any]:
        try:
            ts = int(datetime.fromisoformat(alert.created_at).timestamp())
        except ValueError:
            ts = None
        return {
            "text": f"{EMOJI[alert.severity]} {alert.title}",
            "attachments": [
                {
                    "color": SLACK_COLOR[alert.severity],
                    "fields": [
                        {"title": label, "value": value, "short": label not in _WIDE_FIELDS}
                        for label, value in alert_fields(alert, self.environment)
                    ],
                    "footer": FOOTER,
                    "ts": ts,
                }
            ],
        }

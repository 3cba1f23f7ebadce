"""Discord webhook channel — one embed per alert."""

from __future__ import annotations

from typing import Any

from ..alerts.models import Alert, ChannelType
from .base import EMOJI, FOOTER, HEX_COLOR, HTTPChannel, alert_fields

# Discord rejects embeds whose parts exceed these lengths
TITLE_LIMIT = 256
DESCRIPTION_LIMIT = 4096
FIELD_VALUE_LIMIT = 1024


class DiscordChannel(HTTPChannel):
    channel_type = ChannelType.DISCORD

    def build_payload(self, alert: Alert) -> dict[str, Any]:
        return {
            "embeds": [
                {
                    "title": f"{EMOJI[alert.severity]} {alert.title}"[:TITLE_LIMIT],
                    "description": alert.message[:DESCRIPTION_LIMIT],
                    "color": HEX_COLOR[alert.severity],
                    "fields": [
                        {"name": label, "value": value[:FIELD_VALUE_LIMIT], "inline": True}
                        for label, value in alert_fields(alert, self.environment)
                    ],
                    "footer": {"text": FOOTER},
                    "timestamp": alert.created_at,
                }
            ]
        }

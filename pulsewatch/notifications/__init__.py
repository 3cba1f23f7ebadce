"""Alert delivery channels — webhook, Slack, Discord and email.

Channel policy:
- webhook: enabled only when a URL is configured
- slack / discord: registered when a URL is configured, but stay disabled
  unless explicitly switched on
- email: always enabled; falls back to the operations address when no
  recipients are configured
"""

from __future__ import annotations

import logging

import httpx

from ..alerts.models import AlertChannel, AlertConfig, ChannelType
from ..clients import EmailProvider
from .base import Channel, HTTPChannel
from .discord import DiscordChannel
from .email import EmailChannel, render_email
from .slack import SlackChannel
from .webhook import WebhookChannel

logger = logging.getLogger(__name__)

__all__ = [
    "Channel",
    "DiscordChannel",
    "EmailChannel",
    "HTTPChannel",
    "SlackChannel",
    "WebhookChannel",
    "build_channels",
    "render_email",
]


def build_channels(
    config: AlertConfig,
    environment: str,
    version: str,
    email_provider: EmailProvider | None = None,
    timeout: float = 10.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[AlertChannel]:
    """Create the channel list described by ``config``."""
    channels: list[AlertChannel] = []
    http_kwargs = {"environment": environment, "timeout": timeout, "transport": transport}

    if config.slack_webhook:
        channels.append(AlertChannel(
            type=ChannelType.SLACK,
            sender=SlackChannel(config.slack_webhook, **http_kwargs),
            config={"webhook_url": config.slack_webhook},
            enabled=config.slack_enabled,
        ))

    if config.discord_webhook:
        channels.append(AlertChannel(
            type=ChannelType.DISCORD,
            sender=DiscordChannel(config.discord_webhook, **http_kwargs),
            config={"webhook_url": config.discord_webhook},
            enabled=config.discord_enabled,
        ))

    if config.webhook_url:
        channels.append(AlertChannel(
            type=ChannelType.WEBHOOK,
            sender=WebhookChannel(config.webhook_url, version=version, **http_kwargs),
            config={"webhook_url": config.webhook_url},
        ))

    recipients = config.effective_email_recipients
    channels.append(AlertChannel(
        type=ChannelType.EMAIL,
        sender=EmailChannel(recipients, provider=email_provider, environment=environment),
        config={"recipients": recipients},
    ))

    logger.info(
        "Alert channels: %s",
        ", ".join(f"{c.type.value}={'on' if c.enabled else 'off'}" for c in channels),
    )
    return channels

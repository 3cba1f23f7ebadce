"""Exception hierarchy for alert delivery.

Probes never raise past their boundary, so only the delivery side has
typed errors: channels raise them and the alert engine records them as
failed delivery outcomes.
"""

from __future__ import annotations


class PulsewatchError(Exception):
    """Base class for all pulsewatch errors."""


class NotificationError(PulsewatchError):
    """An alert could not be delivered through a channel."""

    def __init__(self, channel: str, message: str) -> None:
        super().__init__(f"{channel}: {message}")
        self.channel = channel


class ChannelError(NotificationError):
    """A channel endpoint rejected the request or could not be reached."""

    def __init__(self, channel: str, message: str, status_code: int | None = None) -> None:
        super().__init__(channel, message)
        self.status_code = status_code


class ProviderError(NotificationError):
    """The transactional email provider reported a failed send."""

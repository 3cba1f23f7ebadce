"""Email alert channel.

Renders an HTML and a plain-text body from the alert and hands them to the
transactional provider. Without a provider the rendered message is written
to the log instead, so an alert is never lost silently.
"""

from __future__ import annotations

import html
import json
import logging
from dataclasses import dataclass

from ..alerts.models import Alert, ChannelType
from ..errors import ProviderError
from ..clients import EmailProvider
from .base import EMOJI, FOOTER, HEX_COLOR, Channel, alert_fields

logger = logging.getLogger(__name__)


@dataclass
class RenderedEmail:
    subject: str
    html: str
    text: str


def render_email(alert: Alert, environment: str) -> RenderedEmail:
    fields = [(label, value) for label, value in alert_fields(alert, environment) if label != "Message"]
    metadata_json = json.dumps(alert.metadata, indent=2, default=str) if alert.metadata else ""
    banner = f"#{HEX_COLOR[alert.severity]:06x}"
    title = f"{EMOJI[alert.severity]} {alert.title}"

    detail_rows = "\n".join(
        f"<p><strong>{html.escape(label)}:</strong> {html.escape(value)}</p>" for label, value in fields
    )
    metadata_block = (
        "<h3>Additional Information</h3>\n"
        '<pre style="background-color: #eee; padding: 10px; border-radius: 4px; overflow-x: auto;">'
        f"{html.escape(metadata_json)}</pre>"
        if metadata_json else ""
    )
    html_body = f"""\
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <div style="background-color: {banner}; color: white; padding: 20px; text-align: center;">
    <h1>{html.escape(title)}</h1>
  </div>
  <div style="padding: 20px; background-color: #f9f9f9;">
    <h2>Alert Details</h2>
{detail_rows}
    <hr>
    <h3>Message</h3>
    <p>{html.escape(alert.message)}</p>
{metadata_block}
  </div>
  <div style="background-color: #333; color: white; padding: 10px; text-align: center; font-size: 12px;">
    {FOOTER}
  </div>
</div>
"""

    text_lines = [alert.title, "", "Alert Details:"]
    text_lines += [f"- {label}: {value}" for label, value in fields]
    text_lines += ["", "Message:", alert.message]
    if metadata_json:
        text_lines += ["", "Additional Information:", metadata_json]
    text_lines += ["", "---", FOOTER]

    return RenderedEmail(
        subject=f"[{alert.severity.value.upper()}] {alert.title}",
        html=html_body,
        text="\n".join(text_lines),
    )


class EmailChannel(Channel):
    channel_type = ChannelType.EMAIL

    def __init__(
        self,
        recipients: list[str],
        provider: EmailProvider | None = None,
        environment: str = "development",
    ) -> None:
        self.recipients = recipients
        self.provider = provider
        self.environment = environment

    def _log_fallback(self, email: RenderedEmail, reason: str) -> None:
        logger.warning(
            "EMAIL ALERT (%s) to=%s subject=%s\n%s",
            reason, ", ".join(self.recipients), email.subject, email.text,
        )

    async def send(self, alert: Alert) -> None:
        email = render_email(alert, self.environment)

        if self.provider is None:
            self._log_fallback(email, "provider not configured")
            return

        try:
            accepted = await self.provider.send(self.recipients, email.subject, email.html, email.text)
        except Exception as exc:
            self._log_fallback(email, "provider error")
            raise ProviderError("email", f"{type(exc).__name__}: {exc}") from exc

        if not accepted:
            self._log_fallback(email, "provider rejected")
            raise ProviderError("email", "provider rejected the message")

        logger.info("Email alert sent to %s: %s", ", ".join(self.recipients), alert.title)

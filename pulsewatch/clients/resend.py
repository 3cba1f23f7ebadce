"""Resend transactional email adapter."""

from __future__ import annotations

import logging

import httpx

logger = logging.getLogger(__name__)

RESEND_API_URL = "https://api.resend.com/emails"


class ResendEmailProvider:
    """Sends one email per call through the Resend HTTP API."""

    def __init__(
        self,
        api_key: str,
        sender: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.sender = sender
        self.timeout = timeout
        self._transport = transport

    async def send(self, to: list[str], subject: str, html: str, text: str) -> bool:
        payload = {
            "from": self.sender,
            "to": to,
            "subject": subject,
            "html": html,
            "text": text,
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.post(
                    RESEND_API_URL,
                    json=payload,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                )
        except httpx.HTTPError as exc:
            logger.warning("Resend request failed: %s", exc)
            return False

        if not resp.is_success:
            logger.warning("Resend returned %d: %s", resp.status_code, resp.text[:200])
            return False
        return True

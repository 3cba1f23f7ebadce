"""Fakes for the collaborator protocols and channels."""

from __future__ import annotations

import asyncio
from typing import Any, Sequence

from pulsewatch.alerts.models import Alert, ChannelType
from pulsewatch.config import Settings
from pulsewatch.notifications.base import Channel


def make_settings(**overrides: Any) -> Settings:
    """Settings isolated from any .env file, with a roomy memory ceiling."""
    values: dict[str, Any] = {
        "environment": "test",
        "app_version": "9.9.9",
        "memory_limit_mb": 1_000_000,
        "probe_timeout_seconds": 2.0,
        "supabase_url": "https://example.supabase.co",
        "supabase_anon_key": "anon",
        "supabase_service_role_key": "service",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


# ── Collaborator fakes ───────────────────────────────────────────────────────


class FakeDatastore:
    def __init__(
        self,
        rows: int = 1,
        tables: Sequence[str] = ("profiles", "user_points", "user_activity_log"),
        error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self.rows = rows
        self.tables = set(tables)
        self.error = error
        self.delay = delay
        self.sampled: list[tuple[str, int]] = []

    async def sample(self, table: str, limit: int = 1) -> int:
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        self.sampled.append((table, limit))
        return self.rows

    async def existing_tables(self, schema: str, names: Sequence[str]) -> set[str]:
        if self.error:
            raise self.error
        return {n for n in names if n in self.tables}


class FakeCache:
    def __init__(self, result: bool = True, error: Exception | None = None) -> None:
        self.result = result
        self.error = error

    async def ping(self) -> bool:
        if self.error:
            raise self.error
        return self.result


class FakeSupabase:
    def __init__(self, auth_error: Exception | None = None, storage_error: Exception | None = None) -> None:
        self.auth_error = auth_error
        self.storage_error = storage_error

    async def check_session(self) -> None:
        if self.auth_error:
            raise self.auth_error

    async def list_objects(self, bucket: str, limit: int = 1) -> list[dict]:
        if self.storage_error:
            raise self.storage_error
        return [{"name": "logo.png"}]


class FakeEmailProvider:
    def __init__(self, accept: bool = True, error: Exception | None = None) -> None:
        self.accept = accept
        self.error = error
        self.sent: list[dict[str, Any]] = []

    async def send(self, to: list[str], subject: str, html: str, text: str) -> bool:
        if self.error:
            raise self.error
        self.sent.append({"to": to, "subject": subject, "html": html, "text": text})
        return self.accept


class RecordingChannel(Channel):
    def __init__(self, channel_type: ChannelType = ChannelType.WEBHOOK) -> None:
        self.channel_type = channel_type
        self.received: list[Alert] = []

    async def send(self, alert: Alert) -> None:
        self.received.append(alert)


class FailingChannel(Channel):
    def __init__(self, channel_type: ChannelType = ChannelType.SLACK, exc: Exception | None = None) -> None:
        self.channel_type = channel_type
        self.exc = exc or RuntimeError("transport down")
        self.attempts = 0

    async def send(self, alert: Alert) -> None:
        self.attempts += 1
        raise self.exc



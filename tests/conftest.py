"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from pulsewatch.alerts.models import AlertChannel, AlertConfig
from pulsewatch.alerts.store import AlertStore
from pulsewatch.config import Settings
from pulsewatch.health.checker import HealthChecker
from pulsewatch.notifications.base import Channel
from fakes import FakeCache, FakeDatastore, FakeSupabase, make_settings


# ── Fixtures ─────────────────────────────────────────────────────────────────


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def healthy_checker(settings: Settings) -> HealthChecker:
    supabase = FakeSupabase()
    return HealthChecker(
        settings,
        datastore=FakeDatastore(),
        cache=FakeCache(),
        identity=supabase,
        storage=supabase,
    )


@pytest.fixture
def store() -> AlertStore:
    return AlertStore()


@pytest.fixture
def enabled_config() -> AlertConfig:
    return AlertConfig(enabled=True)


@pytest.fixture
def channel_factory() -> Callable[..., AlertChannel]:
    def _make(sender: Channel, enabled: bool = True) -> AlertChannel:
        return AlertChannel(type=sender.channel_type, sender=sender, enabled=enabled)
    return _make

"""Tests for the FastAPI routes."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from pulsewatch.alerts.engine import AlertEngine
from pulsewatch.alerts.models import Alert, AlertChannel, AlertConfig, AlertType, Severity
from pulsewatch.alerts.store import AlertStore
from pulsewatch.api.server import create_app
from pulsewatch.health.checker import HealthChecker
from pulsewatch.monitoring import HealthMonitor
from fakes import FakeCache, FakeDatastore, FakeSupabase, RecordingChannel, make_settings


def _client(datastore=None, alerting: bool = False) -> tuple[TestClient, HealthMonitor]:
    settings = make_settings()
    supabase = FakeSupabase()
    checker = HealthChecker(
        settings,
        datastore=datastore or FakeDatastore(),
        cache=FakeCache(),
        identity=supabase,
        storage=supabase,
    )
    sender = RecordingChannel()
    engine = AlertEngine(
        AlertConfig(enabled=alerting),
        AlertStore(),
        [AlertChannel(type=sender.channel_type, sender=sender)],
    )
    monitor = HealthMonitor(checker, engine)
    # no context manager: lifespan (and its scheduler) stays off
    return TestClient(create_app(settings=settings, monitor=monitor)), monitor


@pytest.fixture
def client() -> TestClient:
    return _client()[0]


def _seed(monitor: HealthMonitor) -> Alert:
    alert = Alert(
        type=AlertType.SYSTEM_ERROR,
        severity=Severity.HIGH,
        title="Worker crashed",
        message="exit code 137",
        service="worker",
    )
    monitor.store.add(alert)
    return alert


class TestHealthRoutes:
    def test_health_ok(self, client: TestClient) -> None:
        resp = client.get("/api/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "healthy"
        assert data["summary"]["total"] == 5
        assert data["version"] == "9.9.9"
        assert data["environment"] == "test"
        assert "no-cache" in resp.headers["cache-control"]
        assert "no-store" in resp.headers["cache-control"]

    def test_quick_query(self, client: TestClient) -> None:
        resp = client.get("/api/health", params={"quick": "true"})
        assert resp.status_code == 200
        assert [c["service"] for c in resp.json()["checks"]] == ["database"]

    def test_liveness(self, client: TestClient) -> None:
        resp = client.get("/api/health/live")
        assert resp.status_code == 200
        assert resp.json()["summary"]["total"] == 1

    def test_unhealthy_is_503(self) -> None:
        client, monitor = _client(datastore=FakeDatastore(error=ConnectionError("refused")), alerting=True)
        resp = client.get("/api/health")
        assert resp.status_code == 503
        data = resp.json()
        assert data["status"] == "unhealthy"
        database = next(c for c in data["checks"] if c["service"] == "database")
        assert database["message"].startswith("Database error")
        assert any(a.service == "database" for a in monitor.store.history())

    def test_monitor_crash_is_503(self) -> None:
        client, monitor = _client()
        monitor.run_health_checks_with_alerting = AsyncMock(side_effect=RuntimeError("wiring broke"))
        resp = client.get("/api/health")
        assert resp.status_code == 503
        data = resp.json()
        assert data["status"] == "unhealthy"
        assert data["error"] == "Health check failed"
        assert data["message"] == "wiring broke"
        assert "no-cache" in resp.headers["cache-control"]


class TestAlertRoutes:
    def test_list_and_active(self) -> None:
        client, monitor = _client()
        first = _seed(monitor)
        second = _seed(monitor)
        monitor.store.resolve(second.id)

        data = client.get("/api/alerts").json()
        assert data["total"] == 2
        assert [a["id"] for a in data["alerts"]] == [first.id, second.id]

        active = client.get("/api/alerts/active").json()
        assert active["total"] == 1
        assert active["alerts"][0]["id"] == first.id

    def test_acknowledge(self) -> None:
        client, monitor = _client()
        alert = _seed(monitor)

        resp = client.post(f"/api/alerts/{alert.id}/acknowledge")
        assert resp.status_code == 200
        assert resp.json()["acknowledged"] is True
        assert resp.json()["alert"]["status"] == "acknowledged"

        again = client.post(f"/api/alerts/{alert.id}/acknowledge")
        assert again.json()["acknowledged"] is False

    def test_resolve(self) -> None:
        client, monitor = _client()
        alert = _seed(monitor)

        resp = client.post(f"/api/alerts/{alert.id}/resolve")
        data = resp.json()
        assert data["resolved"] is True
        assert data["alert"]["status"] == "resolved"
        assert data["alert"]["resolved_at"] is not None

        again = client.post(f"/api/alerts/{alert.id}/resolve").json()
        assert again["resolved"] is False
        assert again["alert"]["resolved_at"] == data["alert"]["resolved_at"]

    @pytest.mark.parametrize("action", ["acknowledge", "resolve"])
    def test_unknown_alert_is_404(self, client: TestClient, action: str) -> None:
        resp = client.post(f"/api/alerts/alert_0_missing/{action}")
        assert resp.status_code == 404

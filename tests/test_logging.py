"""Tests for log rendering and the alert delivery events."""

from __future__ import annotations

import json
import logging

import pytest
import structlog

from pulsewatch.alerts.engine import AlertEngine
from pulsewatch.alerts.models import Alert, AlertType, ChannelType, Severity
from pulsewatch.logging_setup import configure_logging
from fakes import FailingChannel


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter):
            root.removeHandler(handler)
    root.setLevel(level)
    structlog.reset_defaults()


def _alert() -> Alert:
    return Alert(
        type=AlertType.HEALTH_CHECK_FAILURE,
        severity=Severity.CRITICAL,
        title="Service database is unhealthy",
        message="Database error: connection refused",
        service="database",
    )


async def _fail_once(store, enabled_config, channel_factory) -> Alert:
    engine = AlertEngine(
        enabled_config, store, [channel_factory(FailingChannel(ChannelType.SLACK))], environment="production",
    )
    alert = _alert()
    await engine.send_alert(alert)
    return alert


class TestJSONOutput:
    @pytest.mark.asyncio
    async def test_failed_delivery_is_one_json_line(
        self, restore_logging, capsys, store, enabled_config, channel_factory,
    ) -> None:
        configure_logging("INFO", json_output=True)
        alert = await _fail_once(store, enabled_config, channel_factory)

        lines = [line for line in capsys.readouterr().out.splitlines() if line.strip()]
        events = [json.loads(line) for line in lines]
        [delivery] = [e for e in events if e["event"] == "alert_delivery"]

        assert delivery["level"] == "error"
        assert delivery["alert"]["id"] == alert.id
        assert delivery["alert"]["severity"] == "critical"
        assert delivery["channel"] == "slack"
        assert delivery["success"] is False
        assert delivery["environment"] == "production"
        assert delivery["error"]["name"] == "RuntimeError"
        assert delivery["error"]["message"] == "transport down"
        assert "Traceback" in delivery["error"]["stack"]

    def test_stdlib_records_share_the_format(self, restore_logging, capsys) -> None:
        configure_logging("INFO", json_output=True)
        logging.getLogger("pulsewatch.health.checker").warning("Probe %s failed: %s", "redis", "refused")

        [line] = capsys.readouterr().out.splitlines()
        record = json.loads(line)
        assert record["event"] == "Probe redis failed: refused"
        assert record["level"] == "warning"
        assert record["logger"] == "pulsewatch.health.checker"

    def test_level_filters(self, restore_logging, capsys) -> None:
        configure_logging("WARNING", json_output=True)
        logging.getLogger("pulsewatch.monitoring").info("quiet")
        assert capsys.readouterr().out == ""


class TestConsoleOutput:
    @pytest.mark.asyncio
    async def test_development_output_is_not_json(
        self, restore_logging, capsys, store, enabled_config, channel_factory,
    ) -> None:
        configure_logging("INFO", json_output=False)
        await _fail_once(store, enabled_config, channel_factory)

        out = capsys.readouterr().out
        assert "alert_delivery" in out
        assert "RuntimeError" in out
        with pytest.raises(json.JSONDecodeError):
            json.loads(out.splitlines()[0])

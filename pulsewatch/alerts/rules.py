"""Alert trigger rules.

Each rule looks at one CheckResult on its own; several can fire for the
same result. Latency alerts ignore health status entirely.
"""

from __future__ import annotations

from typing import Any

from ..health.models import CheckResult, HealthReport, Status, utc_now_iso
from .models import Alert, AlertThresholds, AlertType, Severity


def _result_metadata(result: CheckResult) -> dict[str, Any]:
    return {
        "service": result.service,
        "status": result.status.value,
        "message": result.message,
        "response_time": result.response_time_ms,
        "details": result.details,
        "timestamp": result.timestamp,
    }


def evaluate_result(result: CheckResult, thresholds: AlertThresholds) -> list[Alert]:
    """Return the alerts triggered by a single probe result."""
    alerts: list[Alert] = []
    svc = result.service

    if result.status == Status.UNHEALTHY:
        alerts.append(Alert(
            type=AlertType.HEALTH_CHECK_FAILURE,
            severity=Severity.CRITICAL,
            title=f"Service {svc} is unhealthy",
            message=f"Service {svc} failed health check: {result.message}",
            service=svc,
            metadata=_result_metadata(result),
        ))
    elif result.status == Status.DEGRADED:
        alerts.append(Alert(
            type=AlertType.PERFORMANCE_DEGRADATION,
            severity=Severity.MEDIUM,
            title=f"Service {svc} is degraded",
            message=f"Service {svc} is experiencing performance issues: {result.message}",
            service=svc,
            metadata=_result_metadata(result),
        ))

    limit = thresholds.response_time_ms
    if result.response_time_ms > limit:
        alerts.append(Alert(
            type=AlertType.PERFORMANCE_DEGRADATION,
            severity=Severity.LOW,
            title=f"Service {svc} is slow",
            message=(
                f"Service {svc} response time ({result.response_time_ms:g}ms) "
                f"exceeds threshold ({limit}ms)"
            ),
            service=svc,
            metadata={
                "service": svc,
                "response_time": result.response_time_ms,
                "threshold": limit,
                "timestamp": result.timestamp,
            },
        ))

    return alerts


def evaluate_report(
    report: HealthReport,
    thresholds: AlertThresholds,
    environment: str,
    version: str,
) -> list[Alert]:
    """Apply every rule to every result and stamp deployment metadata."""
    alerts: list[Alert] = []
    for result in report.checks:
        for alert in evaluate_result(result, thresholds):
            alert.metadata.update({
                "environment": environment,
                "version": version,
                "timestamp": utc_now_iso(),
            })
            alerts.append(alert)
    return alerts

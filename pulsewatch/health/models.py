"""Health check result models and status aggregation."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Iterable


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class Status(str, Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


@dataclass
class CheckResult:
    """Result of a single probe execution."""

    service: str
    status: Status
    response_time_ms: float
    message: str = ""
    details: dict[str, Any] = field(default_factory=dict)
    timestamp: str = ""

    def __post_init__(self) -> None:
        if not self.timestamp:
            self.timestamp = utc_now_iso()

    def to_dict(self) -> dict[str, Any]:
        return {
            "service": self.service,
            "status": self.status.value,
            "response_time_ms": self.response_time_ms,
            "message": self.message,
            "details": self.details,
            "timestamp": self.timestamp,
        }


@dataclass
class Summary:
    total: int = 0
    healthy: int = 0
    unhealthy: int = 0
    degraded: int = 0

    @classmethod
    def from_results(cls, results: Iterable[CheckResult]) -> Summary:
        summary = cls()
        for r in results:
            summary.total += 1
            if r.status == Status.HEALTHY:
                summary.healthy += 1
            elif r.status == Status.DEGRADED:
                summary.degraded += 1
            else:
                summary.unhealthy += 1
        return summary

    def to_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "healthy": self.healthy,
            "unhealthy": self.unhealthy,
            "degraded": self.degraded,
        }


def overall_status(statuses: Iterable[Status]) -> Status:
    """Reduce statuses by precedence: unhealthy > degraded > healthy."""
    seen = set(statuses)
    if Status.UNHEALTHY in seen:
        return Status.UNHEALTHY
    if Status.DEGRADED in seen:
        return Status.DEGRADED
    return Status.HEALTHY


def partial_status(healthy_count: int, total_count: int) -> Status:
    """Status for a probe made of several sub-checks.

    All healthy -> healthy, none healthy -> unhealthy, otherwise degraded.
    """
    if healthy_count == 0:
        return Status.UNHEALTHY
    if healthy_count < total_count:
        return Status.DEGRADED
    return Status.HEALTHY


@dataclass
class HealthReport:
    """Aggregated outcome of one health check run."""

    status: Status
    timestamp: str
    uptime_seconds: float
    version: str
    environment: str
    checks: list[CheckResult]
    summary: Summary

    @classmethod
    def build(
        cls,
        checks: list[CheckResult],
        uptime_seconds: float,
        version: str,
        environment: str,
    ) -> HealthReport:
        return cls(
            status=overall_status(c.status for c in checks),
            timestamp=utc_now_iso(),
            uptime_seconds=round(uptime_seconds, 3),
            version=version,
            environment=environment,
            checks=list(checks),
            summary=Summary.from_results(checks),
        )

    @property
    def http_status_code(self) -> int:
        return 503 if self.status == Status.UNHEALTHY else 200

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "timestamp": self.timestamp,
            "uptime_seconds": self.uptime_seconds,
            "version": self.version,
            "environment": self.environment,
            "checks": [c.to_dict() for c in self.checks],
            "summary": self.summary.to_dict(),
        }

"""Health probes — one coroutine per dependency.

Supports: datastore read, Redis ping, external APIs (auth, storage, optional
providers), process memory, application invariants (config + schema).
Every probe catches its own errors and returns a CheckResult; none raise.
"""

from __future__ import annotations

import os
import platform
import sys
import time
from typing import Any, Sequence

import psutil

from ..clients import CachePinger, Datastore, IdentityService, ObjectStorage
from .models import CheckResult, Status, partial_status

# Memory thresholds as percent of the configured ceiling
MEMORY_UNHEALTHY_PERCENT = 90.0
MEMORY_DEGRADED_PERCENT = 75.0


def _elapsed_ms(t0: float) -> float:
    return round((time.perf_counter() - t0) * 1000, 1)


def _error_text(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


def _sub(service: str, healthy: bool, message: str) -> dict[str, Any]:
    return {
        "service": service,
        "status": (Status.HEALTHY if healthy else Status.UNHEALTHY).value,
        "message": message,
    }


def _reduce_subchecks(
    service: str, t0: float, checks: list[dict[str, Any]], noun: str,
) -> CheckResult:
    healthy = sum(1 for c in checks if c["status"] == Status.HEALTHY.value)
    return CheckResult(
        service=service,
        status=partial_status(healthy, len(checks)),
        response_time_ms=_elapsed_ms(t0),
        message=f"{healthy}/{len(checks)} {noun} healthy",
        details={"checks": checks},
    )


# ── Datastore ────────────────────────────────────────────────────────────────


async def check_database(datastore: Datastore | None, table: str = "profiles") -> CheckResult:
    """Bounded read against the datastore."""
    t0 = time.perf_counter()
    if datastore is None:
        return CheckResult(
            service="database", status=Status.UNHEALTHY,
            response_time_ms=_elapsed_ms(t0), message="Database not configured",
        )
    try:
        count = await datastore.sample(table, limit=1)
    except Exception as e:
        return CheckResult(
            service="database", status=Status.UNHEALTHY,
            response_time_ms=_elapsed_ms(t0), message=f"Database error: {_error_text(e)}",
        )
    return CheckResult(
        service="database", status=Status.HEALTHY,
        response_time_ms=_elapsed_ms(t0), message="Database connection successful",
        details={"record_count": count},
    )


# ── Cache ────────────────────────────────────────────────────────────────────


async def check_cache(cache: CachePinger | None) -> CheckResult:
    """Redis ping. Missing configuration is degraded, not a failure."""
    t0 = time.perf_counter()
    if cache is None:
        return CheckResult(
            service="redis", status=Status.DEGRADED,
            response_time_ms=_elapsed_ms(t0), message="Redis not configured, using memory cache",
        )
    try:
        ok = await cache.ping()
    except Exception as e:
        return CheckResult(
            service="redis", status=Status.UNHEALTHY,
            response_time_ms=_elapsed_ms(t0), message=f"Redis connection failed: {_error_text(e)}",
        )
    if not ok:
        return CheckResult(
            service="redis", status=Status.UNHEALTHY,
            response_time_ms=_elapsed_ms(t0), message="Redis ping returned no PONG",
        )
    return CheckResult(
        service="redis", status=Status.HEALTHY,
        response_time_ms=_elapsed_ms(t0), message="Redis connection successful",
    )


# ── External APIs ────────────────────────────────────────────────────────────


async def check_external_apis(
    identity: IdentityService | None,
    storage: ObjectStorage | None,
    bucket: str = "public",
    payment_configured: bool = False,
    email_configured: bool = False,
) -> CheckResult:
    """Auth + storage round trips; payment/email providers when configured."""
    t0 = time.perf_counter()
    checks: list[dict[str, Any]] = []

    if identity is None:
        checks.append(_sub("supabase-auth", False, "Auth service not configured"))
    else:
        try:
            await identity.check_session()
            checks.append(_sub("supabase-auth", True, "Auth service healthy"))
        except Exception as e:
            checks.append(_sub("supabase-auth", False, f"Auth service error: {_error_text(e)}"))

    if storage is None:
        checks.append(_sub("supabase-storage", False, "Storage service not configured"))
    else:
        try:
            await storage.list_objects(bucket, limit=1)
            checks.append(_sub("supabase-storage", True, "Storage service healthy"))
        except Exception as e:
            checks.append(_sub("supabase-storage", False, f"Storage service error: {_error_text(e)}"))

    if payment_configured:
        checks.append(_sub("razorpay", True, "Razorpay configured"))
    if email_configured:
        checks.append(_sub("resend", True, "Resend email service configured"))

    return _reduce_subchecks("external-apis", t0, checks, "external services")


# ── System resources ─────────────────────────────────────────────────────────


async def check_system_resources(memory_limit_mb: int = 512) -> CheckResult:
    """Compare process RSS to the memory ceiling."""
    t0 = time.perf_counter()
    try:
        proc = psutil.Process(os.getpid())
        mem = proc.memory_info()
        uptime = time.time() - proc.create_time()
        used_mb = mem.rss / 1024 / 1024
        percent = used_mb / memory_limit_mb * 100

        if percent > MEMORY_UNHEALTHY_PERCENT:
            status = Status.UNHEALTHY
        elif percent > MEMORY_DEGRADED_PERCENT:
            status = Status.DEGRADED
        else:
            status = Status.HEALTHY

        return CheckResult(
            service="system-resources", status=status,
            response_time_ms=_elapsed_ms(t0),
            message=f"Memory usage: {used_mb:.0f}MB ({percent:.1f}%)",
            details={
                "memory": {
                    "rss": mem.rss,
                    "vms": mem.vms,
                    "limit_mb": memory_limit_mb,
                    "percent_of_limit": round(percent, 1),
                },
                "uptime_seconds": round(uptime, 1),
                "python_version": sys.version.split()[0],
                "platform": platform.system().lower(),
            },
        )
    except Exception as e:
        return CheckResult(
            service="system-resources", status=Status.UNHEALTHY,
            response_time_ms=_elapsed_ms(t0),
            message=f"System resource check failed: {_error_text(e)}",
        )


# ── Application invariants ───────────────────────────────────────────────────


async def check_application(
    required_settings: dict[str, str],
    datastore: Datastore | None,
    required_tables: Sequence[str],
    schema: str = "public",
) -> CheckResult:
    """Required configuration present and required tables exist."""
    t0 = time.perf_counter()
    checks: list[dict[str, Any]] = []

    missing_vars = [name for name, value in required_settings.items() if not value]
    checks.append(_sub(
        "environment-variables",
        not missing_vars,
        "All required environment variables are set" if not missing_vars
        else f"Missing environment variables: {', '.join(missing_vars)}",
    ))

    if datastore is None:
        checks.append(_sub("database-tables", False, "Database tables check failed: no datastore"))
    else:
        try:
            existing = await datastore.existing_tables(schema, list(required_tables))
            missing_tables = [t for t in required_tables if t not in existing]
            checks.append(_sub(
                "database-tables",
                not missing_tables,
                "All required database tables exist" if not missing_tables
                else f"Missing database tables: {', '.join(missing_tables)}",
            ))
        except Exception as e:
            checks.append(_sub("database-tables", False, f"Database tables check failed: {_error_text(e)}"))

    return _reduce_subchecks("application-services", t0, checks, "application services")

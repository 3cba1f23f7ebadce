"""Health checker — runs the probe battery concurrently and aggregates it."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

from ..clients import CachePinger, Datastore, IdentityService, ObjectStorage
from ..clients.cache import RedisPinger
from ..clients.database import PostgresDatastore
from ..clients.supabase import SupabaseClient
from ..config import Settings
from . import checks
from .models import CheckResult, HealthReport, Status

logger = logging.getLogger(__name__)

Probe = Callable[[], Awaitable[CheckResult]]


class HealthChecker:
    """Runs independent probes against the application's dependencies.

    Probes share no state, so they are launched together and joined; total
    latency is that of the slowest probe. Each probe is bounded by
    ``probe_timeout_seconds`` and any escape (timeout or exception) becomes
    an unhealthy result, so neither run method ever raises.
    """

    def __init__(
        self,
        settings: Settings,
        datastore: Datastore | None = None,
        cache: CachePinger | None = None,
        identity: IdentityService | None = None,
        storage: ObjectStorage | None = None,
    ) -> None:
        self.settings = settings
        self.datastore = datastore
        self.cache = cache
        self.identity = identity
        self.storage = storage
        self._started = time.monotonic()

    @classmethod
    def from_settings(cls, settings: Settings) -> HealthChecker:
        """Wire real clients for whatever the settings configure."""
        datastore = None
        if settings.database_url:
            datastore = PostgresDatastore(
                settings.database_url,
                min_size=settings.db_pool_min_size,
                max_size=settings.db_pool_max_size,
                command_timeout=settings.probe_timeout_seconds,
            )
        cache = None
        if settings.redis_url:
            cache = RedisPinger(settings.redis_url, connect_timeout=settings.redis_connect_timeout)
        supabase = None
        if settings.supabase_url and settings.supabase_anon_key:
            supabase = SupabaseClient(
                settings.supabase_url,
                settings.supabase_anon_key,
                settings.supabase_service_role_key,
                timeout=settings.probe_timeout_seconds,
            )
        return cls(settings, datastore=datastore, cache=cache, identity=supabase, storage=supabase)

    @property
    def uptime_seconds(self) -> float:
        return time.monotonic() - self._started

    # -- Probe registry ------------------------------------------------------

    def probes(self) -> list[tuple[str, Probe]]:
        s = self.settings
        return [
            ("database", lambda: checks.check_database(self.datastore, s.health_probe_table)),
            ("redis", lambda: checks.check_cache(self.cache)),
            ("external-apis", lambda: checks.check_external_apis(
                self.identity,
                self.storage,
                bucket=s.storage_bucket,
                payment_configured=bool(s.razorpay_key_id),
                email_configured=bool(s.resend_api_key),
            )),
            ("system-resources", lambda: checks.check_system_resources(s.memory_limit_mb)),
            ("application-services", lambda: checks.check_application(
                {
                    "SUPABASE_URL": s.supabase_url,
                    "SUPABASE_ANON_KEY": s.supabase_anon_key,
                    "SUPABASE_SERVICE_ROLE_KEY": s.supabase_service_role_key,
                },
                self.datastore,
                s.required_table_names,
            )),
        ]

    async def _guarded(self, service: str, probe: Probe) -> CheckResult:
        timeout = self.settings.probe_timeout_seconds
        t0 = time.perf_counter()
        try:
            return await asyncio.wait_for(probe(), timeout=timeout)
        except asyncio.TimeoutError:
            message = f"{service} check timed out after {timeout:g}s"
        except Exception as e:
            message = f"{service} check failed: {type(e).__name__}: {e}"
        logger.warning("Probe %s failed: %s", service, message)
        return CheckResult(
            service=service,
            status=Status.UNHEALTHY,
            response_time_ms=round((time.perf_counter() - t0) * 1000, 1),
            message=message,
        )

    def _report(self, results: list[CheckResult]) -> HealthReport:
        return HealthReport.build(
            results,
            uptime_seconds=self.uptime_seconds,
            version=self.settings.app_version,
            environment=self.settings.environment,
        )

    # -- Entry points --------------------------------------------------------

    async def run_all_checks(self) -> HealthReport:
        """Run every probe concurrently and aggregate the results."""
        registered = self.probes()
        results = await asyncio.gather(
            *(self._guarded(name, probe) for name, probe in registered)
        )
        report = self._report(list(results))
        logger.info(
            "Health check completed with status: %s (%d/%d healthy)",
            report.status.value, report.summary.healthy, report.summary.total,
        )
        return report

    async def run_quick_check(self) -> HealthReport:
        """Database probe only — for liveness endpoints."""
        name, probe = self.probes()[0]
        result = await self._guarded(name, probe)
        return self._report([result])

    async def close(self) -> None:
        if isinstance(self.datastore, PostgresDatastore):
            await self.datastore.close()

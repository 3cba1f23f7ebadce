"""Health endpoints.

Endpoints:
  GET /api/health             — full check (``?quick=true`` for database only)
  GET /api/health/live        — quick check, for load-balancer liveness probes

Both return 200 for healthy/degraded and 503 for unhealthy, never cached.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from pulsewatch.health.models import Status, utc_now_iso
from pulsewatch.monitoring import HealthMonitor

logger = logging.getLogger(__name__)

health_router = APIRouter(tags=["health"])

NO_CACHE = {"Cache-Control": "no-cache, no-store, must-revalidate"}


async def _health_response(monitor: HealthMonitor, quick: bool) -> JSONResponse:
    try:
        report = await monitor.run_health_checks_with_alerting(quick=quick)
    except Exception as e:
        logger.exception("Health check failed")
        return JSONResponse(
            status_code=503,
            headers=NO_CACHE,
            content={
                "status": Status.UNHEALTHY.value,
                "timestamp": utc_now_iso(),
                "error": "Health check failed",
                "message": str(e),
            },
        )
    return JSONResponse(status_code=report.http_status_code, headers=NO_CACHE, content=report.to_dict())


@health_router.get("/health")
async def health(request: Request, quick: bool = False) -> JSONResponse:
    return await _health_response(request.app.state.monitor, quick)


@health_router.get("/health/live")
async def liveness(request: Request) -> JSONResponse:
    return await _health_response(request.app.state.monitor, quick=True)

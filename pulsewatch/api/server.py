"""FastAPI server exposing health and alert endpoints."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

import pulsewatch
from pulsewatch.api.alert_routes import alert_router
from pulsewatch.api.health_routes import health_router
from pulsewatch.config import Settings, settings as default_settings
from pulsewatch.health.scheduler import HealthScheduler
from pulsewatch.logging_setup import configure_logging
from pulsewatch.monitoring import HealthMonitor

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Wire the monitor and scheduler on startup, close them on shutdown."""
    cfg: Settings = app.state.settings
    configure_logging(cfg.log_level, json_output=cfg.is_production)

    if getattr(app.state, "monitor", None) is None:
        app.state.monitor = HealthMonitor.from_settings(cfg)
    monitor: HealthMonitor = app.state.monitor

    scheduler = HealthScheduler(monitor, cfg.health_check_interval_seconds)
    app.state.health_scheduler = scheduler
    try:
        await scheduler.start()
    except Exception:
        logger.exception("Health scheduler failed to start")

    logger.info("pulsewatch started (environment=%s version=%s)", cfg.environment, cfg.app_version)

    yield

    await scheduler.stop()
    await monitor.close()


def create_app(settings: Settings | None = None, monitor: HealthMonitor | None = None) -> FastAPI:
    app = FastAPI(
        title="pulsewatch",
        version=pulsewatch.__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings or default_settings
    app.state.monitor = monitor

    app.include_router(health_router, prefix="/api")
    app.include_router(alert_router, prefix="/api")

    return app


app = create_app()

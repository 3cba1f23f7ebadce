"""Entry point for pulsewatch."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys

import uvicorn
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from pulsewatch.config import settings
from pulsewatch.health.models import HealthReport, Status
from pulsewatch.logging_setup import configure_logging
from pulsewatch.monitoring import HealthMonitor

console = Console()

_STATUS_STYLE = {
    Status.HEALTHY: "green",
    Status.DEGRADED: "yellow",
    Status.UNHEALTHY: "bold red",
}


def run_server() -> None:
    """Start the FastAPI server."""
    console.print(Panel("Starting pulsewatch API server", style="bold green"))
    uvicorn.run(
        "pulsewatch.api.server:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=False,
        log_config=None,
    )


async def _check(quick: bool) -> HealthReport:
    monitor = HealthMonitor.from_settings(settings)
    try:
        return await monitor.run_health_checks_with_alerting(quick=quick)
    finally:
        await monitor.close()


def print_report(report: HealthReport) -> None:
    table = Table(title=f"Health — {report.environment} v{report.version}")
    table.add_column("Service")
    table.add_column("Status")
    table.add_column("Time (ms)", justify="right")
    table.add_column("Message")
    for c in report.checks:
        style = _STATUS_STYLE[c.status]
        table.add_row(c.service, f"[{style}]{c.status.value}[/{style}]", f"{c.response_time_ms:.1f}", c.message)
    console.print(table)

    s = report.summary
    style = _STATUS_STYLE[report.status]
    console.print(
        f"Overall: [{style}]{report.status.value}[/{style}]  "
        f"({s.healthy} healthy, {s.degraded} degraded, {s.unhealthy} unhealthy of {s.total})"
    )


def run_check(quick: bool, as_json: bool) -> int:
    """Run one check with alerting and print the report. Returns the exit code."""
    report = asyncio.run(_check(quick))
    if as_json:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        print_report(report)
    return 1 if report.status == Status.UNHEALTHY else 0


def main() -> None:
    parser = argparse.ArgumentParser(description="pulsewatch health checks and alerting")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("serve", help="Start the API server")

    check_parser = sub.add_parser("check", help="Run health checks once (alerts fire if enabled)")
    check_parser.add_argument("--quick", action="store_true", help="Database probe only")
    check_parser.add_argument("--json", action="store_true", help="Print the report as JSON")

    args = parser.parse_args()

    if args.command == "serve":
        run_server()
    elif args.command == "check":
        configure_logging(settings.log_level, json_output=settings.is_production)
        sys.exit(run_check(args.quick, args.json))
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()

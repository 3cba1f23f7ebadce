"""Health subsystem — probes, checker, scheduler."""

from .models import CheckResult, HealthReport, Status, Summary, overall_status
from .checker import HealthChecker

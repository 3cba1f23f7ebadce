"""Alerting subsystem — rules, in-memory lifecycle store, delivery engine."""

from .models import (
    Alert,
    AlertChannel,
    AlertConfig,
    AlertStatus,
    AlertThresholds,
    AlertType,
    ChannelType,
    DeliveryOutcome,
    Severity,
)
from .store import AlertStore
from .rules import evaluate_report, evaluate_result
from .engine import AlertEngine

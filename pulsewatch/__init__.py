"""pulsewatch — dependency health checks with multi-channel alerting."""

__version__ = "0.1.0"

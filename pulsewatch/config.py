from __future__ import annotations

from pydantic_settings import BaseSettings

# Used when ALERT_EMAIL_RECIPIENTS is unset so email alerts always have a target
DEFAULT_ALERT_RECIPIENT = "ops@example.com"


def _split_csv(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


class Settings(BaseSettings):
    """Central configuration loaded from environment / .env file."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    # Deployment identity (stamped on every report and alert)
    environment: str = "development"
    app_version: str = "1.0.0"

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Logging
    log_level: str = "INFO"

    # Datastore (Postgres behind Supabase)
    database_url: str = ""
    db_pool_min_size: int = 1
    db_pool_max_size: int = 5
    health_probe_table: str = "profiles"
    required_tables: str = "profiles,user_points,user_activity_log"

    # Cache (optional; unset = in-memory fallback, reported as degraded)
    redis_url: str = ""
    redis_connect_timeout: float = 5.0

    # Supabase REST (identity + object storage)
    supabase_url: str = ""
    supabase_anon_key: str = ""
    supabase_service_role_key: str = ""
    storage_bucket: str = "public"

    # Optional third-party providers (presence-checked only)
    razorpay_key_id: str = ""
    resend_api_key: str = ""

    # System resources
    memory_limit_mb: int = 512

    # Timeouts
    probe_timeout_seconds: float = 5.0
    channel_timeout_seconds: float = 10.0

    # Scheduler (0 = only run on demand)
    health_check_interval_seconds: int = 0

    # Alerting
    alerting_enabled: bool = False
    alert_webhook_url: str = ""
    alert_email_recipients: str = ""  # comma-separated
    alert_fallback_email: str = DEFAULT_ALERT_RECIPIENT
    alert_email_from: str = "alerts@example.com"
    slack_webhook_url: str = ""
    slack_alerts_enabled: bool = False
    discord_webhook_url: str = ""
    discord_alerts_enabled: bool = False
    alert_response_time_threshold: int = 5000
    alert_error_rate_threshold: int = 10
    alert_consecutive_failures: int = 3

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def email_recipients(self) -> list[str]:
        return _split_csv(self.alert_email_recipients)

    @property
    def required_table_names(self) -> list[str]:
        return _split_csv(self.required_tables)


settings = Settings()

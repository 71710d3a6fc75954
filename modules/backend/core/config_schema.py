"""
Configuration Schemas.

Pydantic models defining the expected structure of each YAML config file.
Used by AppConfig to validate configuration at load time. If a YAML file
has missing keys, wrong types, or unknown fields, a clear ValidationError
is raised at startup instead of a cryptic KeyError deep in application code.

Each top-level class corresponds to one file in config/settings/:
    ApplicationSchema   → application.yaml
    DatabaseSchema      → database.yaml
    LoggingSchema       → logging.yaml
    FeaturesSchema      → features.yaml
    SecuritySchema      → security.yaml
    AISchema            → ai.yaml
    PlansSchema         → plans.yaml
    AlertsSchema        → alerts.yaml
    ObservabilitySchema → observability.yaml
"""

from pydantic import BaseModel, ConfigDict


class _StrictBase(BaseModel):
    """Base with extra='forbid' so unknown YAML keys are caught immediately."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# application.yaml
# =============================================================================


class ServerSchema(_StrictBase):
    host: str
    port: int


class CorsSchema(_StrictBase):
    origins: list[str]


class TimeoutsSchema(_StrictBase):
    external_api: int


class TelegramAppSchema(_StrictBase):
    webhook_path: str
    public_url: str
    mini_app_url: str
    authorized_users: list[int]


class ApplicationSchema(_StrictBase):
    name: str
    version: str
    description: str
    environment: str
    debug: bool
    api_prefix: str
    docs_enabled: bool
    server: ServerSchema
    cors: CorsSchema
    timeouts: TimeoutsSchema
    telegram: TelegramAppSchema


# =============================================================================
# database.yaml
# =============================================================================


class BrokerSchema(_StrictBase):
    queue_name: str
    result_expiry_seconds: int


class RedisSchema(_StrictBase):
    host: str
    port: int
    db: int
    broker: BrokerSchema


class DatabaseSchema(_StrictBase):
    host: str
    port: int
    name: str
    user: str
    pool_size: int
    max_overflow: int
    pool_timeout: int
    pool_recycle: int
    echo: bool
    echo_pool: bool
    redis: RedisSchema


# =============================================================================
# logging.yaml
# =============================================================================


class ConsoleHandlerSchema(_StrictBase):
    enabled: bool


class FileHandlerSchema(_StrictBase):
    enabled: bool
    path: str
    max_bytes: int
    backup_count: int


class HandlersSchema(_StrictBase):
    console: ConsoleHandlerSchema
    file: FileHandlerSchema


class LoggingSchema(_StrictBase):
    level: str
    format: str
    handlers: HandlersSchema


# =============================================================================
# features.yaml
# =============================================================================


class FeaturesSchema(_StrictBase):
    api_detailed_errors: bool
    api_request_logging: bool
    channel_telegram_enabled: bool
    ai_consultation_enabled: bool
    notifications_telegram_delivery: bool
    alerts_enabled: bool
    background_tasks_enabled: bool
    usage_limits_enforced: bool


# =============================================================================
# security.yaml
# =============================================================================


class JwtSchema(_StrictBase):
    algorithm: str
    access_token_expire_minutes: int
    audience: str


class ChannelRateLimitSchema(_StrictBase):
    messages_per_minute: int


class RateLimitingSchema(_StrictBase):
    telegram: ChannelRateLimitSchema


class TelegramAuthSchema(_StrictBase):
    init_data_max_age_seconds: int


class SecretsValidationSchema(_StrictBase):
    jwt_secret_min_length: int
    webhook_secret_min_length: int


class SecuritySchema(_StrictBase):
    jwt: JwtSchema
    rate_limiting: RateLimitingSchema
    telegram: TelegramAuthSchema
    secrets_validation: SecretsValidationSchema


# =============================================================================
# ai.yaml
# =============================================================================


class AIRetrySchema(_StrictBase):
    max_attempts: int
    backoff_multiplier: int
    backoff_max: int


class AICircuitBreakerSchema(_StrictBase):
    fail_max: int
    timeout_duration: int


class AISchema(_StrictBase):
    model: str
    temperature: float
    max_tokens: int
    quick_max_tokens: int
    analysis_temperature: float
    analysis_max_tokens: int
    timeout_seconds: int
    default_confidence: int
    default_sources: list[str]
    retry: AIRetrySchema
    circuit_breaker: AICircuitBreakerSchema


# =============================================================================
# plans.yaml
# =============================================================================


class PlanLimitsSchema(_StrictBase):
    consultations: int
    documents: int
    disputes: int


class PlanSchema(_StrictBase):
    name: str
    limits: PlanLimitsSchema


class PlansSchema(_StrictBase):
    default_plan: str
    plans: dict[str, PlanSchema]


# =============================================================================
# alerts.yaml
# =============================================================================


class AlertRuleSchema(_StrictBase):
    metric: str
    threshold: float
    severity: str
    title: str
    message: str
    cooldown_minutes: int
    enabled: bool


class AlertsSchema(_StrictBase):
    check_interval_minutes: int
    notification_retention_days: int
    deadline_reminder_days: int
    rules: dict[str, AlertRuleSchema]


# =============================================================================
# observability.yaml
# =============================================================================


class HealthChecksSchema(_StrictBase):
    ready_timeout_seconds: int


class ObservabilitySchema(_StrictBase):
    health_checks: HealthChecksSchema

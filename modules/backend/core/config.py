"""
Configuration Management.

Loads secrets from config/.env and settings from config/settings/*.yaml.
No hardcoded values in code: all configuration comes from these sources.

Secrets (.env):
    DB_PASSWORD, REDIS_PASSWORD, JWT_SECRET, TELEGRAM_BOT_TOKEN,
    TELEGRAM_WEBHOOK_SECRET, OPENAI_API_KEY, DATABASE_URL (optional)

Settings (YAML):
    application.yaml   - App identity, server, cors, telegram, pagination
    database.yaml      - Database and Redis connection settings
    logging.yaml       - Logging configuration
    features.yaml      - Feature flags
    security.yaml      - JWT, init data validation, bot rate limits
    ai.yaml            - LLM model, token limits, retry and breaker settings
    plans.yaml         - Subscription plans and monthly usage limits
    alerts.yaml        - Alert rules, notification retention
    observability.yaml - Health check configuration
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from modules.backend.core.config_schema import (
    AISchema,
    AlertsSchema,
    ApplicationSchema,
    DatabaseSchema,
    FeaturesSchema,
    LoggingSchema,
    ObservabilitySchema,
    PlansSchema,
    SecuritySchema,
)


def find_project_root() -> Path:
    """Find project root by looking for .project_root marker file."""
    current = Path.cwd()
    while current != current.parent:
        if (current / ".project_root").exists():
            return current
        current = current.parent
    raise RuntimeError("Project root not found. Ensure .project_root file exists.")


def validate_project_root() -> Path:
    """
    Validate that the project root can be found.

    Raises SystemExit with a clear message if .project_root is not found.
    Use this in entry scripts before any configuration loading.
    """
    try:
        return find_project_root()
    except RuntimeError as e:
        raise SystemExit(f"Error: {e}") from e


def load_yaml_config(filename: str, directory: str = "settings") -> dict[str, Any]:
    """Load a YAML configuration file from config/<directory>/."""
    project_root = find_project_root()
    config_path = project_root / "config" / directory / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


class Settings(BaseSettings):
    """Secrets loaded from config/.env. Only passwords, tokens, and keys."""

    db_password: str = ""
    redis_password: str = ""
    jwt_secret: str
    telegram_bot_token: str
    telegram_webhook_secret: str
    openai_api_key: str = ""
    database_url: str | None = None

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


def _load_validated(schema_cls: type, filename: str) -> Any:
    """Load YAML and validate against schema. Returns typed model instance."""
    raw = load_yaml_config(filename)
    try:
        return schema_cls(**raw)
    except ValidationError as e:
        raise ValueError(
            f"Invalid configuration in {filename}:\n{e}"
        ) from e


class AppConfig:
    """
    Application configuration loaded from YAML files.

    Each YAML file is validated against its Pydantic schema at load time.
    Properties return typed Pydantic model instances with attribute access.
    """

    def __init__(self) -> None:
        self._application = _load_validated(ApplicationSchema, "application.yaml")
        self._database = _load_validated(DatabaseSchema, "database.yaml")
        self._logging = _load_validated(LoggingSchema, "logging.yaml")
        self._features = _load_validated(FeaturesSchema, "features.yaml")
        self._security = _load_validated(SecuritySchema, "security.yaml")
        self._ai = _load_validated(AISchema, "ai.yaml")
        self._plans = _load_validated(PlansSchema, "plans.yaml")
        self._alerts = _load_validated(AlertsSchema, "alerts.yaml")
        self._observability = _load_validated(ObservabilitySchema, "observability.yaml")

    @property
    def application(self) -> ApplicationSchema:
        """Application settings."""
        return self._application

    @property
    def database(self) -> DatabaseSchema:
        """Database settings."""
        return self._database

    @property
    def logging(self) -> LoggingSchema:
        """Logging settings."""
        return self._logging

    @property
    def features(self) -> FeaturesSchema:
        """Feature flags."""
        return self._features

    @property
    def security(self) -> SecuritySchema:
        """Security settings."""
        return self._security

    @property
    def ai(self) -> AISchema:
        """LLM client settings."""
        return self._ai

    @property
    def plans(self) -> PlansSchema:
        """Subscription plans and usage limits."""
        return self._plans

    @property
    def alerts(self) -> AlertsSchema:
        """Alert rules and notification retention."""
        return self._alerts

    @property
    def observability(self) -> ObservabilitySchema:
        """Health check settings."""
        return self._observability


@lru_cache
def get_settings() -> Settings:
    """Get cached secrets instance. Resolves .env path from project root."""
    env_path = find_project_root() / "config" / ".env"
    return Settings(_env_file=str(env_path))


@lru_cache
def get_app_config() -> AppConfig:
    """Get cached application configuration."""
    return AppConfig()


def get_database_url(async_driver: bool = True) -> str:
    """
    Construct database URL from YAML config and secrets.

    DATABASE_URL in config/.env takes precedence (local SQLite setups).

    Args:
        async_driver: Use asyncpg driver if True, psycopg2 if False.

    Returns:
        Database connection URL string.
    """
    override = get_settings().database_url
    if override:
        if not async_driver:
            return override.replace("+asyncpg", "").replace("+aiosqlite", "")
        return override

    db = get_app_config().database
    password = get_settings().db_password
    driver = "postgresql+asyncpg" if async_driver else "postgresql"
    return f"{driver}://{db.user}:{password}@{db.host}:{db.port}/{db.name}"


def get_redis_url() -> str:
    """Construct Redis URL from YAML config and secrets."""
    redis = get_app_config().database.redis
    password = get_settings().redis_password
    auth = f":{password}@" if password else ""
    return f"redis://{auth}{redis.host}:{redis.port}/{redis.db}"


def get_server_base_url() -> tuple[str, float]:
    """
    Get the backend server base URL and timeout from application.yaml.

    Returns:
        Tuple of (base_url, timeout_seconds).
    """
    app = get_app_config().application
    server = app.server
    base_url = f"http://{server.host}:{server.port}"
    timeout = float(app.timeouts.external_api)
    return base_url, timeout


def get_webhook_url() -> str:
    """Public URL Telegram delivers updates to."""
    telegram = get_app_config().application.telegram
    return f"{telegram.public_url.rstrip('/')}{telegram.webhook_path}"

"""
Unit Tests for Configuration Management.

Black box tests against the public interface of config.py.
Tests run against the real project YAML files. Secrets come from the
environment set up in the root conftest. Failure scenarios use tmp_path
to create controlled filesystems.
"""

import pytest

from modules.backend.core.config import (
    AppConfig,
    Settings,
    find_project_root,
    get_app_config,
    get_database_url,
    get_redis_url,
    get_server_base_url,
    get_settings,
    get_webhook_url,
    load_yaml_config,
    validate_project_root,
)
from modules.backend.core.config_schema import (
    AISchema,
    AlertsSchema,
    ApplicationSchema,
    PlansSchema,
    SecuritySchema,
)

CONFIG_FILES = [
    "application.yaml",
    "database.yaml",
    "logging.yaml",
    "features.yaml",
    "security.yaml",
    "ai.yaml",
    "plans.yaml",
    "alerts.yaml",
    "observability.yaml",
]


@pytest.fixture(autouse=True)
def _clear_config_cache():
    """Clear lru_cache between tests so each test gets a fresh load."""
    get_settings.cache_clear()
    get_app_config.cache_clear()
    yield
    get_settings.cache_clear()
    get_app_config.cache_clear()


# =============================================================================
# find_project_root
# =============================================================================


class TestFindProjectRoot:
    """Tests for .project_root marker discovery."""

    def test_finds_root_from_project_directory(self):
        root = find_project_root()
        assert (root / ".project_root").exists()
        assert (root / "config" / "settings").is_dir()

    def test_raises_when_no_marker_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with pytest.raises(RuntimeError, match="Project root not found"):
            find_project_root()

    def test_validate_exits_when_marker_missing(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with pytest.raises(SystemExit):
            validate_project_root()


# =============================================================================
# load_yaml_config
# =============================================================================


class TestLoadYamlConfig:
    """Tests for YAML file loading from config/settings/."""

    @pytest.mark.parametrize("filename", CONFIG_FILES)
    def test_loads_every_config_file(self, filename):
        data = load_yaml_config(filename)
        assert isinstance(data, dict)
        assert data

    def test_loads_data_directory(self):
        data = load_yaml_config("transport_tax_rates.yaml", directory="data")
        assert data["year"] == 2024

    def test_raises_for_nonexistent_file(self):
        with pytest.raises(FileNotFoundError, match="Configuration file not found"):
            load_yaml_config("does_not_exist.yaml")

    def test_returns_empty_dict_for_empty_yaml(self, tmp_path, monkeypatch):
        (tmp_path / ".project_root").touch()
        settings_dir = tmp_path / "config" / "settings"
        settings_dir.mkdir(parents=True)
        (settings_dir / "empty.yaml").write_text("")
        monkeypatch.chdir(tmp_path)

        assert load_yaml_config("empty.yaml") == {}


# =============================================================================
# Settings (secrets)
# =============================================================================


class TestSettings:
    def test_reads_secrets_from_environment(self):
        settings = get_settings()
        assert isinstance(settings, Settings)
        assert settings.telegram_bot_token == "123456:TEST-token"
        assert len(settings.jwt_secret) >= 32

    def test_required_secrets(self, monkeypatch, tmp_path):
        """JWT and Telegram secrets have no defaults."""
        monkeypatch.delenv("JWT_SECRET", raising=False)
        from pydantic import ValidationError

        with pytest.raises(ValidationError, match="jwt_secret"):
            Settings(_env_file=str(tmp_path / "missing.env"))


# =============================================================================
# AppConfig (validated YAML)
# =============================================================================


class TestAppConfig:
    def test_sections_are_typed(self):
        config = AppConfig()
        assert isinstance(config.application, ApplicationSchema)
        assert isinstance(config.security, SecuritySchema)
        assert isinstance(config.ai, AISchema)
        assert isinstance(config.plans, PlansSchema)
        assert isinstance(config.alerts, AlertsSchema)

    def test_plans(self):
        plans = AppConfig().plans
        assert plans.default_plan == "free"
        assert set(plans.plans) == {"free", "premium", "business", "enterprise"}
        free = plans.plans["free"].limits
        assert (free.consultations, free.documents, free.disputes) == (5, 3, 1)
        assert plans.plans["enterprise"].limits.consultations == -1

    def test_security_defaults(self):
        security = AppConfig().security
        assert security.jwt.algorithm == "HS256"
        assert security.jwt.access_token_expire_minutes == 1440
        assert security.telegram.init_data_max_age_seconds == 86400

    def test_alert_rules(self):
        alerts = AppConfig().alerts
        assert set(alerts.rules) == {"high_error_rate", "slow_response", "database_connection"}
        assert alerts.rules["database_connection"].severity == "critical"
        assert alerts.deadline_reminder_days == 3

    def test_rejects_yaml_with_missing_required_fields(self, tmp_path, monkeypatch):
        (tmp_path / ".project_root").touch()
        settings_dir = tmp_path / "config" / "settings"
        settings_dir.mkdir(parents=True)
        for filename in CONFIG_FILES:
            (settings_dir / filename).write_text("name: 'Incomplete'")
        monkeypatch.chdir(tmp_path)

        with pytest.raises(ValueError, match="Invalid configuration in application.yaml"):
            AppConfig()

    def test_rejects_yaml_with_unknown_fields(self):
        from pydantic import ValidationError as PydanticValidationError

        data = load_yaml_config("application.yaml")
        data["unknown_field"] = "oops"
        with pytest.raises(PydanticValidationError, match="Extra inputs are not permitted"):
            ApplicationSchema(**data)

    def test_accessors_are_cached(self):
        assert get_app_config() is get_app_config()
        assert get_settings() is get_settings()


# =============================================================================
# URL builders
# =============================================================================


class TestGetDatabaseUrl:
    def test_database_url_override(self, monkeypatch):
        """DATABASE_URL from the environment wins over database.yaml."""
        monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
        assert get_database_url() == "sqlite+aiosqlite:///:memory:"

    def test_sync_override_drops_async_driver(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
        assert get_database_url(async_driver=False) == "sqlite:///:memory:"

    def test_built_from_yaml_without_override(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "")
        monkeypatch.setenv("DB_PASSWORD", "s3cret")

        url = get_database_url()

        db = get_app_config().database
        assert url == f"postgresql+asyncpg://{db.user}:s3cret@{db.host}:{db.port}/{db.name}"
        assert get_database_url(async_driver=False).startswith("postgresql://")


class TestGetRedisUrl:
    def test_without_password(self, monkeypatch):
        monkeypatch.setenv("REDIS_PASSWORD", "")
        redis = get_app_config().database.redis
        assert get_redis_url() == f"redis://{redis.host}:{redis.port}/{redis.db}"

    def test_with_password(self, monkeypatch):
        monkeypatch.setenv("REDIS_PASSWORD", "pw")
        assert get_redis_url().startswith("redis://:pw@")


class TestServerAndWebhookUrls:
    def test_server_base_url(self):
        base_url, timeout = get_server_base_url()
        server = get_app_config().application.server
        assert base_url == f"http://{server.host}:{server.port}"
        assert isinstance(timeout, float)
        assert timeout > 0

    def test_webhook_url(self):
        assert get_webhook_url() == "https://lawerapp.example.com/webhook/telegram"

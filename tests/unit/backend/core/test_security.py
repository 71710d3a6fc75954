"""
Unit Tests for Security Module.

Black box tests against the public interface of security.py.
JWT and HMAC operations execute for real. Only the config boundary is
stubbed with real Pydantic schema objects.
"""

import json
import time
from datetime import timedelta
from types import SimpleNamespace
from unittest.mock import patch

import pytest

from modules.backend.core.config_schema import (
    JwtSchema,
    SecretsValidationSchema,
    TelegramAuthSchema,
)
from modules.backend.core.exceptions import AuthenticationError
from modules.backend.core.security import (
    check_secrets,
    create_access_token,
    decode_token,
    sign_telegram_init_data,
    validate_telegram_init_data,
)

TEST_JWT_SECRET = "test-secret-key-that-is-long-enough-for-testing-purposes"
BOT_TOKEN = "123456:ABC-test-bot-token"


@pytest.fixture
def jwt_config():
    """Real Pydantic JwtSchema with test values."""
    return JwtSchema(
        algorithm="HS256",
        access_token_expire_minutes=30,
        audience="test-api",
    )


@pytest.fixture
def _stub_config(jwt_config):
    """Stub the config boundary so security functions can resolve settings."""
    settings = SimpleNamespace(jwt_secret=TEST_JWT_SECRET)
    app_config = SimpleNamespace(
        security=SimpleNamespace(
            jwt=jwt_config,
            telegram=TelegramAuthSchema(init_data_max_age_seconds=3600),
        )
    )
    with (
        patch("modules.backend.core.security.get_settings", return_value=settings),
        patch("modules.backend.core.security.get_app_config", return_value=app_config),
    ):
        yield


def init_data(auth_date: int | None = None, **extra: str) -> str:
    fields = {
        "query_id": "AAHdF6IQAAAAAN0XohDhrOrc",
        "user": json.dumps({"id": 42, "first_name": "Иван", "username": "ivanov"}),
        "auth_date": str(auth_date if auth_date is not None else int(time.time())),
        **extra,
    }
    return sign_telegram_init_data(fields, BOT_TOKEN)


# =============================================================================
# JWT Access Tokens
# =============================================================================


@pytest.mark.usefixtures("_stub_config")
class TestCreateAccessToken:
    """Tests for JWT access token creation and decoding with real JWT operations."""

    def test_round_trip_preserves_payload(self):
        token = create_access_token({"sub": "user-42", "tg": 42})
        payload = decode_token(token)
        assert payload["sub"] == "user-42"
        assert payload["tg"] == 42

    def test_token_includes_type_and_audience(self):
        payload = decode_token(create_access_token({"sub": "user-1"}))
        assert payload["type"] == "access"
        assert payload["aud"] == "test-api"

    def test_custom_expiration_delta(self):
        short = create_access_token({"sub": "u"}, expires_delta=timedelta(minutes=5))
        long = create_access_token({"sub": "u"}, expires_delta=timedelta(hours=24))
        assert decode_token(long)["exp"] > decode_token(short)["exp"]

    def test_does_not_mutate_input_data(self):
        data = {"sub": "user-1"}
        create_access_token(data)
        assert data == {"sub": "user-1"}


# =============================================================================
# Token Decoding: Failure Cases
# =============================================================================


@pytest.mark.usefixtures("_stub_config")
class TestDecodeToken:
    """Tests for token decoding failures with real JWT operations."""

    def test_garbage_token_raises_authentication_error(self):
        with pytest.raises(AuthenticationError):
            decode_token("not-a-jwt-token")

    def test_tampered_token_raises_authentication_error(self):
        token = create_access_token({"sub": "user-1"})
        with pytest.raises(AuthenticationError):
            decode_token(token[:-4] + "XXXX")

    def test_wrong_audience_raises_authentication_error(self):
        from jose import jwt as jose_jwt

        token = jose_jwt.encode(
            {"sub": "user-1", "aud": "someone-else"},
            TEST_JWT_SECRET,
            algorithm="HS256",
        )
        with pytest.raises(AuthenticationError):
            decode_token(token)

    def test_expired_token_raises_authentication_error(self):
        token = create_access_token({"sub": "user-1"}, expires_delta=timedelta(seconds=-1))
        with pytest.raises(AuthenticationError):
            decode_token(token)


# =============================================================================
# Telegram WebApp init data
# =============================================================================


@pytest.mark.usefixtures("_stub_config")
class TestValidateTelegramInitData:
    def test_valid_data_is_parsed(self):
        parsed = validate_telegram_init_data(init_data(), BOT_TOKEN)

        assert parsed["user"] == {"id": 42, "first_name": "Иван", "username": "ivanov"}
        assert parsed["query_id"] == "AAHdF6IQAAAAAN0XohDhrOrc"
        assert "hash" not in parsed

    def test_wrong_bot_token(self):
        with pytest.raises(AuthenticationError, match="Invalid Telegram init data"):
            validate_telegram_init_data(init_data(), "654321:other-token")

    def test_tampered_field(self):
        data = init_data().replace("ivanov", "petrov")
        with pytest.raises(AuthenticationError):
            validate_telegram_init_data(data, BOT_TOKEN)

    def test_missing_hash(self):
        with pytest.raises(AuthenticationError, match="missing hash"):
            validate_telegram_init_data("auth_date=1700000000&user=%7B%7D", BOT_TOKEN)

    def test_stale_data_uses_configured_max_age(self):
        data = init_data(auth_date=int(time.time()) - 7200)
        with pytest.raises(AuthenticationError, match="expired"):
            validate_telegram_init_data(data, BOT_TOKEN)

    def test_zero_max_age_disables_expiry(self):
        data = init_data(auth_date=1)
        parsed = validate_telegram_init_data(data, BOT_TOKEN, max_age_seconds=0)
        assert parsed["auth_date"] == "1"

    def test_invalid_user_json(self):
        data = sign_telegram_init_data(
            {"auth_date": str(int(time.time())), "user": "{not json"}, BOT_TOKEN
        )
        with pytest.raises(AuthenticationError, match="user payload"):
            validate_telegram_init_data(data, BOT_TOKEN)


# =============================================================================
# Secret strength checks
# =============================================================================


class TestCheckSecrets:
    def _config(self, environment: str, telegram_enabled: bool = True):
        return SimpleNamespace(
            application=SimpleNamespace(environment=environment),
            features=SimpleNamespace(channel_telegram_enabled=telegram_enabled),
            security=SimpleNamespace(
                secrets_validation=SecretsValidationSchema(
                    jwt_secret_min_length=32,
                    webhook_secret_min_length=16,
                ),
            ),
        )

    def _check(self, config, jwt_secret: str, webhook_secret: str) -> list[str]:
        settings = SimpleNamespace(jwt_secret=jwt_secret, telegram_webhook_secret=webhook_secret)
        with (
            patch("modules.backend.core.security.get_settings", return_value=settings),
            patch("modules.backend.core.security.get_app_config", return_value=config),
        ):
            return check_secrets()

    def test_strong_secrets_pass(self):
        assert self._check(self._config("production"), "x" * 32, "y" * 16) == []

    def test_weak_secrets_only_warn_in_development(self):
        problems = self._check(self._config("development"), "short", "tiny")
        assert len(problems) == 2

    def test_weak_secrets_are_fatal_in_production(self):
        with pytest.raises(RuntimeError, match="JWT_SECRET"):
            self._check(self._config("production"), "short", "y" * 16)

    def test_webhook_secret_ignored_without_telegram(self):
        config = self._config("production", telegram_enabled=False)
        assert self._check(config, "x" * 32, "") == []

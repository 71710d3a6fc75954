"""
Security Utilities.

JWT access tokens for the Mini App API and validation of Telegram
WebApp init data.
"""

import hashlib
import hmac
import json
import time
from datetime import timedelta
from typing import Any
from urllib.parse import parse_qsl

from jose import JWTError, jwt

from modules.backend.core.config import get_app_config, get_settings
from modules.backend.core.exceptions import AuthenticationError
from modules.backend.core.logging import get_logger
from modules.backend.core.utils import utc_now

logger = get_logger(__name__)


def create_access_token(data: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    """
    Create a JWT access token.

    Args:
        data: Payload data to encode (``sub`` is the user id)
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token
    """
    settings = get_settings()
    jwt_config = get_app_config().security.jwt
    to_encode = data.copy()

    if expires_delta:
        expire = utc_now() + expires_delta
    else:
        expire = utc_now() + timedelta(minutes=jwt_config.access_token_expire_minutes)

    to_encode.update({"exp": expire, "type": "access", "aud": jwt_config.audience})
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=jwt_config.algorithm)


def decode_token(token: str) -> dict[str, Any]:
    """
    Decode and validate a JWT token.

    Raises:
        AuthenticationError: If token is invalid or expired
    """
    settings = get_settings()
    jwt_config = get_app_config().security.jwt
    try:
        return jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[jwt_config.algorithm],
            audience=jwt_config.audience,
        )
    except JWTError as e:
        logger.warning("Token decode failed", extra={"error": str(e)})
        raise AuthenticationError("Invalid or expired token") from e


def validate_telegram_init_data(
    init_data: str,
    bot_token: str,
    max_age_seconds: int | None = None,
) -> dict[str, Any]:
    """
    Validate Telegram WebApp init data and return its parsed fields.

    The check string is every field except ``hash`` as ``key=value``
    sorted by key and joined with newlines. The signing key is
    HMAC-SHA256 of the bot token keyed with "WebAppData".

    Returns:
        Parsed fields. ``user`` is decoded from JSON when present.

    Raises:
        AuthenticationError: If the hash is missing, wrong, or the data is stale
    """
    fields = dict(parse_qsl(init_data, keep_blank_values=True))
    received_hash = fields.pop("hash", None)
    if not received_hash:
        raise AuthenticationError("Telegram init data is missing hash")

    check_string = "\n".join(f"{key}={fields[key]}" for key in sorted(fields))
    secret_key = hmac.new(b"WebAppData", bot_token.encode(), hashlib.sha256).digest()
    expected_hash = hmac.new(secret_key, check_string.encode(), hashlib.sha256).hexdigest()

    if not hmac.compare_digest(expected_hash, received_hash):
        logger.warning("Telegram init data signature mismatch")
        raise AuthenticationError("Invalid Telegram init data")

    if max_age_seconds is None:
        max_age_seconds = get_app_config().security.telegram.init_data_max_age_seconds

    try:
        auth_date = int(fields.get("auth_date", "0"))
    except ValueError as e:
        raise AuthenticationError("Invalid Telegram auth date") from e
    if max_age_seconds > 0 and time.time() - auth_date > max_age_seconds:
        raise AuthenticationError("Telegram init data has expired")

    parsed: dict[str, Any] = dict(fields)
    if "user" in parsed:
        try:
            parsed["user"] = json.loads(parsed["user"])
        except json.JSONDecodeError as e:
            raise AuthenticationError("Invalid Telegram user payload") from e
    return parsed


def sign_telegram_init_data(fields: dict[str, str], bot_token: str) -> str:
    """Build a signed init data query string. Used by tests and local tooling."""
    from urllib.parse import urlencode

    check_string = "\n".join(f"{key}={fields[key]}" for key in sorted(fields))
    secret_key = hmac.new(b"WebAppData", bot_token.encode(), hashlib.sha256).digest()
    signature = hmac.new(secret_key, check_string.encode(), hashlib.sha256).hexdigest()
    return urlencode({**fields, "hash": signature})


def check_secrets() -> list[str]:
    """
    Check secret lengths against security.yaml.

    Returns the list of problems. Outside development a non-empty list
    is fatal.

    Raises:
        RuntimeError: If secrets are weak and the environment is not development
    """
    settings = get_settings()
    app_config = get_app_config()
    rules = app_config.security.secrets_validation

    problems = []
    if len(settings.jwt_secret) < rules.jwt_secret_min_length:
        problems.append(f"JWT_SECRET must be at least {rules.jwt_secret_min_length} characters")
    if (
        app_config.features.channel_telegram_enabled
        and len(settings.telegram_webhook_secret) < rules.webhook_secret_min_length
    ):
        problems.append(
            f"TELEGRAM_WEBHOOK_SECRET must be at least {rules.webhook_secret_min_length} characters"
        )

    if problems:
        if app_config.application.environment != "development":
            raise RuntimeError("; ".join(problems))
        for problem in problems:
            logger.warning("Weak secret", extra={"problem": problem})
    return problems

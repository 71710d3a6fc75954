"""
Unit Tests for Centralized Logging.
"""

import json
import logging
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
import structlog

from modules.backend.core.config_schema import (
    ConsoleHandlerSchema,
    FileHandlerSchema,
    HandlersSchema,
    LoggingSchema,
)
from modules.backend.core.logging import (
    VALID_SOURCES,
    get_logger,
    log_with_source,
    setup_logging,
)


def logging_config(**overrides) -> SimpleNamespace:
    schema = LoggingSchema(
        level=overrides.get("level", "INFO"),
        format=overrides.get("format", "json"),
        handlers=HandlersSchema(
            console=ConsoleHandlerSchema(enabled=overrides.get("console", True)),
            file=FileHandlerSchema(
                enabled=overrides.get("file", False),
                path="logs/system.jsonl",
                max_bytes=1024 * 1024,
                backup_count=2,
            ),
        ),
    )
    return SimpleNamespace(logging=schema)


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
    structlog.reset_defaults()


class TestValidSources:
    def test_contains_application_channels(self):
        assert {"web", "cli", "telegram", "tasks", "ai"} <= VALID_SOURCES

    def test_is_immutable(self):
        assert isinstance(VALID_SOURCES, frozenset)


class TestSetupLogging:
    def test_level_from_config(self):
        with patch(
            "modules.backend.core.logging.get_app_config",
            return_value=logging_config(level="WARNING"),
        ):
            setup_logging()

        assert logging.getLogger().level == logging.WARNING

    def test_arguments_override_config(self):
        with patch(
            "modules.backend.core.logging.get_app_config",
            return_value=logging_config(level="WARNING", console=False),
        ):
            setup_logging(level="DEBUG", enable_console=True)

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1

    def test_console_disabled_leaves_no_handlers(self):
        with patch(
            "modules.backend.core.logging.get_app_config",
            return_value=logging_config(console=False, file=False),
        ):
            setup_logging()

        assert logging.getLogger().handlers == []

    def test_file_handler_writes_jsonl_under_project_root(self, tmp_path):
        with (
            patch(
                "modules.backend.core.logging.get_app_config",
                return_value=logging_config(console=False, file=True),
            ),
            patch("modules.backend.core.logging.find_project_root", return_value=tmp_path),
        ):
            setup_logging()
            get_logger("tests.logging").info("Спор создан", dispute_id="d-1")

        for handler in logging.getLogger().handlers:
            handler.flush()
        log_file = tmp_path / "logs" / "system.jsonl"
        record = json.loads(log_file.read_text(encoding="utf-8").splitlines()[-1])
        assert record["event"] == "Спор создан"
        assert record["dispute_id"] == "d-1"
        assert record["level"] == "info"
        assert record["logger"] == "tests.logging"
        assert "timestamp" in record

    def test_noisy_libraries_quieted(self):
        with patch(
            "modules.backend.core.logging.get_app_config",
            return_value=logging_config(console=False),
        ):
            setup_logging()

        for name in ("uvicorn.access", "sqlalchemy.engine", "httpx", "aiogram.event"):
            assert logging.getLogger(name).level == logging.WARNING


class TestLogWithSource:
    def test_passes_source_and_fields(self):
        logger = MagicMock()

        log_with_source(logger, "telegram", "info", "Update received", chat_id=123)

        logger.info.assert_called_once_with("Update received", source="telegram", chat_id=123)

    def test_level_is_case_insensitive(self):
        logger = MagicMock()

        log_with_source(logger, "tasks", "WARNING", "Reminder skipped")

        logger.warning.assert_called_once_with("Reminder skipped", source="tasks")

    def test_unknown_level_raises(self):
        with pytest.raises(AttributeError):
            log_with_source(object(), "cli", "loud", "nope")

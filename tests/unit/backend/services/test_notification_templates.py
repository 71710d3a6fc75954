"""
Unit Tests for notification templates and Telegram push.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from modules.backend.core.config import get_app_config
from modules.backend.core.exceptions import NotFoundError
from modules.backend.services.notification import (
    NOTIFICATION_TEMPLATES,
    NotificationService,
    render_template,
    template_variables,
)
from modules.telegram.services.notifications import NotificationResult


def test_render_dispute_status():
    title, message = render_template(
        "dispute_status_changed",
        {"dispute_title": "Возврат телефона", "old_status": "Активный", "new_status": "Решён"},
    )

    assert title == "Статус спора изменён"
    assert message == "Спор «Возврат телефона»: Активный → Решён."


def test_missing_variables_render_empty():
    _, message = render_template("consultation_complete", {})

    assert message == "Юрист-ассистент ответил на ваш вопрос по теме «»."


def test_none_values_treated_as_missing():
    _, message = render_template("document_ready", {"document_title": None})

    assert "«»" in message


def test_unknown_template():
    with pytest.raises(NotFoundError):
        render_template("birthday", {})


def test_template_variables():
    assert template_variables(NOTIFICATION_TEMPLATES["deadline_reminder"]["message"]) == [
        "dispute_title",
        "deadline",
        "days_left",
    ]


def test_list_templates_exposes_variables():
    templates = {t.id: t for t in NotificationService.list_templates()}

    assert set(templates) == set(NOTIFICATION_TEMPLATES)
    assert templates["user_registration"].variables == ["user_name", "plan_name"]


class TestTelegramPush:
    @pytest.fixture
    def delivery(self, monkeypatch) -> MagicMock:
        config = get_app_config()
        monkeypatch.setattr(
            config,
            "_features",
            config.features.model_copy(
                update={"channel_telegram_enabled": True, "notifications_telegram_delivery": True}
            ),
        )
        service = MagicMock()
        service.send = AsyncMock(return_value=NotificationResult(success=True, chat_id=100200300))
        monkeypatch.setattr(
            "modules.telegram.services.notifications.get_notification_service", lambda: service
        )
        return service

    async def test_push_escapes_user_text(self, db_session, user, delivery):
        notification = await NotificationService(db_session).notify(
            user, "document_ready", {"document_title": "Претензия ООО <Ромашка> & Co"}
        )

        chat_id, text = delivery.send.await_args.args
        assert chat_id == 100200300
        assert "Претензия ООО &lt;Ромашка&gt; &amp; Co" in text
        assert text.startswith("<b>Документ сформирован</b>")
        assert notification.channel == "telegram"
        assert "<Ромашка>" in notification.message

    async def test_failed_push_keeps_in_app_channel(self, db_session, user, delivery):
        delivery.send.return_value = NotificationResult(
            success=False, chat_id=100200300, error="bot was blocked"
        )

        notification = await NotificationService(db_session).notify(user, "document_ready", {})

        assert notification.channel == "in_app"

"""
Unit tests for Telegram delivery.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from aiogram.exceptions import TelegramBadRequest
from aiogram.methods import SendMessage

from modules.telegram.services.notifications import (
    ALERT_EMOJI,
    RATE_LIMIT_PER_CHAT,
    AlertType,
    NotificationService,
    format_alert,
)


@pytest.fixture
def bot() -> AsyncMock:
    bot = AsyncMock()
    bot.send_message.return_value = MagicMock(message_id=777)
    return bot


class TestSend:
    async def test_success(self, bot):
        result = await NotificationService(bot=bot).send(100, "<b>Документ готов</b>")

        assert result.success is True
        assert result.chat_id == 100
        assert result.message_id == 777
        bot.send_message.assert_awaited_once_with(
            chat_id=100,
            text="<b>Документ готов</b>",
            parse_mode="HTML",
            disable_notification=False,
            reply_markup=None,
        )

    async def test_api_error_is_returned_not_raised(self, bot):
        bot.send_message.side_effect = TelegramBadRequest(
            method=SendMessage(chat_id=100, text="x"), message="chat not found"
        )

        result = await NotificationService(bot=bot).send(100, "x")

        assert result.success is False
        assert "chat not found" in result.error

    async def test_rate_limited_per_chat(self, bot):
        service = NotificationService(bot=bot)

        for _ in range(RATE_LIMIT_PER_CHAT):
            assert (await service.send(1, "x")).success
        limited = await service.send(1, "x")
        other_chat = await service.send(2, "x")

        assert limited.rate_limited is True
        assert limited.success is False
        assert other_chat.success is True
        assert bot.send_message.await_count == RATE_LIMIT_PER_CHAT + 1

    async def test_lazy_bot(self, bot):
        with patch("modules.telegram.bot.get_bot", return_value=bot) as get_bot:
            await NotificationService().send(1, "x")

        get_bot.assert_called_once()


class TestAlerts:
    def test_format_alert_with_data(self):
        text = format_alert(
            "Высокая доля ошибок",
            "Ошибок больше порога",
            AlertType.ERROR,
            {"error_rate": "7.5%"},
        )

        assert text.splitlines() == [
            "❌ <b>Высокая доля ошибок</b>",
            "",
            "Ошибок больше порога",
            "",
            "<b>Error rate:</b> <code>7.5%</code>",
        ]

    def test_format_alert_escapes_text(self):
        text = format_alert("Ошибка <db>", "a & b", AlertType.ERROR, {"error": "x < y"})

        assert text.splitlines() == [
            "❌ <b>Ошибка &lt;db&gt;</b>",
            "",
            "a &amp; b",
            "",
            "<b>Error:</b> <code>x &lt; y</code>",
        ]

    def test_every_type_has_emoji(self):
        assert set(ALERT_EMOJI) == set(AlertType)

    async def test_send_alert_uses_formatted_text(self, bot):
        await NotificationService(bot=bot).send_alert(5, "Заголовок", "Текст", AlertType.WARNING)

        assert bot.send_message.await_args.kwargs["text"].startswith("⚠️ <b>Заголовок</b>")


class TestBroadcast:
    async def test_reports_each_chat(self, bot):
        bot.send_message.side_effect = [
            MagicMock(message_id=1),
            TelegramBadRequest(method=SendMessage(chat_id=2, text="x"), message="blocked"),
            MagicMock(message_id=3),
        ]

        results = await NotificationService(bot=bot).broadcast([1, 2, 3], "x", delay_between=0)

        assert [r.success for r in results] == [True, False, True]

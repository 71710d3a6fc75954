"""
Unit Tests for Bot Handlers.

Handlers are plain coroutines; they are called with mocked messages and
an in-memory FSM context.
"""

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from aiogram.types import ReplyKeyboardRemove
from pydantic_ai.models.test import TestModel

from modules.backend.core.exceptions import AIServiceError
from modules.backend.core.utils import utc_now
from modules.backend.repositories.dispute import DisputeRepository
from modules.backend.services.ai_client import LegalAIClient
from modules.telegram.callbacks import CategoryCallback
from modules.telegram.handlers import get_all_routers
from modules.telegram.handlers.common import (
    HELP_TEXT,
    WELCOME_TEXT,
    cmd_cancel,
    cmd_help,
    cmd_start,
    cmd_status,
    format_status,
)
from modules.telegram.handlers.consultation import (
    AI_UNAVAILABLE_TEXT,
    answer_question,
    pick_category,
)
from modules.telegram.handlers.fallback import unknown_message
from modules.telegram.handlers.menu import show_disputes, show_documents
from modules.telegram.states import ConsultationForm


def sent_texts(mock) -> list[str]:
    return [c.args[0] for c in mock.await_args_list]


def test_fallback_router_is_last():
    assert [r.name for r in get_all_routers()] == ["common", "menu", "consultation", "fallback"]


class TestCommands:
    async def test_start_clears_state_and_shows_menu(self, message_mock, fsm_state, tg):
        fsm_state.storage["state"] = ConsultationForm.question.state

        await cmd_start(message_mock, tg.user(), fsm_state)

        assert fsm_state.storage["state"] is None
        assert message_mock.answer.await_args.args[0] == WELCOME_TEXT
        keyboard = message_mock.answer.await_args.kwargs["reply_markup"]
        assert keyboard.inline_keyboard[-1][0].web_app.url == "https://lawerapp.example.com/app"

    async def test_help(self, message_mock):
        await cmd_help(message_mock)

        message_mock.answer.assert_awaited_once_with(HELP_TEXT)

    async def test_cancel_without_state(self, message_mock, fsm_state):
        await cmd_cancel(message_mock, fsm_state)

        assert sent_texts(message_mock.answer) == ["Нечего отменять."]

    async def test_cancel_leaves_consultation(self, message_mock, fsm_state):
        fsm_state.storage["state"] = ConsultationForm.question.state

        await cmd_cancel(message_mock, fsm_state)

        assert fsm_state.storage["state"] is None
        assert sent_texts(message_mock.answer) == ["✅ Действие отменено.", "Главное меню:"]

    async def test_fallback(self, message_mock):
        await unknown_message(message_mock)

        assert "/help" in message_mock.answer.await_args.args[0]


class TestStatus:
    def test_format_status(self):
        text = format_status({
            "database": {"status": "healthy", "latency_ms": 3.2},
            "redis": {"status": "unhealthy", "error": "timeout"},
        })

        assert "🟢 <b>Database:</b> healthy (3.2 мс)" in text
        assert "🔴 <b>Redis:</b> unhealthy" in text

    @pytest.fixture
    def backend(self, monkeypatch):
        responses: dict = {}
        real_client = httpx.AsyncClient

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/health/ready"
            if "error" in responses:
                raise responses["error"]
            return httpx.Response(responses["status"], json=responses["body"])

        monkeypatch.setattr(
            "modules.telegram.handlers.common.httpx.AsyncClient",
            lambda **kwargs: real_client(transport=httpx.MockTransport(handler), **kwargs),
        )
        return responses

    async def test_unhealthy_backend_still_reports_checks(self, message_mock, backend):
        backend.update(status=503, body={"status": "unhealthy", "checks": {"redis": {"status": "unhealthy"}}})

        await cmd_status(message_mock)

        assert "🔴 <b>Redis:</b> unhealthy" in message_mock.answer.await_args.args[0]

    async def test_unreachable_backend(self, message_mock, backend):
        backend["error"] = httpx.ConnectError("refused")

        await cmd_status(message_mock)

        assert "🔴 <b>Сервер:</b> недоступен" in message_mock.answer.await_args.args[0]


class TestQuickConsultation:
    async def test_pick_category_enters_question_state(self, callback_mock, fsm_state):
        await pick_category(callback_mock, CategoryCallback(category="labor"), fsm_state)

        assert fsm_state.storage["state"] == ConsultationForm.question.state
        assert fsm_state.storage["data"] == {"category": "labor"}
        assert "Трудовое право" in callback_mock.message.answer.await_args.args[0]
        callback_mock.answer.assert_awaited_once()

    async def test_short_question_keeps_state(self, message_mock, fsm_state):
        fsm_state.storage["state"] = ConsultationForm.question.state
        message_mock.text = "помогите"

        await answer_question(message_mock, fsm_state)

        assert fsm_state.storage["state"] == ConsultationForm.question.state
        assert "подробнее" in message_mock.answer.await_args.args[0]

    async def test_long_question_rejected(self, message_mock, fsm_state):
        message_mock.text = "а" * 2001

        await answer_question(message_mock, fsm_state)

        assert "2000" in message_mock.answer.await_args.args[0]

    async def test_answers_with_ai(self, message_mock, fsm_state, monkeypatch):
        client = LegalAIClient(model=TestModel(custom_output_text="Обратитесь в трудовую инспекцию."))
        monkeypatch.setattr("modules.telegram.handlers.consultation.get_ai_client", lambda: client)
        fsm_state.storage["data"] = {"category": "labor"}
        message_mock.text = "Работодатель задерживает зарплату два месяца"

        await answer_question(message_mock, fsm_state)

        message_mock.bot.send_chat_action.assert_awaited_once_with(100200300, "typing")
        first, second = message_mock.answer.await_args_list
        assert first.args[0] == "Обратитесь в трудовую инспекцию."
        assert isinstance(first.kwargs["reply_markup"], ReplyKeyboardRemove)
        assert "приложение" in second.args[0]
        assert fsm_state.storage["data"] == {}

    async def test_ai_answer_is_escaped(self, message_mock, fsm_state, monkeypatch):
        client = LegalAIClient(model=TestModel(custom_output_text="См. ст. 81 ТК <РФ> & практику"))
        monkeypatch.setattr("modules.telegram.handlers.consultation.get_ai_client", lambda: client)
        message_mock.text = "Меня уволили без предупреждения, что делать?"

        await answer_question(message_mock, fsm_state)

        assert message_mock.answer.await_args_list[0].args[0] == "См. ст. 81 ТК &lt;РФ&gt; &amp; практику"

    async def test_ai_failure_is_reported(self, message_mock, fsm_state, monkeypatch):
        client = MagicMock()
        client.quick_answer = AsyncMock(side_effect=AIServiceError())
        monkeypatch.setattr("modules.telegram.handlers.consultation.get_ai_client", lambda: client)
        message_mock.text = "Как вернуть залог за квартиру?"

        await answer_question(message_mock, fsm_state)

        assert sent_texts(message_mock.answer) == [AI_UNAVAILABLE_TEXT]


class TestMenu:
    async def test_disputes_empty(self, callback_mock, user, db_session):
        await show_disputes(callback_mock, user, db_session)

        assert "пока нет споров" in callback_mock.message.edit_text.await_args.args[0]

    async def test_disputes_listed_with_deadline(self, callback_mock, user, db_session):
        deadline = utc_now() + timedelta(days=5)
        await DisputeRepository(db_session).create(
            user_id=user.id,
            title="Возврат телефона",
            description="Магазин отказал в возврате",
            dispute_type="consumer",
            status="active",
            deadline=deadline,
        )

        await show_disputes(callback_mock, user, db_session)

        text = callback_mock.message.edit_text.await_args.args[0]
        assert "Мои споры</b> (1)" in text
        assert "Возврат телефона" in text
        assert f"срок {deadline:%d.%m.%Y}" in text

    async def test_documents_lists_templates(self, callback_mock, user, db_session):
        await show_documents(callback_mock, user, db_session)

        text = callback_mock.message.edit_text.await_args.args[0]
        assert "Создано документов: 0" in text
        assert text.count("• ") == 4

    async def test_dispute_title_is_escaped(self, callback_mock, user, db_session):
        await DisputeRepository(db_session).create(
            user_id=user.id,
            title="ООО <Ромашка> & Co",
            description="Магазин отказал в возврате",
            dispute_type="consumer",
            status="active",
        )

        await show_disputes(callback_mock, user, db_session)

        text = callback_mock.message.edit_text.await_args.args[0]
        assert "• <b>ООО &lt;Ромашка&gt; &amp; Co</b>" in text

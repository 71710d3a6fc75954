"""
Unit Test Fixtures.

Builders for aiogram objects. Outgoing bot calls are mocked; nothing
here talks to Telegram.
"""

from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from aiogram.types import CallbackQuery, Chat, Message, Update
from aiogram.types import User as TelegramUser


def _tg_user(telegram_id: int = 100200300, **fields) -> TelegramUser:
    values = {"first_name": "Иван", "username": "ivanov", "language_code": "ru", "is_bot": False}
    values.update(fields)
    return TelegramUser(id=telegram_id, **values)


def _message(text: str | None = "/start", telegram_id: int = 100200300) -> Message:
    return Message(
        message_id=1,
        date=datetime(2024, 2, 15, 12, 0, tzinfo=timezone.utc),
        chat=Chat(id=telegram_id, type="private"),
        from_user=_tg_user(telegram_id),
        text=text,
    )


def _callback(data: str, telegram_id: int = 100200300) -> CallbackQuery:
    return CallbackQuery(
        id="cb-1",
        from_user=_tg_user(telegram_id),
        chat_instance="ci-1",
        data=data,
        message=_message(None, telegram_id),
    )


def _update(event: Message | CallbackQuery, update_id: int = 1) -> Update:
    if isinstance(event, Message):
        return Update(update_id=update_id, message=event)
    return Update(update_id=update_id, callback_query=event)


@pytest.fixture
def tg() -> SimpleNamespace:
    """Builders for real aiogram objects: tg.user(), tg.message(), tg.callback(), tg.update()."""
    return SimpleNamespace(user=_tg_user, message=_message, callback=_callback, update=_update)


@pytest.fixture
def message_mock() -> MagicMock:
    """Message stand-in: isinstance checks pass and answer() is recorded."""
    message = MagicMock(spec=Message)
    message.from_user = _tg_user()
    message.chat = Chat(id=100200300, type="private")
    message.answer = AsyncMock()
    message.bot = MagicMock()
    message.bot.send_chat_action = AsyncMock()
    return message


@pytest.fixture
def callback_mock() -> MagicMock:
    callback = MagicMock(spec=CallbackQuery)
    callback.from_user = _tg_user()
    callback.answer = AsyncMock()
    callback.message = MagicMock()
    callback.message.answer = AsyncMock()
    callback.message.edit_text = AsyncMock()
    return callback


@pytest.fixture
def fsm_state() -> AsyncMock:
    """FSMContext double backed by a dict."""
    storage: dict = {"state": None, "data": {}}
    state = AsyncMock()

    async def set_state(value=None):
        storage["state"] = value.state if hasattr(value, "state") else value

    async def update_data(**kwargs):
        storage["data"].update(kwargs)

    async def get_state():
        return storage["state"]

    async def get_data():
        return dict(storage["data"])

    async def clear():
        storage["state"] = None
        storage["data"] = {}

    state.set_state.side_effect = set_state
    state.get_state.side_effect = get_state
    state.update_data.side_effect = update_data
    state.get_data.side_effect = get_data
    state.clear.side_effect = clear
    state.storage = storage
    return state

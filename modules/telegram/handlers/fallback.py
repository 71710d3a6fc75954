"""
Fallback Handler.

Catches messages no other router handled. Included last.
"""

from aiogram import Router
from aiogram.types import Message

from modules.backend.core.config import get_app_config
from modules.telegram.keyboards.common import get_main_menu_keyboard

router = Router(name="fallback")


@router.message()
async def unknown_message(message: Message) -> None:
    await message.answer(
        "Я не понял сообщение. Воспользуйтесь меню или командой /help.",
        reply_markup=get_main_menu_keyboard(get_app_config().application.telegram.mini_app_url),
    )

"""
Keyboard Builders.

Inline and reply keyboards for the bot.

Example:
    from aiogram.utils.keyboard import InlineKeyboardBuilder

    builder = InlineKeyboardBuilder()
    builder.button(text="⚖️ Мои споры", callback_data=MenuCallback(menu="disputes"))
    keyboard = builder.as_markup()
"""

from modules.telegram.keyboards.common import (
    BOT_CATEGORIES,
    CANCEL_TEXT,
    category_label,
    get_back_keyboard,
    get_cancel_keyboard,
    get_categories_keyboard,
    get_main_menu_keyboard,
    get_open_app_keyboard,
)

__all__ = [
    "BOT_CATEGORIES",
    "CANCEL_TEXT",
    "category_label",
    "get_back_keyboard",
    "get_cancel_keyboard",
    "get_categories_keyboard",
    "get_main_menu_keyboard",
    "get_open_app_keyboard",
]

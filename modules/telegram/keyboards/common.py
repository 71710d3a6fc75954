"""
Common Keyboard Builders.

Inline menus for the bot and the button that opens the Mini App.
"""

from aiogram.types import InlineKeyboardMarkup, ReplyKeyboardMarkup, WebAppInfo
from aiogram.utils.keyboard import InlineKeyboardBuilder, ReplyKeyboardBuilder

from modules.backend.models.consultation import CATEGORY_NAMES, LegalCategory
from modules.telegram.callbacks.common import CategoryCallback, MenuCallback

CANCEL_TEXT = "❌ Отмена"

# Areas offered in the bot; the Mini App covers the full list
BOT_CATEGORIES: dict[LegalCategory, str] = {
    LegalCategory.LABOR: "👷 Трудовое право",
    LegalCategory.HOUSING: "🏠 Жилищное право",
    LegalCategory.FAMILY: "👨‍👩‍👧 Семейное право",
    LegalCategory.CIVIL: "📜 Гражданское право",
    LegalCategory.CONSUMER: "🛒 Защита прав потребителей",
}


def get_main_menu_keyboard(mini_app_url: str) -> InlineKeyboardMarkup:
    """Main menu: consultation, documents, disputes, plus the Mini App button."""
    builder = InlineKeyboardBuilder()

    builder.button(text="🤖 AI Консультация", callback_data=MenuCallback(menu="consultation"))
    builder.button(text="📄 Документы", callback_data=MenuCallback(menu="documents"))
    builder.button(text="⚖️ Мои споры", callback_data=MenuCallback(menu="disputes"))
    builder.button(text="❓ Помощь", callback_data=MenuCallback(menu="help"))
    builder.button(text="🌐 Открыть приложение", web_app=WebAppInfo(url=mini_app_url))

    builder.adjust(1, 2, 1, 1)
    return builder.as_markup()


def get_categories_keyboard() -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    for category, label in BOT_CATEGORIES.items():
        builder.button(text=label, callback_data=CategoryCallback(category=category.value))
    builder.button(text="⬅️ Назад", callback_data=MenuCallback(menu="main"))
    builder.adjust(1)
    return builder.as_markup()


def get_open_app_keyboard(url: str, text: str = "🌐 Открыть приложение") -> InlineKeyboardMarkup:
    """A Mini App button with a way back to the menu."""
    builder = InlineKeyboardBuilder()
    builder.button(text=text, web_app=WebAppInfo(url=url))
    builder.button(text="⬅️ Назад", callback_data=MenuCallback(menu="main"))
    builder.adjust(1)
    return builder.as_markup()


def get_back_keyboard() -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    builder.button(text="⬅️ Главное меню", callback_data=MenuCallback(menu="main"))
    return builder.as_markup()


def get_cancel_keyboard() -> ReplyKeyboardMarkup:
    """Reply keyboard shown while the bot waits for a question."""
    builder = ReplyKeyboardBuilder()
    builder.button(text=CANCEL_TEXT)
    return builder.as_markup(
        resize_keyboard=True,
        one_time_keyboard=True,
        input_field_placeholder="Опишите вашу ситуацию...",
    )


def category_label(category: str) -> str:
    """Display name for a category value, falling back to the raw value."""
    try:
        return CATEGORY_NAMES[LegalCategory(category)]
    except ValueError:
        return category

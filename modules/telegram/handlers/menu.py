"""
Menu Handlers.

Inline main-menu navigation.
"""

from aiogram import F, Router
from aiogram.types import CallbackQuery
from aiogram.utils.text_decorations import html_decoration
from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.config import get_app_config
from modules.backend.models.dispute import DisputeStatus
from modules.backend.models.user import User
from modules.backend.repositories.dispute import DisputeRepository
from modules.backend.repositories.document import DocumentRepository
from modules.backend.services.dispute import STATUS_NAMES
from modules.backend.services.document_templates import TEMPLATES
from modules.telegram.callbacks.common import MenuCallback
from modules.telegram.handlers.common import HELP_TEXT, WELCOME_TEXT
from modules.telegram.keyboards.common import (
    get_back_keyboard,
    get_categories_keyboard,
    get_main_menu_keyboard,
    get_open_app_keyboard,
)

router = Router(name="menu")

DISPUTES_SHOWN = 5


def _mini_app_url(path: str = "") -> str:
    return get_app_config().application.telegram.mini_app_url.rstrip("/") + path


@router.callback_query(MenuCallback.filter(F.menu == "main"))
async def show_main(callback: CallbackQuery) -> None:
    await callback.message.edit_text(WELCOME_TEXT, reply_markup=get_main_menu_keyboard(_mini_app_url()))
    await callback.answer()


@router.callback_query(MenuCallback.filter(F.menu == "consultation"))
async def show_categories(callback: CallbackQuery) -> None:
    await callback.message.edit_text(
        "🤖 <b>AI Консультация</b>\n\nВыберите область права:",
        reply_markup=get_categories_keyboard(),
    )
    await callback.answer()


@router.callback_query(MenuCallback.filter(F.menu == "disputes"))
async def show_disputes(callback: CallbackQuery, db_user: User, session: AsyncSession) -> None:
    """Latest disputes with status and deadline."""
    repo = DisputeRepository(session)
    disputes = await repo.list_for_user(db_user.id, limit=DISPUTES_SHOWN)

    if not disputes:
        text = "⚖️ <b>Мои споры</b>\n\nУ вас пока нет споров. Создайте первый в приложении."
    else:
        total = await repo.count_for_user(db_user.id)
        lines = [f"⚖️ <b>Мои споры</b> ({total})\n"]
        for dispute in disputes:
            status = STATUS_NAMES.get(DisputeStatus(dispute.status), dispute.status)
            line = f"• <b>{html_decoration.quote(dispute.title)}</b> - {status}"
            if dispute.deadline:
                line += f", срок {dispute.deadline:%d.%m.%Y}"
            lines.append(line)
        text = "\n".join(lines)

    await callback.message.edit_text(
        text,
        reply_markup=get_open_app_keyboard(_mini_app_url("/disputes"), "📂 Открыть споры"),
    )
    await callback.answer()


@router.callback_query(MenuCallback.filter(F.menu == "documents"))
async def show_documents(callback: CallbackQuery, db_user: User, session: AsyncSession) -> None:
    """Available templates and the user's document count."""
    count = await DocumentRepository(session).count_for_user(db_user.id)
    lines = ["📄 <b>Документы</b>\n", "Доступные шаблоны:"]
    lines.extend(f"• {template.name}" for template in TEMPLATES.values())
    lines.append(f"\nСоздано документов: {count}")

    await callback.message.edit_text(
        "\n".join(lines),
        reply_markup=get_open_app_keyboard(_mini_app_url("/documents"), "📝 Создать документ"),
    )
    await callback.answer()


@router.callback_query(MenuCallback.filter(F.menu == "help"))
async def show_help(callback: CallbackQuery) -> None:
    await callback.message.edit_text(HELP_TEXT, reply_markup=get_back_keyboard())
    await callback.answer()

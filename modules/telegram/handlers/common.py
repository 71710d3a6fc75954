"""
Common Handlers.

Commands available to every user: /start, /help, /status, /info, /cancel.
"""

import httpx
from aiogram import F, Router
from aiogram.filters import Command, CommandStart
from aiogram.fsm.context import FSMContext
from aiogram.types import Message, ReplyKeyboardRemove
from aiogram.types import User as TelegramUser

from modules.backend.core.config import get_app_config, get_server_base_url
from modules.backend.core.logging import get_logger
from modules.telegram.keyboards.common import CANCEL_TEXT, get_main_menu_keyboard

logger = get_logger(__name__)

router = Router(name="common")

WELCOME_TEXT = (
    "🤖 <b>Добро пожаловать в LawerApp!</b>\n\n"
    "Я ваш персональный правовой помощник. Я могу:\n\n"
    "• Ответить на правовые вопросы\n"
    "• Помочь составить претензию, иск или договор\n"
    "• Отслеживать ваши споры и сроки\n"
    "• Рассчитать транспортный налог\n\n"
    "Выберите действие в меню ниже или откройте приложение."
)

HELP_TEXT = (
    "<b>📚 Справка по командам</b>\n\n"
    "/start - Главное меню\n"
    "/help - Эта справка\n"
    "/status - Статус системы\n"
    "/info - О сервисе\n"
    "/cancel - Отменить текущее действие\n\n"
    "<b>Как получить консультацию:</b>\n"
    "1. Нажмите «🤖 AI Консультация»\n"
    "2. Выберите область права\n"
    "3. Опишите ситуацию одним сообщением\n\n"
    "Подробные консультации, документы и споры доступны в приложении."
)

STATUS_ICONS = {"healthy": "🟢", "unhealthy": "🔴"}


def format_status(checks: dict[str, dict]) -> str:
    """Render readiness checks as one line per component."""
    lines = ["<b>📊 Статус системы</b>\n", "🟢 <b>Бот:</b> работает"]
    for component, check in checks.items():
        status = check.get("status", "unknown")
        icon = STATUS_ICONS.get(status, "🟡")
        latency = check.get("latency_ms")
        detail = f" ({latency} мс)" if latency is not None else ""
        lines.append(f"{icon} <b>{component.title()}:</b> {status}{detail}")
    return "\n".join(lines)


@router.message(CommandStart())
async def cmd_start(message: Message, telegram_user: TelegramUser, state: FSMContext) -> None:
    """Greet the user and show the main menu."""
    await state.clear()
    await message.answer(
        WELCOME_TEXT,
        reply_markup=get_main_menu_keyboard(get_app_config().application.telegram.mini_app_url),
    )
    logger.info(
        "User started bot",
        extra={"telegram_id": telegram_user.id, "username": telegram_user.username},
    )


@router.message(Command("help"))
async def cmd_help(message: Message) -> None:
    await message.answer(HELP_TEXT)


@router.message(Command("info"))
async def cmd_info(message: Message) -> None:
    app = get_app_config().application
    await message.answer(
        f"<b>ℹ️ {app.name}</b>\n\n"
        f"{app.description}\n\n"
        f"Версия: <code>{app.version}</code>\n"
        "Ответы AI носят справочный характер и не заменяют консультацию юриста."
    )


@router.message(Command("cancel"))
@router.message(F.text == CANCEL_TEXT)
async def cmd_cancel(message: Message, state: FSMContext) -> None:
    """Leave any FSM flow."""
    current_state = await state.get_state()
    if current_state is None:
        await message.answer("Нечего отменять.", reply_markup=ReplyKeyboardRemove())
        return

    await state.clear()
    await message.answer("✅ Действие отменено.", reply_markup=ReplyKeyboardRemove())
    await message.answer(
        "Главное меню:",
        reply_markup=get_main_menu_keyboard(get_app_config().application.telegram.mini_app_url),
    )
    logger.info(
        "User cancelled operation",
        extra={
            "telegram_id": message.from_user.id if message.from_user else None,
            "cancelled_state": current_state,
        },
    )


@router.message(Command("status"))
async def cmd_status(message: Message) -> None:
    """Ping the backend readiness endpoint and report each component."""
    base_url, timeout = get_server_base_url()

    try:
        async with httpx.AsyncClient(base_url=base_url, timeout=timeout) as client:
            response = await client.get("/health/ready")
    except httpx.HTTPError as e:
        logger.warning("Backend health check failed", extra={"error": str(e)})
        await message.answer("🟢 <b>Бот:</b> работает\n🔴 <b>Сервер:</b> недоступен")
        return

    # 503 carries the same body with the failing checks
    if response.status_code in (200, 503):
        await message.answer(format_status(response.json().get("checks", {})))
    else:
        await message.answer(f"⚠️ Сервер вернул статус {response.status_code}")

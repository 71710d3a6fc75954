"""
Consultation Handlers.

Short AI answers in chat: the user picks an area of law, then sends one
question. Answers are not stored; full consultations live in the Mini App.
"""

from aiogram import F, Router
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message, ReplyKeyboardRemove
from aiogram.utils.text_decorations import html_decoration

from modules.backend.core.config import get_app_config
from modules.backend.core.exceptions import AIServiceError
from modules.backend.core.logging import get_logger
from modules.backend.services.ai_client import get_ai_client
from modules.telegram.callbacks.common import CategoryCallback
from modules.telegram.keyboards.common import category_label, get_back_keyboard, get_cancel_keyboard
from modules.telegram.states.consultation import ConsultationForm

logger = get_logger(__name__)

router = Router(name="consultation")

MIN_QUESTION_LENGTH = 10
MAX_QUESTION_LENGTH = 2000

AI_UNAVAILABLE_TEXT = (
    "😔 Сервис консультаций временно недоступен. Попробуйте позже "
    "или воспользуйтесь приложением."
)


@router.callback_query(CategoryCallback.filter())
async def pick_category(callback: CallbackQuery, callback_data: CategoryCallback, state: FSMContext) -> None:
    if not get_app_config().features.ai_consultation_enabled:
        await callback.answer(AI_UNAVAILABLE_TEXT, show_alert=True)
        return

    await state.set_state(ConsultationForm.question)
    await state.update_data(category=callback_data.category)
    await callback.message.answer(
        f"📌 <b>{category_label(callback_data.category)}</b>\n\n"
        "Опишите вашу ситуацию одним сообщением.",
        reply_markup=get_cancel_keyboard(),
    )
    await callback.answer()


@router.message(ConsultationForm.question, F.text)
async def answer_question(message: Message, state: FSMContext) -> None:
    question = message.text.strip()
    if len(question) < MIN_QUESTION_LENGTH:
        await message.answer("Опишите ситуацию подробнее, хотя бы в нескольких словах.")
        return
    if len(question) > MAX_QUESTION_LENGTH:
        await message.answer(
            f"Слишком длинный вопрос. Сократите его до {MAX_QUESTION_LENGTH} символов "
            "или задайте его в приложении."
        )
        return

    category = (await state.get_data()).get("category", "civil")
    await state.clear()
    await message.bot.send_chat_action(message.chat.id, "typing")

    try:
        answer = await get_ai_client().quick_answer(f"[{category_label(category)}] {question}")
    except AIServiceError as e:
        logger.warning("Quick answer failed", extra={"category": category, "error": e.message})
        await message.answer(AI_UNAVAILABLE_TEXT, reply_markup=ReplyKeyboardRemove())
        return

    await message.answer(html_decoration.quote(answer), reply_markup=ReplyKeyboardRemove())
    await message.answer(
        "Нужен подробный разбор или документ? Откройте приложение.",
        reply_markup=get_back_keyboard(),
    )


@router.message(ConsultationForm.question)
async def answer_non_text(message: Message) -> None:
    await message.answer("Пожалуйста, отправьте вопрос текстом.")

"""
Consultation States.

Quick consultation in chat: pick an area of law, then ask a question.
"""

from aiogram.fsm.state import State, StatesGroup


class ConsultationForm(StatesGroup):
    category = State()
    question = State()

"""
Telegram Bot Handlers.

Handler Organization:
- common.py: Commands (/start, /help, /status, /info, /cancel)
- menu.py: Inline main-menu callbacks
- consultation.py: Quick AI consultation flow
- fallback.py: Anything not handled above (must stay last)
"""

from aiogram import Router

from modules.telegram.handlers.common import router as common_router
from modules.telegram.handlers.consultation import router as consultation_router
from modules.telegram.handlers.fallback import router as fallback_router
from modules.telegram.handlers.menu import router as menu_router

__all__ = [
    "get_all_routers",
    "common_router",
    "consultation_router",
    "fallback_router",
    "menu_router",
]


def get_all_routers() -> list[Router]:
    """Routers in dispatch order."""
    return [
        common_router,
        menu_router,
        consultation_router,
        fallback_router,
    ]

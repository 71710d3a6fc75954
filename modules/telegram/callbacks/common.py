"""
Common Callback Data Factories.
"""

from aiogram.filters.callback_data import CallbackData


class MenuCallback(CallbackData, prefix="menu"):
    """
    Main menu navigation.

    Menus: consultation, disputes, documents, help, main.

    Usage:
        @router.callback_query(MenuCallback.filter(F.menu == "disputes"))
        async def show_disputes(callback: CallbackQuery): ...
    """

    menu: str


class CategoryCallback(CallbackData, prefix="cat"):
    """Area of law picked at the start of a bot consultation."""

    category: str

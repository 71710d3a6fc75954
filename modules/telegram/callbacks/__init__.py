"""
Callback Data Factories.

Typed callback data for the inline menus.
"""

from modules.telegram.callbacks.common import CategoryCallback, MenuCallback

__all__ = [
    "CategoryCallback",
    "MenuCallback",
]

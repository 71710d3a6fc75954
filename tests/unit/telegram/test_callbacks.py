"""
Unit Tests for Callback Data Factories.
"""

import pytest

from modules.telegram.callbacks import CategoryCallback, MenuCallback


class TestMenuCallback:
    def test_pack(self):
        assert MenuCallback(menu="disputes").pack() == "menu:disputes"

    @pytest.mark.parametrize("menu", ["consultation", "documents", "disputes", "help", "main"])
    def test_round_trip(self, menu):
        assert MenuCallback.unpack(MenuCallback(menu=menu).pack()).menu == menu

    def test_rejects_foreign_prefix(self):
        with pytest.raises(ValueError):
            MenuCallback.unpack("cat:labor")


class TestCategoryCallback:
    def test_pack(self):
        assert CategoryCallback(category="labor").pack() == "cat:labor"

    def test_fits_telegram_limit(self):
        # Telegram rejects callback_data longer than 64 bytes
        packed = CategoryCallback(category="intellectual_property").pack()
        assert len(packed.encode()) <= 64

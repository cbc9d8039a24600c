from __future__ import annotations

from telegram import InlineKeyboardButton, InlineKeyboardMarkup

from ..i18n import Translator


def main_menu_keyboard(translator: Translator, locale: str) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        [
            [InlineKeyboardButton(translator.translate("btn_status", locale), callback_data="nav:status")],
            [InlineKeyboardButton(translator.translate("btn_quests", locale), callback_data="nav:quests")],
            [InlineKeyboardButton(translator.translate("btn_rewards", locale), callback_data="nav:rewards")],
        ]
    )


def back_button(translator: Translator, locale: str) -> InlineKeyboardButton:
    return InlineKeyboardButton(translator.translate("btn_back", locale), callback_data="nav:main")

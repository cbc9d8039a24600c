from __future__ import annotations

from typing import Iterable

from telegram import InlineKeyboardButton, InlineKeyboardMarkup

from ..i18n import Translator
from ..models.catalog import Quest
from .main_menu import back_button


def quest_menu(quests: Iterable[Quest], translator: Translator, locale: str) -> InlineKeyboardMarkup:
    rows = []
    for quest in quests:
        rows.append(
            [
                InlineKeyboardButton(
                    f"{quest.name} · {level.level} (+{level.reward})",
                    callback_data=f"quest:{quest.id}:{index}",
                )
                for index, level in enumerate(quest.levels)
            ]
        )
    rows.append([back_button(translator, locale)])
    return InlineKeyboardMarkup(rows)

from __future__ import annotations

from typing import Iterable

from telegram import InlineKeyboardButton, InlineKeyboardMarkup

from ..i18n import Translator
from ..models.catalog import Reward
from .main_menu import back_button


def reward_menu(rewards: Iterable[Reward], translator: Translator, locale: str) -> InlineKeyboardMarkup:
    rows = [
        [InlineKeyboardButton(f"{reward.name} · {reward.cost}", callback_data=f"reward:{reward.id}")]
        for reward in rewards
    ]
    rows.append([back_button(translator, locale)])
    return InlineKeyboardMarkup(rows)

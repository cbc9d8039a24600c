from __future__ import annotations

import logging

from telegram import Update
from telegram.ext import CallbackContext

from ..i18n import Translator
from ..keyboards.quest_menu import quest_menu
from ..services.quests import QuestService, UnknownQuestError
from ..services.registry import EngineRegistry

LOGGER = logging.getLogger(__name__)


async def handle_quests(update: Update, context: CallbackContext) -> None:
    quests: QuestService = context.application.bot_data["quests"]
    translator: Translator = context.application.bot_data["translator"]
    locale = context.application.bot_data["settings"].locale
    query = update.callback_query
    if query:
        await query.answer()
    await update.effective_message.reply_text(
        translator.translate("quests_header", locale),
        reply_markup=quest_menu(quests.quests, translator, locale),
    )


async def handle_quest_complete(update: Update, context: CallbackContext) -> None:
    registry: EngineRegistry = context.application.bot_data["registry"]
    quests: QuestService = context.application.bot_data["quests"]
    translator: Translator = context.application.bot_data["translator"]
    locale = context.application.bot_data["settings"].locale
    query = update.callback_query
    if not query or not query.data or not update.effective_user:
        return
    await query.answer()
    parts = query.data.split(":")
    if len(parts) != 3 or not parts[2].isdigit():
        return
    _, quest_id, index = parts
    async with registry.session(update.effective_user.id) as engine:
        try:
            quests.complete_quest_level(engine, quest_id, int(index))
        except (UnknownQuestError, IndexError):
            LOGGER.warning("Stale quest callback %s", query.data)
            await update.effective_message.reply_text(translator.translate("unknown_item", locale))
            return
    await update.effective_message.reply_text(translator.translate("quest_done", locale))

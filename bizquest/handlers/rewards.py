from __future__ import annotations

import logging

from telegram import Update
from telegram.ext import CallbackContext

from ..i18n import Translator
from ..keyboards.reward_menu import reward_menu
from ..services.quests import QuestService, UnknownRewardError
from ..services.registry import EngineRegistry

LOGGER = logging.getLogger(__name__)


async def handle_rewards(update: Update, context: CallbackContext) -> None:
    registry: EngineRegistry = context.application.bot_data["registry"]
    quests: QuestService = context.application.bot_data["quests"]
    translator: Translator = context.application.bot_data["translator"]
    locale = context.application.bot_data["settings"].locale
    query = update.callback_query
    if query:
        await query.answer()
    if not update.effective_user:
        return
    engine = await registry.get(update.effective_user.id)
    await update.effective_message.reply_text(
        translator.translate("rewards_header", locale, points=engine.points),
        reply_markup=reward_menu(quests.rewards, translator, locale),
    )


async def handle_redeem(update: Update, context: CallbackContext) -> None:
    registry: EngineRegistry = context.application.bot_data["registry"]
    quests: QuestService = context.application.bot_data["quests"]
    translator: Translator = context.application.bot_data["translator"]
    locale = context.application.bot_data["settings"].locale
    query = update.callback_query
    if not query or not query.data or not update.effective_user:
        return
    await query.answer()
    reward_id = query.data.split(":", 1)[1]
    async with registry.session(update.effective_user.id) as engine:
        try:
            redeemed = quests.redeem_reward(engine, reward_id)
        except UnknownRewardError:
            LOGGER.warning("Stale reward callback %s", query.data)
            await update.effective_message.reply_text(translator.translate("unknown_item", locale))
            return
    if not redeemed:
        reward = quests.get_reward(reward_id)
        await update.effective_message.reply_text(
            translator.translate("reward_too_expensive", locale, reward=reward.name)
        )

from __future__ import annotations

from telegram import InlineKeyboardMarkup, Update
from telegram.ext import CallbackContext

from ..i18n import Translator
from ..keyboards.main_menu import back_button
from ..services.engine import GamificationEngine
from ..services.levels import level_progress
from ..services.registry import EngineRegistry


def render_status(engine: GamificationEngine, translator: Translator, locale: str) -> str:
    progress = level_progress(engine.points)
    lines = [
        translator.translate("status_header", locale, level=progress.level, points=engine.points),
        translator.translate(
            "status_progress",
            locale,
            into=progress.points_into_level,
            span=progress.next_threshold - progress.current_threshold,
            next_level=progress.level + 1,
            percent=progress.percent,
        ),
    ]
    if engine.badges:
        lines.append(translator.translate("status_badges", locale, badges=", ".join(engine.badges)))
    else:
        lines.append(translator.translate("status_no_badges", locale))
    return "\n".join(lines)


async def handle_status(update: Update, context: CallbackContext) -> None:
    registry: EngineRegistry = context.application.bot_data["registry"]
    translator: Translator = context.application.bot_data["translator"]
    locale = context.application.bot_data["settings"].locale
    query = update.callback_query
    if query:
        await query.answer()
    if not update.effective_user:
        return
    engine = await registry.get(update.effective_user.id)
    await update.effective_message.reply_text(
        render_status(engine, translator, locale),
        reply_markup=InlineKeyboardMarkup([[back_button(translator, locale)]]),
    )

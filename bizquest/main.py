from __future__ import annotations

import logging

from telegram.ext import AIORateLimiter, Application, ApplicationBuilder, CallbackQueryHandler, CommandHandler

from .config import Settings, configure_logging, load_settings
from .handlers.quests import handle_quest_complete, handle_quests
from .handlers.rewards import handle_redeem, handle_rewards
from .handlers.start import handle_menu, handle_start
from .handlers.status import handle_status
from .i18n import Translator
from .services.notifications import TelegramAchievementSink
from .services.quests import QuestService
from .services.registry import EngineRegistry
from .services.storage import ProgressStorage

LOGGER = logging.getLogger(__name__)


async def _on_startup(application: Application) -> None:
    storage: ProgressStorage = application.bot_data["storage"]
    await storage.init_schema()
    settings: Settings = application.bot_data["settings"]
    if settings.engine_idle_seconds:
        registry: EngineRegistry = application.bot_data["registry"]
        registry.start_eviction(settings.eviction_interval_seconds, settings.engine_idle_seconds)


async def _on_shutdown(application: Application) -> None:
    registry: EngineRegistry = application.bot_data["registry"]
    await registry.close()


def build_application() -> Application:
    settings = load_settings()
    configure_logging(settings)
    storage = ProgressStorage(settings.database_path)
    translator = Translator(default_locale=settings.locale)
    quests = QuestService(translator, settings.locale)

    application = (
        ApplicationBuilder()
        .token(settings.require_token())
        .rate_limiter(AIORateLimiter())
        .post_init(_on_startup)
        .post_shutdown(_on_shutdown)
        .build()
    )

    def sink_factory(user_id: int) -> TelegramAchievementSink:
        # Private chats share the user's id.
        return TelegramAchievementSink(application.bot, user_id, translator, settings.locale)

    registry = EngineRegistry(storage, settings, translator, sink_factory=sink_factory)

    application.bot_data.update(
        {
            "settings": settings,
            "storage": storage,
            "translator": translator,
            "quests": quests,
            "registry": registry,
        }
    )

    application.add_handler(CommandHandler("start", handle_start))
    application.add_handler(CommandHandler("status", handle_status))
    application.add_handler(CallbackQueryHandler(handle_menu, pattern=r"^nav:main$"))
    application.add_handler(CallbackQueryHandler(handle_status, pattern=r"^nav:status$"))
    application.add_handler(CallbackQueryHandler(handle_quests, pattern=r"^nav:quests$"))
    application.add_handler(CallbackQueryHandler(handle_rewards, pattern=r"^nav:rewards$"))
    application.add_handler(CallbackQueryHandler(handle_quest_complete, pattern=r"^quest:"))
    application.add_handler(CallbackQueryHandler(handle_redeem, pattern=r"^reward:"))

    return application


def main() -> None:
    application = build_application()
    LOGGER.info("Starting BizQuest bot")
    application.run_polling(close_loop=False)


if __name__ == "__main__":
    main()

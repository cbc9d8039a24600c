from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio

from bizquest.config import Settings
from bizquest.handlers.quests import handle_quest_complete
from bizquest.handlers.rewards import handle_redeem
from bizquest.handlers.status import render_status
from bizquest.i18n import Translator
from bizquest.keyboards.main_menu import main_menu_keyboard
from bizquest.keyboards.quest_menu import quest_menu
from bizquest.keyboards.reward_menu import reward_menu
from bizquest.services.quests import QuestService
from bizquest.services.registry import EngineRegistry
from bizquest.services.storage import ProgressStorage


def callbacks(markup) -> list[str]:
    return [button.callback_data for row in markup.inline_keyboard for button in row]


def test_main_menu_navigation() -> None:
    assert callbacks(main_menu_keyboard(Translator(), "en")) == ["nav:status", "nav:quests", "nav:rewards"]


def test_quest_and_reward_menus() -> None:
    service = QuestService()
    quest_callbacks = callbacks(quest_menu(service.quests, Translator(), "en"))
    assert "quest:new-client:0" in quest_callbacks
    assert "quest:subscriptions:2" in quest_callbacks
    assert quest_callbacks[-1] == "nav:main"
    markup = reward_menu(service.rewards, Translator(), "en")
    reward_callbacks = callbacks(markup)
    assert reward_callbacks[0] == "reward:eluvie-discount-10"
    assert markup.inline_keyboard[0][0].text == "10% Eluvie Discount · 100"


@pytest.mark.asyncio
async def test_render_status(make_engine) -> None:
    engine = make_engine(points=200, badges=["Deal Closer Level 1"])
    text = render_status(engine, Translator(), "en")
    assert text.splitlines() == [
        "Level 3 · 200 points",
        "50 / 100 to level 4 (50.0%)",
        "Badges: Deal Closer Level 1",
    ]


@pytest.mark.asyncio
async def test_render_status_without_badges(make_engine) -> None:
    text = render_status(make_engine(), Translator(), "en")
    assert text.endswith("Complete quests to earn badges.")


def test_settings_defaults_and_token_guard(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("BIZQUEST_BOT_TOKEN", raising=False)
    settings = Settings(_env_file=None)
    assert settings.save_delay == 0.5
    assert settings.bonus_delay == 0.5
    assert settings.badge_bonus_points == 200
    with pytest.raises(RuntimeError):
        settings.require_token()


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BIZQUEST_BOT_TOKEN", "123:abc")
    monkeypatch.setenv("BIZQUEST_SAVE_DEBOUNCE_MS", "250")
    settings = Settings(_env_file=None)
    assert settings.require_token() == "123:abc"
    assert settings.save_delay == 0.25


def make_update(data: str, user_id: int = 1) -> MagicMock:
    query = MagicMock()
    query.data = data
    query.answer = AsyncMock()
    update = MagicMock()
    update.callback_query = query
    update.effective_user.id = user_id
    update.effective_message.reply_text = AsyncMock()
    return update


def replies(update: MagicMock) -> list[str]:
    return [call.args[0] for call in update.effective_message.reply_text.await_args_list]


@pytest_asyncio.fixture
async def bot_context(tmp_path: Path):
    settings = Settings(
        _env_file=None,
        database_path=tmp_path / "bot.sqlite3",
        save_debounce_ms=20,
        badge_bonus_delay_ms=10_000,
    )
    storage = ProgressStorage(settings.database_path)
    await storage.init_schema()
    translator = Translator()
    registry = EngineRegistry(storage, settings, translator)
    context = MagicMock()
    context.application.bot_data = {
        "settings": settings,
        "storage": storage,
        "translator": translator,
        "quests": QuestService(translator, "en"),
        "registry": registry,
    }
    yield context
    await registry.close()


@pytest.mark.asyncio
async def test_quest_callback_awards_points_and_badge(bot_context) -> None:
    update = make_update("quest:new-client:0")
    await handle_quest_complete(update, bot_context)

    update.callback_query.answer.assert_awaited_once()
    assert replies(update) == ["Quest level completed."]
    engine = await bot_context.application.bot_data["registry"].get(1)
    assert engine.points == 20
    assert engine.badges == ("Client Acquisition Level 1",)
    assert engine.pending_bonuses == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("data", ["quest:missing:0", "quest:new-client:9"])
async def test_stale_quest_callback_reports_unknown_item(bot_context, data: str) -> None:
    update = make_update(data)
    await handle_quest_complete(update, bot_context)

    assert replies(update) == ["This item no longer exists."]
    engine = await bot_context.application.bot_data["registry"].get(1)
    assert engine.points == 0
    assert engine.badges == ()


@pytest.mark.asyncio
@pytest.mark.parametrize("data", ["quest:new-client", "quest:new-client:x", "quest:a:b:0"])
async def test_malformed_quest_callback_is_ignored(bot_context, data: str) -> None:
    update = make_update(data)
    await handle_quest_complete(update, bot_context)

    update.callback_query.answer.assert_awaited_once()
    assert replies(update) == []
    assert 1 not in bot_context.application.bot_data["registry"]


@pytest.mark.asyncio
async def test_redeem_without_enough_points(bot_context) -> None:
    update = make_update("reward:eluvie-discount-10")
    await handle_redeem(update, bot_context)

    assert replies(update) == ["Not enough points for 10% Eluvie Discount."]
    engine = await bot_context.application.bot_data["registry"].get(1)
    assert engine.points == 0


@pytest.mark.asyncio
async def test_redeem_spends_points(bot_context) -> None:
    registry = bot_context.application.bot_data["registry"]
    engine = await registry.get(1)
    engine.add_points(150)

    update = make_update("reward:eluvie-discount-10")
    await handle_redeem(update, bot_context)

    assert replies(update) == []
    assert engine.points == 50


@pytest.mark.asyncio
async def test_stale_reward_callback_reports_unknown_item(bot_context) -> None:
    update = make_update("reward:retired")
    await handle_redeem(update, bot_context)

    assert replies(update) == ["This item no longer exists."]

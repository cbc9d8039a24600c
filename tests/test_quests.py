import asyncio

import pytest

from bizquest.models.achievement import AchievementKind
from bizquest.services.quests import QuestService, UnknownQuestError, UnknownRewardError

from conftest import SETTLE, RecordingSink


def test_default_catalog() -> None:
    service = QuestService()
    assert [quest.id for quest in service.quests] == [
        "new-client",
        "send-quotes",
        "convert-quotes",
        "revenue-milestone",
        "contracts-signed",
        "subscriptions",
    ]
    assert all(len(quest.levels) == 3 for quest in service.quests)
    assert service.get_reward("eluvie-merch").cost == 500


def test_unknown_ids_raise_key_errors() -> None:
    service = QuestService()
    with pytest.raises(UnknownQuestError):
        service.get_quest("nope")
    with pytest.raises(KeyError):
        service.get_reward("nope")


@pytest.mark.asyncio
async def test_complete_quest_level_awards_points_and_badge(make_engine, sink: RecordingSink) -> None:
    engine = make_engine()
    service = QuestService()

    quest_level = service.complete_quest_level(engine, "new-client", 0)

    assert quest_level.reward == 20
    assert engine.points == 20
    assert engine.badges == ("Client Acquisition Level 1",)
    titles = [event.title for event in sink.of_kind(AchievementKind.SUCCESS)]
    assert titles == ["Client Acquisition - Level 1 Complete!", "New Badge Earned!"]

    await asyncio.sleep(SETTLE)
    assert engine.points == 220


@pytest.mark.asyncio
async def test_repeating_a_quest_level_pays_points_but_no_second_bonus(make_engine) -> None:
    engine = make_engine(bonus_delay=0)
    service = QuestService()
    service.complete_quest_level(engine, "send-quotes", 0)
    service.complete_quest_level(engine, "send-quotes", 0)
    assert engine.points == 10 + 200 + 10
    assert engine.badges == ("Quote Master Level 1",)


@pytest.mark.asyncio
async def test_complete_quest_level_rejects_bad_index(make_engine) -> None:
    engine = make_engine()
    with pytest.raises(IndexError):
        QuestService().complete_quest_level(engine, "new-client", 3)
    assert engine.points == 0


@pytest.mark.asyncio
async def test_redeem_reward_spends_points(make_engine, sink: RecordingSink) -> None:
    engine = make_engine(points=150)
    assert QuestService().redeem_reward(engine, "eluvie-discount-10") is True
    assert engine.points == 50
    redeemed = sink.of_kind(AchievementKind.MILESTONE)
    assert [event.title for event in redeemed] == ["Reward Redeemed!"]
    assert "10% Eluvie Discount" in redeemed[0].message


@pytest.mark.asyncio
async def test_redeem_reward_requires_enough_points(make_engine, sink: RecordingSink) -> None:
    engine = make_engine(points=99)
    assert QuestService().redeem_reward(engine, "eluvie-discount-10") is False
    assert engine.points == 99
    assert sink.achievements == []
    with pytest.raises(UnknownRewardError):
        QuestService().redeem_reward(engine, "gold-bar")

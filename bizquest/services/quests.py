"""Quest catalog, quest completion and reward redemption."""
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from ..i18n import Translator
from ..models.achievement import AchievementKind
from ..models.catalog import Quest, QuestLevel, Reward
from .engine import GamificationEngine

LOGGER = logging.getLogger(__name__)


class UnknownQuestError(KeyError):
    pass


class UnknownRewardError(KeyError):
    pass


def _levels(*rows: tuple[int, int, str]) -> List[QuestLevel]:
    return [
        QuestLevel(level=index, target=target, reward=reward, description=description)
        for index, (target, reward, description) in enumerate(rows, start=1)
    ]


DEFAULT_QUESTS: Sequence[Quest] = (
    Quest(
        id="new-client",
        name="Client Acquisition",
        description="Add new clients to grow your business",
        levels=_levels(
            (1, 20, "Add your first client"),
            (5, 50, "Add 5 clients"),
            (10, 100, "Add 10 clients"),
        ),
    ),
    Quest(
        id="send-quotes",
        name="Quote Master",
        description="Create and send quotes to potential clients",
        levels=_levels(
            (1, 10, "Send your first quote"),
            (5, 30, "Send 5 quotes"),
            (20, 80, "Send 20 quotes"),
        ),
    ),
    Quest(
        id="convert-quotes",
        name="Deal Closer",
        description="Convert quotes into revenue",
        levels=_levels(
            (1, 15, "Close your first deal"),
            (3, 40, "Close 3 deals"),
            (10, 90, "Close 10 deals"),
        ),
    ),
    Quest(
        id="revenue-milestone",
        name="Revenue Milestones",
        description="Achieve revenue targets",
        levels=_levels(
            (1000, 20, "Reach $1,000 in revenue"),
            (10000, 50, "Reach $10,000 in revenue"),
            (50000, 150, "Reach $50,000 in revenue"),
        ),
    ),
    Quest(
        id="contracts-signed",
        name="Contract Pro",
        description="Sign contracts with clients",
        levels=_levels(
            (1, 15, "Sign your first contract"),
            (3, 35, "Sign 3 contracts"),
            (10, 85, "Sign 10 contracts"),
        ),
    ),
    Quest(
        id="subscriptions",
        name="Recurring Revenue",
        description="Set up subscription services",
        levels=_levels(
            (1, 25, "Create your first subscription"),
            (3, 50, "Create 3 subscriptions"),
            (10, 120, "Create 10 subscriptions"),
        ),
    ),
)

DEFAULT_REWARDS: Sequence[Reward] = (
    Reward(
        id="eluvie-discount-10",
        name="10% Eluvie Discount",
        description="Redeem a 10% discount code for any Eluvie products",
        cost=100,
    ),
    Reward(
        id="eluvie-discount-25",
        name="25% Eluvie Discount",
        description="Redeem a 25% discount code for any Eluvie products",
        cost=250,
    ),
    Reward(
        id="eluvie-merch",
        name="Eluvie Merchandise",
        description="Redeem points for exclusive Eluvie branded merchandise",
        cost=500,
    ),
    Reward(
        id="premium-template",
        name="Premium Contract Template",
        description="Unlock a premium contract template for your business",
        cost=200,
    ),
    Reward(
        id="advanced-analytics",
        name="Advanced Analytics",
        description="Unlock advanced financial analytics and forecasting",
        cost=300,
    ),
)


class QuestService:
    """Turn quest and reward actions into engine mutations."""

    def __init__(
        self,
        translator: Optional[Translator] = None,
        locale: Optional[str] = None,
        quests: Sequence[Quest] = DEFAULT_QUESTS,
        rewards: Sequence[Reward] = DEFAULT_REWARDS,
    ) -> None:
        self._translator = translator or Translator()
        self._locale = locale
        self._quests: Dict[str, Quest] = {quest.id: quest for quest in quests}
        self._rewards: Dict[str, Reward] = {reward.id: reward for reward in rewards}

    @property
    def quests(self) -> List[Quest]:
        return list(self._quests.values())

    @property
    def rewards(self) -> List[Reward]:
        return list(self._rewards.values())

    def get_quest(self, quest_id: str) -> Quest:
        try:
            return self._quests[quest_id]
        except KeyError:
            raise UnknownQuestError(quest_id) from None

    def get_reward(self, reward_id: str) -> Reward:
        try:
            return self._rewards[reward_id]
        except KeyError:
            raise UnknownRewardError(reward_id) from None

    def complete_quest_level(self, engine: GamificationEngine, quest_id: str, level_index: int) -> QuestLevel:
        quest = self.get_quest(quest_id)
        if not 0 <= level_index < len(quest.levels):
            raise IndexError(f"Quest {quest_id} has no level index {level_index}")
        quest_level = quest.levels[level_index]
        LOGGER.info("User %s completed %s level %s", engine.user_id, quest_id, quest_level.level)
        engine.add_points(quest_level.reward)
        engine.show_achievement(
            self._translate("quest_title", quest=quest.name, level=quest_level.level),
            self._translate("quest_message", description=quest_level.description, reward=quest_level.reward),
            AchievementKind.SUCCESS,
        )
        engine.earn_badge(quest.badge_for(quest_level))
        return quest_level

    def redeem_reward(self, engine: GamificationEngine, reward_id: str) -> bool:
        reward = self.get_reward(reward_id)
        if engine.points < reward.cost:
            LOGGER.debug("User %s cannot afford %s (%s < %s)", engine.user_id, reward_id, engine.points, reward.cost)
            return False
        engine.add_points(-reward.cost)
        engine.show_achievement(
            self._translate("reward_title"),
            self._translate("reward_message", reward=reward.name),
            AchievementKind.MILESTONE,
        )
        LOGGER.info("User %s redeemed %s for %s points", engine.user_id, reward_id, reward.cost)
        return True

    def _translate(self, key: str, **params: object) -> str:
        return self._translator.translate(key, self._locale, **params)

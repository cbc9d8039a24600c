from __future__ import annotations

"""Simple translation helper supporting EN/RU locales."""
from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class Translator:
    default_locale: str = "en"
    _translations: Dict[str, Dict[str, str]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self._translations:
            return
        self._translations = {
            "en": {
                "level_up_title": "Level Up!",
                "level_up_message": "Congratulations! You've reached level {level}",
                "badge_title": "New Badge Earned!",
                "badge_message": "You've earned the {badge} badge",
                "quest_title": "{quest} - Level {level} Complete!",
                "quest_message": "{description}. Earned {reward} points!",
                "reward_title": "Reward Redeemed!",
                "reward_message": "You've redeemed {reward}. Check your email for details.",
                "start_message": "Welcome to BizQuest! Complete quests, earn points and redeem rewards.",
                "btn_status": "My level",
                "btn_quests": "Quests",
                "btn_rewards": "Rewards",
                "btn_back": "Back",
                "status_header": "Level {level} · {points} points",
                "status_progress": "{into} / {span} to level {next_level} ({percent}%)",
                "status_badges": "Badges: {badges}",
                "status_no_badges": "Complete quests to earn badges.",
                "quests_header": "Quests",
                "quest_done": "Quest level completed.",
                "rewards_header": "Rewards ({points} points available)",
                "reward_too_expensive": "Not enough points for {reward}.",
                "level_up_banner": "Level {level}!",
                "level_up_banner_big": "Huge jump! Level {previous} → {level}!",
                "unknown_item": "This item no longer exists.",
            },
            "ru": {
                "level_up_title": "Новый уровень!",
                "level_up_message": "Поздравляем! Вы достигли уровня {level}",
                "badge_title": "Новый значок!",
                "badge_message": "Вы получили значок «{badge}»",
                "quest_title": "{quest} - уровень {level} пройден!",
                "quest_message": "{description}. Начислено {reward} очков!",
                "reward_title": "Награда получена!",
                "reward_message": "Вы обменяли очки на «{reward}». Подробности отправлены на почту.",
                "start_message": "Добро пожаловать в BizQuest! Выполняйте задания, копите очки и получайте награды.",
                "btn_status": "Мой уровень",
                "btn_quests": "Задания",
                "btn_rewards": "Награды",
                "btn_back": "Назад",
                "status_header": "Уровень {level} · {points} очков",
                "status_progress": "{into} / {span} до уровня {next_level} ({percent}%)",
                "status_badges": "Значки: {badges}",
                "status_no_badges": "Выполняйте задания, чтобы получить значки.",
                "quests_header": "Задания",
                "quest_done": "Уровень задания выполнен.",
                "rewards_header": "Награды (доступно {points} очков)",
                "reward_too_expensive": "Недостаточно очков для «{reward}».",
                "level_up_banner": "Уровень {level}!",
                "level_up_banner_big": "Огромный скачок! Уровень {previous} → {level}!",
                "unknown_item": "Этот элемент больше не существует.",
            },
        }

    def translate(self, key: str, locale: str | None = None, **params: Any) -> str:
        catalog = self._translations.get(locale or self.default_locale) or self._translations[self.default_locale]
        text = catalog.get(key, key)
        return text.format(**params) if params else text

from .achievement import AchievementEvent, AchievementKind, ConfettiTrigger, LevelChange
from .catalog import Quest, QuestLevel, Reward
from .progress import ProgressRecord, StoredProgress

__all__ = [
    "AchievementEvent",
    "AchievementKind",
    "ConfettiTrigger",
    "LevelChange",
    "ProgressRecord",
    "Quest",
    "QuestLevel",
    "Reward",
    "StoredProgress",
]

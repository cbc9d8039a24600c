from pathlib import Path
import sys
from typing import Dict, List

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from bizquest.models.achievement import AchievementEvent, AchievementKind, ConfettiTrigger, LevelChange
from bizquest.models.progress import ProgressRecord
from bizquest.services.engine import GamificationEngine

FAST = 0.02
SETTLE = 0.1


class RecordingStore:
    """Test double collecting every write the engine makes."""

    def __init__(self) -> None:
        self.saved: Dict[int, List[ProgressRecord]] = {}

    async def save_progress(self, user_id: int, record: ProgressRecord) -> None:
        self.saved.setdefault(user_id, []).append(record)

    def writes(self, user_id: int = 1) -> List[ProgressRecord]:
        return self.saved.get(user_id, [])


class RecordingSink:
    def __init__(self) -> None:
        self.achievements: List[AchievementEvent] = []
        self.confetti: List[ConfettiTrigger] = []
        self.level_changes: List[LevelChange] = []

    def show_achievement(self, event: AchievementEvent) -> None:
        self.achievements.append(event)

    def trigger_confetti(self, trigger: ConfettiTrigger) -> None:
        self.confetti.append(trigger)

    def level_up(self, change: LevelChange) -> None:
        self.level_changes.append(change)

    def of_kind(self, kind: AchievementKind) -> List[AchievementEvent]:
        return [event for event in self.achievements if event.kind == kind]


@pytest.fixture
def store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def make_engine(store: RecordingStore, sink: RecordingSink):
    def factory(**kwargs) -> GamificationEngine:
        kwargs.setdefault("save_delay", FAST)
        kwargs.setdefault("bonus_delay", FAST)
        return GamificationEngine(1, store, sink, **kwargs)

    return factory

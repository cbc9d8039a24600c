from __future__ import annotations

"""Ephemeral notifications produced by the gamification engine."""
from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class AchievementKind(str, Enum):
    SUCCESS = "success"
    MILESTONE = "milestone"
    STREAK = "streak"


class AchievementEvent(BaseModel):
    """Banner shown to the user after a level-up or a badge grant."""

    model_config = ConfigDict(frozen=True)

    title: str
    message: str
    kind: AchievementKind = AchievementKind.SUCCESS


class ConfettiTrigger(BaseModel):
    model_config = ConfigDict(frozen=True)

    duration_ms: int = Field(default=2000, gt=0)
    particle_count: int = Field(default=100, gt=0)
    focus_point: Optional[Tuple[float, float]] = None


class LevelChange(BaseModel):
    model_config = ConfigDict(frozen=True)

    previous_level: int = Field(ge=1)
    new_level: int = Field(ge=1)

    @property
    def large_jump(self) -> bool:
        return self.new_level - self.previous_level > 1

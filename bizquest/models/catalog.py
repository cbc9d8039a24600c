from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field


class QuestLevel(BaseModel):
    level: int = Field(ge=1)
    target: int = Field(ge=1)
    reward: int = Field(ge=0, description="Points paid when the level is completed.")
    description: str


class Quest(BaseModel):
    id: str
    name: str
    description: str
    levels: List[QuestLevel] = Field(default_factory=list)

    def badge_for(self, level: QuestLevel) -> str:
        return f"{self.name} Level {level.level}"


class Reward(BaseModel):
    id: str
    name: str
    description: str
    cost: int = Field(gt=0)

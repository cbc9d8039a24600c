from __future__ import annotations

from datetime import datetime, timezone
from typing import List

from pydantic import BaseModel, Field


class StoredProgress(BaseModel):
    """Point balance and badges as loaded for a user."""

    points: int = Field(default=0, ge=0)
    badges: List[str] = Field(default_factory=list)


class ProgressRecord(BaseModel):
    """Shape written back to storage after every burst of mutations."""

    level: int = Field(ge=1)
    points: int = Field(ge=0)
    badges: List[str] = Field(default_factory=list)
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

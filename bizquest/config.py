from __future__ import annotations

"""Configuration module for the BizQuest engine and bot."""
import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class Settings(BaseSettings):
    """Environment-driven settings."""

    model_config = SettingsConfigDict(
        env_prefix="BIZQUEST_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    bot_token: Optional[str] = None
    database_path: Path = Path("./data/bizquest.sqlite3")
    locale: str = "en"
    timezone: str = "UTC"
    save_debounce_ms: int = Field(default=500, ge=0)
    badge_bonus_delay_ms: int = Field(default=500, ge=0)
    badge_bonus_points: int = Field(default=200, ge=0)
    flush_on_close: bool = True
    # Engines unused this long are flushed and dropped; 0 keeps them until shutdown.
    engine_idle_seconds: int = Field(default=900, ge=0)
    eviction_interval_seconds: int = Field(default=60, gt=0)
    log_level: str = "INFO"

    @property
    def save_delay(self) -> float:
        return self.save_debounce_ms / 1000

    @property
    def bonus_delay(self) -> float:
        return self.badge_bonus_delay_ms / 1000

    def require_token(self) -> str:
        if not self.bot_token:
            raise RuntimeError("BIZQUEST_BOT_TOKEN is required for the bot to start")
        return self.bot_token


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(level=settings.log_level.upper(), format=LOG_FORMAT)


@lru_cache()
def load_settings() -> Settings:
    return Settings()

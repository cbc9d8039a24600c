"""Telegram presentation sink for achievement notifications."""
from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

from telegram import Bot
from telegram.error import TelegramError

from ..i18n import Translator
from ..models.achievement import AchievementEvent, AchievementKind, ConfettiTrigger, LevelChange

LOGGER = logging.getLogger(__name__)

KIND_EMOJI = {
    AchievementKind.SUCCESS: "🏅",
    AchievementKind.MILESTONE: "🏆",
    AchievementKind.STREAK: "🔥",
}


class TelegramAchievementSink:
    """Collect engine notifications and post them to one chat.

    Everything produced during one loop iteration is sent as a single
    message. Confetti becomes a line of party emoji scaled by particle count.
    """

    def __init__(self, bot: Bot, chat_id: int, translator: Translator, locale: Optional[str] = None) -> None:
        self._bot = bot
        self._chat_id = chat_id
        self._translator = translator
        self._locale = locale
        self._outbox: List[str] = []
        self._flush_handle: Optional[asyncio.Handle] = None
        self._tasks: set[asyncio.Task] = set()

    def show_achievement(self, event: AchievementEvent) -> None:
        self._post(f"{KIND_EMOJI[event.kind]} {event.title}\n{event.message}")

    def trigger_confetti(self, trigger: ConfettiTrigger) -> None:
        self._post("🎉" * max(1, trigger.particle_count // 50))

    def level_up(self, change: LevelChange) -> None:
        if change.large_jump:
            text = self._translator.translate(
                "level_up_banner_big", self._locale, previous=change.previous_level, level=change.new_level
            )
        else:
            text = self._translator.translate("level_up_banner", self._locale, level=change.new_level)
        self._post(f"⭐ {text}")

    async def drain(self) -> None:
        if self._flush_handle is not None:
            self._flush_handle.cancel()
            self._flush_handle = None
            self._start_send()
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _post(self, line: str) -> None:
        self._outbox.append(line)
        if self._flush_handle is None:
            self._flush_handle = asyncio.get_running_loop().call_soon(self._on_flush)

    def _on_flush(self) -> None:
        self._flush_handle = None
        self._start_send()

    def _start_send(self) -> None:
        if not self._outbox:
            return
        text = "\n".join(self._outbox)
        self._outbox = []
        task = asyncio.get_running_loop().create_task(self._send(text))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _send(self, text: str) -> None:
        try:
            await self._bot.send_message(chat_id=self._chat_id, text=text)
        except TelegramError:
            LOGGER.exception("Failed to deliver achievement to chat %s", self._chat_id)

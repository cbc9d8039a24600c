"""Per-user point, level and badge engine.

The engine keeps the point balance and badge set in memory, derives the
level from :mod:`bizquest.services.levels` and reports transitions to a
presentation sink. Every mutation schedules a debounced write of the whole
record to the storage collaborator; badge bonuses land after a short delay
so the badge banner can be shown before the counter moves.
"""
from __future__ import annotations

import logging
from datetime import datetime
from functools import partial
from typing import Iterable, List, Optional, Protocol, Tuple

import pytz

from ..i18n import Translator
from ..models.achievement import AchievementEvent, AchievementKind, ConfettiTrigger, LevelChange
from ..models.progress import ProgressRecord, StoredProgress
from .debounce import DelayedCalls, Debouncer
from .levels import level_for_points

LOGGER = logging.getLogger(__name__)

DEFAULT_CONFETTI = ConfettiTrigger(duration_ms=2000, particle_count=100)
LARGE_JUMP_CONFETTI = ConfettiTrigger(duration_ms=3000, particle_count=200)


class ProgressStore(Protocol):
    async def save_progress(self, user_id: int, record: ProgressRecord) -> None:
        ...


class PresentationSink(Protocol):
    def show_achievement(self, event: AchievementEvent) -> None:
        ...

    def trigger_confetti(self, trigger: ConfettiTrigger) -> None:
        ...

    def level_up(self, change: LevelChange) -> None:
        ...


class NullSink:
    """Sink used when nobody is watching."""

    def show_achievement(self, event: AchievementEvent) -> None:
        pass

    def trigger_confetti(self, trigger: ConfettiTrigger) -> None:
        pass

    def level_up(self, change: LevelChange) -> None:
        pass


class GamificationEngine:
    def __init__(
        self,
        user_id: int,
        storage: ProgressStore,
        sink: Optional[PresentationSink] = None,
        *,
        points: int = 0,
        badges: Iterable[str] = (),
        translator: Optional[Translator] = None,
        locale: Optional[str] = None,
        save_delay: float = 0.5,
        bonus_delay: float = 0.5,
        badge_bonus: int = 200,
        timezone: str = "UTC",
    ) -> None:
        self.user_id = user_id
        self._storage = storage
        self._sink: PresentationSink = sink or NullSink()
        self._translator = translator or Translator()
        self._locale = locale
        self._points = max(int(points), 0)
        self._badges: List[str] = list(dict.fromkeys(badges))
        self._bonus_delay = bonus_delay
        self._badge_bonus = badge_bonus
        self._timezone = pytz.timezone(timezone)
        self._saver = Debouncer(self._save, save_delay)
        self._bonuses = DelayedCalls(bonus_delay)
        self._closed = False

    @classmethod
    def from_stored(cls, user_id: int, stored: StoredProgress, storage: ProgressStore, **kwargs) -> "GamificationEngine":
        return cls(user_id, storage, points=stored.points, badges=stored.badges, **kwargs)

    # ------------------------------------------------------------------ state -----
    @property
    def points(self) -> int:
        return self._points

    @property
    def level(self) -> int:
        return level_for_points(self._points)

    @property
    def badges(self) -> Tuple[str, ...]:
        return tuple(self._badges)

    @property
    def pending_bonuses(self) -> int:
        return len(self._bonuses)

    @property
    def save_pending(self) -> bool:
        return self._saver.pending

    def has_badge(self, badge_id: str) -> bool:
        return badge_id in self._badges

    def snapshot(self) -> ProgressRecord:
        return ProgressRecord(
            level=self.level,
            points=self._points,
            badges=list(self._badges),
            updated_at=datetime.now(self._timezone),
        )

    # -------------------------------------------------------------- mutations -----
    def add_points(self, delta: int) -> None:
        """Apply ``delta`` to the balance, clamping the result at zero."""
        previous_level = self.level
        self._points = max(self._points + int(delta), 0)
        new_level = self.level
        LOGGER.debug("User %s points %+d -> %s", self.user_id, delta, self._points)

        if new_level > previous_level:
            LOGGER.info("User %s reached level %s", self.user_id, new_level)
            self.show_achievement(
                self._translate("level_up_title"),
                self._translate("level_up_message", level=new_level),
                AchievementKind.MILESTONE,
            )
            change = LevelChange(previous_level=previous_level, new_level=new_level)
            self._notify(self._sink.level_up, change)
            if change.large_jump:
                self._notify(self._sink.trigger_confetti, LARGE_JUMP_CONFETTI)

        self._schedule_save()

    def earn_badge(self, badge_id: str) -> bool:
        """Grant ``badge_id`` once; returns ``False`` when it was already held."""
        if badge_id in self._badges:
            return False
        self._badges.append(badge_id)
        LOGGER.info("User %s earned badge '%s'", self.user_id, badge_id)
        self.show_achievement(
            self._translate("badge_title"),
            self._translate("badge_message", badge=badge_id),
            AchievementKind.SUCCESS,
        )
        self._schedule_save()
        if self._bonus_delay <= 0 or self._closed:
            self._apply_badge_bonus(badge_id)
        else:
            self._bonuses.call_later(badge_id, partial(self._apply_badge_bonus, badge_id))
        return True

    # ----------------------------------------------------------- presentation -----
    def show_achievement(
        self, title: str, message: str, kind: AchievementKind = AchievementKind.SUCCESS
    ) -> AchievementEvent:
        event = AchievementEvent(title=title, message=message, kind=kind)
        self._notify(self._sink.show_achievement, event)
        self.trigger_confetti()
        return event

    def trigger_confetti(
        self,
        duration_ms: int = DEFAULT_CONFETTI.duration_ms,
        particle_count: int = DEFAULT_CONFETTI.particle_count,
        focus_point: Optional[Tuple[float, float]] = None,
    ) -> ConfettiTrigger:
        trigger = ConfettiTrigger(duration_ms=duration_ms, particle_count=particle_count, focus_point=focus_point)
        self._notify(self._sink.trigger_confetti, trigger)
        return trigger

    # -------------------------------------------------------------- lifecycle -----
    async def flush(self) -> None:
        await self._saver.flush()

    async def close(self, flush: bool = True) -> None:
        """Tear the engine down.

        With ``flush`` the pending badge bonuses are applied at once and the
        final state is written; without it both are dropped.
        """
        if self._closed:
            return
        if flush:
            self._bonuses.run_all()
            self._closed = True
            await self._saver.flush()
        else:
            self._closed = True
            dropped = len(self._bonuses)
            self._bonuses.cancel_all()
            await self._saver.close()
            if dropped:
                LOGGER.warning("User %s engine closed with %s badge bonuses dropped", self.user_id, dropped)

    # ---------------------------------------------------------------- helpers -----
    def _apply_badge_bonus(self, badge_id: str) -> None:
        LOGGER.debug("Applying %s point bonus for badge '%s'", self._badge_bonus, badge_id)
        self.add_points(self._badge_bonus)

    def _schedule_save(self) -> None:
        if self._closed:
            LOGGER.debug("User %s engine closed, skipping save", self.user_id)
            return
        self._saver.schedule()

    async def _save(self) -> None:
        record = self.snapshot()
        LOGGER.debug("Saving progress for user %s: %s points, level %s", self.user_id, record.points, record.level)
        await self._storage.save_progress(self.user_id, record)

    def _translate(self, key: str, **params: object) -> str:
        return self._translator.translate(key, self._locale, **params)

    def _notify(self, callback, payload) -> None:
        try:
            callback(payload)
        except Exception:
            LOGGER.exception("Presentation sink failed for user %s", self.user_id)

from __future__ import annotations

"""Per-user engine instances with serialized access."""
import asyncio
import logging
import time
import weakref
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Dict, List, MutableMapping, Optional

from ..config import Settings
from ..i18n import Translator
from .engine import GamificationEngine, PresentationSink
from .storage import ProgressStorage

LOGGER = logging.getLogger(__name__)

SinkFactory = Callable[[int], Optional[PresentationSink]]


class EngineRegistry:
    """Load one engine per user and guard it with a per-user lock.

    Locks are held weakly and vanish once no caller holds or awaits them.
    Engines stay until ``release()``, ``evict_idle()`` or ``close()``.
    """

    def __init__(
        self,
        storage: ProgressStorage,
        settings: Settings,
        translator: Translator,
        sink_factory: Optional[SinkFactory] = None,
    ) -> None:
        self._storage = storage
        self._settings = settings
        self._translator = translator
        self._sink_factory = sink_factory
        self._engines: Dict[int, GamificationEngine] = {}
        self._last_used: Dict[int, float] = {}
        self._locks: MutableMapping[int, asyncio.Lock] = weakref.WeakValueDictionary()
        self._eviction_task: Optional[asyncio.Task] = None

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._engines

    def __len__(self) -> int:
        return len(self._engines)

    def lock(self, user_id: int) -> asyncio.Lock:
        lock = self._locks.get(user_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[user_id] = lock
        return lock

    async def get(self, user_id: int) -> GamificationEngine:
        async with self.lock(user_id):
            return await self._get_or_load(user_id)

    @asynccontextmanager
    async def session(self, user_id: int) -> AsyncIterator[GamificationEngine]:
        async with self.lock(user_id):
            yield await self._get_or_load(user_id)

    async def release(self, user_id: int) -> None:
        async with self.lock(user_id):
            engine = self._engines.pop(user_id, None)
            self._last_used.pop(user_id, None)
            if engine is not None:
                await engine.close(flush=self._settings.flush_on_close)

    async def evict_idle(self, max_idle: float) -> List[int]:
        """Release engines unused for ``max_idle`` seconds; returns their user ids."""
        cutoff = time.monotonic() - max_idle
        evicted = []
        for user_id, last_used in list(self._last_used.items()):
            if last_used > cutoff or self.lock(user_id).locked():
                continue
            await self.release(user_id)
            evicted.append(user_id)
        if evicted:
            LOGGER.debug("Evicted %s idle engines", len(evicted))
        return evicted

    def start_eviction(self, interval: float, max_idle: float) -> None:
        if self._eviction_task is None:
            self._eviction_task = asyncio.create_task(self._run_eviction(interval, max_idle))

    async def close(self) -> None:
        if self._eviction_task is not None:
            self._eviction_task.cancel()
            await asyncio.gather(self._eviction_task, return_exceptions=True)
            self._eviction_task = None
        for user_id in list(self._engines):
            await self.release(user_id)

    async def _run_eviction(self, interval: float, max_idle: float) -> None:
        while True:
            await asyncio.sleep(interval)
            try:
                await self.evict_idle(max_idle)
            except Exception:
                LOGGER.exception("Idle engine eviction failed")

    async def _get_or_load(self, user_id: int) -> GamificationEngine:
        self._last_used[user_id] = time.monotonic()
        engine = self._engines.get(user_id)
        if engine is not None:
            return engine
        stored = await self._storage.load_progress(user_id)
        LOGGER.debug("Loaded engine for user %s with %s points", user_id, stored.points)
        engine = GamificationEngine.from_stored(
            user_id,
            stored,
            self._storage,
            sink=self._sink_factory(user_id) if self._sink_factory else None,
            translator=self._translator,
            locale=self._settings.locale,
            save_delay=self._settings.save_delay,
            bonus_delay=self._settings.bonus_delay,
            badge_bonus=self._settings.badge_bonus_points,
            timezone=self._settings.timezone,
        )
        self._engines[user_id] = engine
        return engine

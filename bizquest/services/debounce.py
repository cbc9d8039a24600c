from __future__ import annotations

"""Timers used by the engine: a trailing-edge debouncer and delayed calls."""
import asyncio
import logging
from typing import Awaitable, Callable, Dict, Optional

LOGGER = logging.getLogger(__name__)


class Debouncer:
    """Run ``callback`` once ``delay`` seconds after the last ``schedule()``.

    Calls inside the quiet window collapse into a single run. The callback
    is a coroutine function; its failures are logged and never re-raised.
    Runs never overlap, so a later run always finishes after an earlier one.
    Scheduling without a running loop marks the call pending until
    ``flush()``.
    """

    def __init__(self, callback: Callable[[], Awaitable[None]], delay: float) -> None:
        self._callback = callback
        self._delay = delay
        self._handle: Optional[asyncio.TimerHandle] = None
        self._deferred = False
        self._lock = asyncio.Lock()
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        return self._handle is not None or self._deferred

    def schedule(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            if not self._deferred:
                LOGGER.warning("No running event loop, debounced call waits for flush()")
            self._deferred = True
            return
        self._deferred = False
        if self._handle is not None:
            self._handle.cancel()
        self._handle = loop.call_later(self._delay, self._fire)

    def cancel(self) -> None:
        self._deferred = False
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    async def flush(self) -> None:
        """Run a pending callback now and wait for every in-flight run."""
        if self.pending:
            self.cancel()
            self._start()
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def close(self) -> None:
        self.cancel()
        for task in list(self._tasks):
            task.cancel()
        await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _fire(self) -> None:
        self._handle = None
        self._start()

    def _start(self) -> None:
        task = asyncio.get_running_loop().create_task(self._run())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run(self) -> None:
        async with self._lock:
            try:
                await self._callback()
            except asyncio.CancelledError:
                raise
            except Exception:
                LOGGER.exception("Debounced callback failed")


class DelayedCalls:
    """Keyed one-shot callbacks that can be forced early or dropped."""

    def __init__(self, delay: float) -> None:
        self._delay = delay
        self._handles: Dict[str, asyncio.TimerHandle] = {}
        self._callbacks: Dict[str, Callable[[], None]] = {}

    def __len__(self) -> int:
        return len(self._handles)

    def __contains__(self, key: object) -> bool:
        return key in self._handles

    def call_later(self, key: str, callback: Callable[[], None]) -> None:
        """Run ``callback`` after the delay, or right away without a running loop."""
        if key in self._handles:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            LOGGER.debug("No running event loop, running delayed call %s now", key)
            self._callbacks[key] = callback
            self._fire(key)
            return
        self._callbacks[key] = callback
        self._handles[key] = loop.call_later(self._delay, self._fire, key)

    def run_all(self) -> None:
        for key in list(self._handles):
            self._handles[key].cancel()
            self._fire(key)

    def cancel_all(self) -> None:
        for handle in self._handles.values():
            handle.cancel()
        self._handles.clear()
        self._callbacks.clear()

    def _fire(self, key: str) -> None:
        self._handles.pop(key, None)
        callback = self._callbacks.pop(key, None)
        if callback is None:
            return
        try:
            callback()
        except Exception:
            LOGGER.exception("Delayed call %s failed", key)

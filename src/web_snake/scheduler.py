"""Asyncio tick loop with a speed-dependent, self-adjusting interval."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from web_snake.session import GameSession

logger = logging.getLogger(__name__)

AfterTick = Callable[[dict], Awaitable[None]]


class TickScheduler:
    """Drives a :class:`GameSession` one tick at a time.

    Each iteration reads the session's current tick interval, sleeps for
    it, runs one tick under *lock* and then awaits *after_tick* with the
    resulting snapshot. The interval is re-read every time, so eating food
    speeds the loop up immediately. Stopping cancels the pending sleep; a
    tick that has started always completes.

    If a tick raises, the run is aborted and *on_failure* is awaited with
    the final snapshot; the loop does not restart.
    """

    def __init__(
        self,
        session: GameSession,
        after_tick: AfterTick | None = None,
        lock: asyncio.Lock | None = None,
        on_failure: AfterTick | None = None,
    ) -> None:
        self.session = session
        self.after_tick = after_tick
        self.on_failure = on_failure
        self.lock = lock if lock is not None else asyncio.Lock()
        self.ticks_run = 0
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task:
        """Schedule the loop on the running event loop."""
        if self.running:
            raise RuntimeError("Tick scheduler is already running.")
        self._task = asyncio.create_task(self.run())
        return self._task

    async def run(self, max_ticks: int | None = None) -> None:
        """Tick until stopped, or until *max_ticks* ticks have run."""
        try:
            while max_ticks is None or self.ticks_run < max_ticks:
                await asyncio.sleep(self.session.tick_interval_ms / 1000.0)
                async with self.lock:
                    state = self.session.on_tick()
                self.ticks_run += 1
                if self.after_tick is not None:
                    await self.after_tick(state)
        except asyncio.CancelledError:
            logger.info("Tick loop cancelled after %d ticks.", self.ticks_run)
            raise
        except Exception:
            logger.exception("Tick loop error after %d ticks.", self.ticks_run)
            async with self.lock:
                self.session.abort()
                state = self.session.get_state()
            if self.on_failure is not None:
                await self.on_failure(state)

    async def stop(self) -> None:
        """Cancel the loop and wait for it to wind down."""
        task = self._task
        self._task = None
        if task is None or task.done():
            return
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)

"""Recurring task that keeps the test tab open and frontmost."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable
from dataclasses import dataclass

from .errors import TickError
from .scripting import BrowserScripting

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class ForegroundState:
    """What one tick observed. Recomputed on every tick."""

    matched_tab_exists: bool
    matched_window_id: int | None = None


class ForegroundEnforcer:
    """Periodically find (or recreate) the target tab and raise its window.

    The next tick is scheduled only after the current one completes, so ticks
    never overlap. :meth:`stop` lets an in-flight tick finish but no further
    step of it runs once stopping has begun.
    """

    def __init__(
        self,
        scripting: BrowserScripting,
        target_url: str,
        *,
        interval: float,
        on_error: Callable[[TickError], None] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._scripting = scripting
        self._target_url = target_url
        self._interval = interval
        self._on_error = on_error
        self._logger = logger or LOGGER
        self._task: asyncio.Task[None] | None = None
        self._wake = asyncio.Event()
        self._stopping = False
        self.ticks = 0
        self.failures = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def stopped(self) -> bool:
        return self._stopping

    def start(self) -> None:
        if self._task is not None or self._stopping:
            return
        self._task = asyncio.create_task(self._loop(), name="safari-foreground")

    def cancel(self) -> None:
        """Stop scheduling ticks without waiting. Safe to call repeatedly."""

        if self._stopping:
            return
        self._stopping = True
        self._wake.set()
        task = self._task
        if task is not None and not task.done():
            # The loop may already be closed when called from an exit hook.
            with contextlib.suppress(RuntimeError):
                task.cancel()

    async def stop(self) -> None:
        """Stop the loop and wait for any in-flight tick to finish."""

        self._stopping = True
        self._wake.set()
        task = self._task
        if task is None:
            return
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def run_once(self) -> ForegroundState | None:
        self.ticks += 1
        try:
            return await self._tick()
        except Exception as exc:
            self.failures += 1
            error = TickError(f"Foreground tick for {self._target_url} failed: {exc}")
            error.__cause__ = exc
            self._logger.warning("%s", error)
            if self._on_error is not None:
                self._on_error(error)
            return None

    async def _tick(self) -> ForegroundState:
        window_id = await self._scripting.find_tab(self._target_url)
        state = ForegroundState(matched_tab_exists=window_id is not None, matched_window_id=window_id)
        if self._stopping:
            return state
        if window_id is None:
            self._logger.info("Test tab missing; reopening %s", self._target_url)
            await self._scripting.open_document(self._target_url)
        else:
            await self._scripting.raise_window(window_id)
        if self._stopping:
            return state
        await self._scripting.activate()
        return state

    async def _loop(self) -> None:
        while not self._stopping:
            with contextlib.suppress(TimeoutError):
                await asyncio.wait_for(self._wake.wait(), timeout=self._interval)
            if self._stopping:
                break
            await self.run_once()


__all__ = ["ForegroundEnforcer", "ForegroundState"]

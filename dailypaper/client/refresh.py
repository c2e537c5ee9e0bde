"""
Cancellable periodic task used for the news auto-refresh.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class PeriodicTask:
    """
    Call ``callback`` every ``interval`` seconds until stopped.

    A tick that fires while the previous call is still running is dropped
    rather than queued, so slow fetches never pile up.
    """

    def __init__(
        self,
        interval: float,
        callback: Callable[[], Awaitable[None]],
        *,
        name: str = "periodic-task",
    ) -> None:
        self.interval = interval
        self.callback = callback
        self.name = name
        self.skipped_ticks = 0
        self._task: Optional[asyncio.Task] = None
        self._inflight: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name=self.name)

    async def stop(self) -> None:
        """Cancel the timer and any call still in flight, then wait for both."""
        tasks = [t for t in (self._task, self._inflight) if t is not None]
        self._task = None
        self._inflight = None
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            if self._inflight is not None and not self._inflight.done():
                self.skipped_ticks += 1
                logger.debug("%s: previous call still running, skipping tick", self.name)
                continue
            self._inflight = asyncio.create_task(self._invoke())

    async def _invoke(self) -> None:
        try:
            await self.callback()
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("%s: callback failed", self.name)

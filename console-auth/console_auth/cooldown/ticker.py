"""
Cooldown Ticker
===============
Recurring one-second refresh of a cooldown for display.
"""

import asyncio
from typing import Callable, Optional

import structlog

from ..constants import TICK_INTERVAL_SECONDS
from .timer import CooldownTimer

logger = structlog.get_logger(__name__)


class CooldownTicker:
    """
    Drives a countdown display for one cooldown key.

    Stopping the ticker only cancels the local task. The persisted end
    timestamp is kept, so a new ticker for the same key resumes where
    the old one left off.

    Example:
        ticker = CooldownTicker(timer, "oldEmailOtpCooldownEnd", on_tick=render)
        ticker.start()
        ...
        ticker.stop()
    """

    def __init__(
        self,
        timer: CooldownTimer,
        key: str,
        on_tick: Optional[Callable[[int], None]] = None,
        interval: float = TICK_INTERVAL_SECONDS,
    ):
        self.timer = timer
        self.key = key
        self.on_tick = on_tick
        self.interval = interval
        self.remaining = timer.remaining(key)
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Begin ticking; a no-op while already running."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def _run(self) -> None:
        while True:
            self.remaining = self.timer.tick(self.key)
            if self.on_tick:
                self.on_tick(self.remaining)
            if self.remaining == 0:
                return
            await asyncio.sleep(self.interval)

    def stop(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def wait(self) -> None:
        """Wait for the countdown to reach zero."""
        if self._task is not None:
            await self._task

"""
Cooldown countdown as a cancellable repeating task.

The ticker only reads the remaining time and reports it; it never changes
tracker state.
"""

import asyncio
import math
from typing import Callable, Optional

from logging_config import get_logger

logger = get_logger("self_reliance.countdown")


class CountdownTicker:
    def __init__(
        self,
        remaining_fn: Callable[[], float],
        on_tick: Callable[[int], None],
        interval: float = 1.0,
    ):
        self.remaining_fn = remaining_fn
        self.on_tick = on_tick
        self.interval = interval
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task:
        """Schedule the ticker on the running event loop."""
        if self.running:
            return self._task
        self._task = asyncio.get_running_loop().create_task(self._run())
        self._task.add_done_callback(self._on_done)
        return self._task

    @staticmethod
    def _on_done(task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Countdown stopped on error", exc_info=exc)

    async def _run(self) -> None:
        while True:
            seconds = max(0.0, self.remaining_fn())
            self.on_tick(math.ceil(seconds))
            if seconds <= 0:
                return
            await asyncio.sleep(self.interval)

    def cancel(self) -> None:
        if self.running:
            logger.debug("Countdown cancelled")
            self._task.cancel()

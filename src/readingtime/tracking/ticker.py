"""Periodic callbacks on an asyncio event loop."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

log = logging.getLogger(__name__)


class Ticker:
    """Calls ``callback(interval)`` every ``interval`` seconds while started.

    Starting subscribes to the tick source and stopping unsubscribes; no
    call ever blocks the loop.
    """

    def __init__(self, interval: float, callback: Callable[[float], None]) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self.interval = interval
        self._callback = callback
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()

    async def aclose(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                self._callback(self.interval)
            except Exception:
                log.exception("Tick callback failed")

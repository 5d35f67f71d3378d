"""Owned periodic tasks for the session's countdown tick and quota poll."""

import asyncio
import logging
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)


class PeriodicTask:
    """Run an async callback every `interval` seconds until stopped.

    The first run happens immediately on start(). Exceptions from the callback
    are logged and do not stop the schedule.
    """

    def __init__(self, name: str, interval: float, callback: Callable[[], Awaitable[None]]):
        self.name = name
        self.interval = interval
        self._callback = callback
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._loop(), name=self.name)

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _loop(self) -> None:
        while True:
            try:
                await self._callback()
            except Exception:
                logger.exception("Periodic task %s failed", self.name)
            await asyncio.sleep(self.interval)

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)


class PeriodicScheduler:
    """Calls an async callback on a fixed period from a background task.

    A failing run is logged and the next one still happens one full period
    later.
    """

    def __init__(
        self,
        callback: Callable[[], Awaitable[Any]],
        interval_seconds: float,
        *,
        run_immediately: bool = True,
        name: str = "hackathon_scheduler",
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be > 0")
        self.callback = callback
        self.interval_seconds = interval_seconds
        self.run_immediately = run_immediately
        self.name = name
        self.runs = 0
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            logger.debug("%s already running; ignoring start", self.name)
            return
        self._task = asyncio.create_task(self._loop(), name=self.name)
        logger.info("%s started (every %.0fs)", self.name, self.interval_seconds)

    async def stop(self) -> None:
        task = self._task
        self._task = None
        if task is None:
            return
        if not task.done():
            task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("%s stopped", self.name)

    async def _loop(self) -> None:
        if not self.run_immediately:
            await asyncio.sleep(self.interval_seconds)

        while True:
            try:
                await self.callback()
            except Exception as exc:  # noqa: BLE001
                logger.exception("Scheduled run failed: %s", exc)
            self.runs += 1
            await asyncio.sleep(self.interval_seconds)

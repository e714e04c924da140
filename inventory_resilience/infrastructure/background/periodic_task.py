"""Periodic background task with explicit start/stop handles.

Використовується для cache sweep та breaker monitoring. Task треба
зупинити на shutdown, інакше він тримає event loop / тести.
"""

import asyncio
import inspect
import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)

# Sync function or coroutine function
PeriodicCallback = Callable[[], Any]


class PeriodicTask:
    """Runs `callback` every `interval_seconds` until stopped.

    Exceptions from a single run are logged and dropped - the loop keeps
    going and nothing propagates to unrelated callers.

    Example:
        >>> task = PeriodicTask("ttl_cache.sweep", cache.purge_expired, 60.0)
        >>> task.start()
        >>> ...
        >>> await task.stop()
    """

    def __init__(
        self,
        name: str,
        callback: PeriodicCallback,
        interval_seconds: float,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")

        self.name = name
        self.interval_seconds = interval_seconds
        self._callback = callback
        self._task: asyncio.Task | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Schedule the loop on the running event loop (idempotent)."""
        if self.is_running:
            logger.debug("periodic_task.already_running", extra={"task": self.name})
            return

        self._task = asyncio.get_running_loop().create_task(
            self._run(), name=self.name
        )
        logger.info(
            "periodic_task.started",
            extra={"task": self.name, "interval_seconds": self.interval_seconds},
        )

    async def stop(self) -> None:
        """Cancel the loop and wait until it has finished."""
        task, self._task = self._task, None
        if task is None:
            return

        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            # Cancellation aimed at the caller of stop() must propagate
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
        logger.info("periodic_task.stopped", extra={"task": self.name})

    async def run_once(self) -> None:
        """Execute the callback one time, isolating its errors."""
        try:
            result = self._callback()
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.error(
                "periodic_task.failed",
                extra={"task": self.name, "error": repr(e)},
                exc_info=True,
            )

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            await self.run_once()

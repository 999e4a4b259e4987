# ---
# File: incident_deck/dashboard/debounce.py
# Purpose: Restartable single-shot timer used to debounce search input
# ---

import asyncio
import logging
from typing import Any, Callable, Optional, Set

logger = logging.getLogger(__name__)


class Debouncer:
    """
    Search Input Debouncer

    Delays a callback until `delay_seconds` of inactivity have elapsed.
    Every trigger() restarts the timer with the latest value, so only the final
    pending call fires. Coroutine callbacks are scheduled as tasks on the running loop.

    Args:
        delay_seconds: Quiet period required before the callback runs
        callback: Called with the last triggered value (sync or async)
    """

    def __init__(self, delay_seconds: float, callback: Callable[[Any], Any]):
        self.delay_seconds = delay_seconds
        self.callback = callback
        self._handle: Optional[asyncio.TimerHandle] = None
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def trigger(self, value: Any) -> None:
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay_seconds, self._fire, value)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self, value: Any) -> None:
        self._handle = None
        result = self.callback(value)
        if asyncio.iscoroutine(result):
            task = asyncio.get_running_loop().create_task(result)
            self._tasks.add(task)
            task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("[DEBOUNCE] Callback failed: %s", task.exception())

    async def drain(self) -> None:
        """Wait for callbacks that already fired to finish."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def close(self) -> None:
        """Cancel the pending timer and every callback task still running."""
        self.cancel()
        for task in list(self._tasks):
            task.cancel()

    async def aclose(self) -> None:
        self.close()
        await self.drain()

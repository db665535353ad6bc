"""
Cancellable periodic tasks for the playback event loop.

The adapter only needs "run this every N seconds until I cancel it", so the
scheduler is a small protocol with an asyncio implementation. Tests supply
a manual scheduler that ticks on demand. A callback may be a coroutine
function; each tick is awaited before the next sleep starts, so slow ticks
never overlap.
"""

import asyncio
import inspect
from typing import Any, Callable, Optional, Protocol

from loguru import logger


class TaskHandle(Protocol):
    """Handle to a running periodic task."""

    @property
    def active(self) -> bool:
        ...

    def cancel(self) -> None:
        """Stop the task. Safe to call more than once."""
        ...


class Scheduler(Protocol):
    def call_every(self, interval: float, callback: Callable[[], Any]) -> TaskHandle:
        ...


class AsyncioTaskHandle:
    """TaskHandle backed by an asyncio.Task."""

    def __init__(self, task: asyncio.Task):
        self._task = task

    @property
    def active(self) -> bool:
        return not self._task.done()

    def cancel(self) -> None:
        if not self._task.done():
            self._task.cancel()


async def _run_every(interval: float, callback: Callable[[], Any]) -> None:
    while True:
        await asyncio.sleep(interval)
        try:
            result = callback()
            if inspect.isawaitable(result):
                await result
        except Exception:
            # A failing tick must not kill the timer
            logger.exception(f"Periodic callback {callback!r} failed")


class AsyncioScheduler:
    """Schedules periodic callbacks on an asyncio event loop.

    Must be used from the loop's own thread. Without an explicit loop the
    running loop at call time is used.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def call_every(self, interval: float, callback: Callable[[], Any]) -> AsyncioTaskHandle:
        loop = self._loop or asyncio.get_running_loop()
        task = loop.create_task(_run_every(interval, callback))
        return AsyncioTaskHandle(task)

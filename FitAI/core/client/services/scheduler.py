"""
Cancellable deferred callbacks on the asyncio event loop.
"""
import asyncio
from typing import Callable, Optional, Set

from FitAI.core.logging import get_logger

logger = get_logger(__name__)


class ScheduledTask:
    """A callback that will run once unless cancelled first."""

    def __init__(self, callback: Callable[[], None], delay: float):
        self._callback = callback
        self.delay = delay
        self._handle: Optional[asyncio.TimerHandle] = None
        self._done = False
        self._cancelled = False

    def attach(self, handle: asyncio.TimerHandle) -> None:
        """Bind the loop timer that will call ``run``."""
        self._handle = handle

    @property
    def done(self) -> bool:
        return self._done

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def active(self) -> bool:
        return not (self._done or self._cancelled)

    def run(self) -> None:
        """Invoke the callback if the task is still active."""
        if not self.active:
            return
        self._done = True
        self._callback()

    def cancel(self) -> bool:
        """
        Prevent the callback from running. Safe to call repeatedly.

        Returns:
            True if this call stopped a pending callback
        """
        if not self.active:
            return False
        self._cancelled = True
        if self._handle is not None:
            self._handle.cancel()
        return True


class Scheduler:
    """Schedules ScheduledTasks on the running event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop
        self._tasks: Set[ScheduledTask] = set()

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledTask:
        """
        Run ``callback`` after ``delay`` seconds.

        Must be called from within the event loop when no loop was given.
        """
        loop = self._loop or asyncio.get_running_loop()
        task = ScheduledTask(callback, delay)

        def fire():
            self._tasks.discard(task)
            task.run()

        task.attach(loop.call_later(delay, fire))
        self._tasks.add(task)
        logger.debug("Scheduled callback in %.2fs", delay)
        return task

    def cancel_all(self) -> int:
        """Cancel every pending task; returns how many were stopped."""
        stopped = sum(1 for task in list(self._tasks) if task.cancel())
        self._tasks.clear()
        return stopped

    @property
    def pending(self) -> int:
        return sum(1 for task in self._tasks if task.active)


__all__ = ['ScheduledTask', 'Scheduler']

"""
Cancelable deferred execution for coalescing bursts of changes.

Example:
    >>> debouncer = Debouncer(5.0, engine.push_remote_state)
    >>> debouncer.schedule()   # arms the timer
    >>> debouncer.schedule()   # re-arms it; the first one will never fire
    >>> debouncer.cancel()     # nothing fires
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)


class Debouncer:
    """
    Runs an async callback once a quiet period has passed since the last
    schedule() call.

    Every schedule() or cancel() bumps a generation counter. A timer task
    only fires when its generation is still current after sleeping, so a
    cancelled or replaced timer never runs its callback even if the sleep
    had already completed when it was cancelled.

    Once the callback has started it is no longer "pending": cancel() does
    not interrupt it. Use wait_idle() to wait for it to finish.
    """

    def __init__(
        self,
        delay: float,
        callback: Callable[[], Awaitable[None]],
        name: str = "callback",
    ) -> None:
        """
        Initialize a debouncer.

        Args:
            delay: Quiet period in seconds
            callback: Coroutine function invoked when the timer fires
            name: Label used in log messages
        """
        if delay < 0:
            raise ValueError(f"delay must be >= 0, got {delay}")
        self.delay = delay
        self.name = name
        self._callback = callback
        self._generation = 0
        self._timer: asyncio.Task[None] | None = None
        self._running: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> bool:
        """True while a timer is armed and has not started its callback."""
        return self._timer is not None and not self._timer.done()

    @property
    def running(self) -> bool:
        """True while a fired callback is still executing."""
        return bool(self._running)

    def schedule(self) -> None:
        """Arm the timer, replacing any pending one. Needs a running loop."""
        self.cancel()
        generation = self._generation
        self._timer = asyncio.ensure_future(self._fire_after(generation))
        logger.debug("Scheduled %s in %.2fs", self.name, self.delay)

    def cancel(self) -> bool:
        """
        Disarm the pending timer, if any.

        Returns:
            True if a pending timer was cancelled
        """
        self._generation += 1
        timer, self._timer = self._timer, None
        if timer is None or timer.done():
            return False
        timer.cancel()
        logger.debug("Cancelled pending %s", self.name)
        return True

    async def flush(self) -> bool:
        """
        Run the callback now if a timer is pending.

        Returns:
            True if the callback ran
        """
        if not self.cancel():
            return False
        await self._callback()
        return True

    async def wait_idle(self) -> None:
        """Wait for any callback that already fired to finish."""
        while self._running:
            await asyncio.wait(set(self._running))

    async def _fire_after(self, generation: int) -> None:
        await asyncio.sleep(self.delay)
        if generation != self._generation:
            return

        task = asyncio.current_task()
        self._timer = None
        if task is not None:
            self._running.add(task)
        try:
            await self._callback()
        except Exception:
            logger.exception("Debounced %s failed", self.name)
        finally:
            if task is not None:
                self._running.discard(task)

"""
Asyncio debouncer.

Only the last value pushed within the quiet period reaches the callback.
Used for free-text catalog search so typing does not fire one request per key.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)


class Debouncer:

    def __init__(self, delay_seconds: float, callback: Callable[[Any], Awaitable[None]]):
        self.delay_seconds = delay_seconds
        self.callback = callback
        self._task: asyncio.Task | None = None
        self._value: Any = None
        # True only while the quiet period is running, not while the callback is
        self._sleeping = False

    @property
    def pending(self) -> bool:
        """A value is waiting out the quiet period."""
        return self._sleeping and self._task is not None and not self._task.done()

    @property
    def running(self) -> bool:
        """The callback for the last value is in progress."""
        return not self._sleeping and self._task is not None and not self._task.done()

    def push(self, value: Any) -> None:
        """Restart the quiet period with a new value. Needs a running event loop."""
        self.cancel()
        self._value = value
        self._sleeping = True
        self._task = asyncio.get_running_loop().create_task(self._fire_later(value))

    async def _fire_later(self, value: Any) -> None:
        await asyncio.sleep(self.delay_seconds)
        self._sleeping = False
        await self.callback(value)

    async def flush(self) -> None:
        """
        Run the pending callback now instead of waiting out the delay.

        When the callback has already started, wait for it instead of
        running it a second time.
        """
        if self.running:
            await self.wait()
            return
        if not self.pending:
            return
        self.cancel()
        await self.callback(self._value)

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
        self._sleeping = False

    async def wait(self) -> None:
        """Wait until the pending callback (if any) has run."""
        if self._task is not None:
            try:
                await self._task
            except asyncio.CancelledError:
                logger.debug("Debounced call was superseded")

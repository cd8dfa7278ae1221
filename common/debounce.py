"""
SpareLink - Debounce & Request Sequencing
===========================================
Small asyncio primitives used by the admin order search:

  Debouncer        — one pending call at a time; scheduling replaces it
  RequestSequencer — monotonic tickets; only the newest response applies
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

logger = logging.getLogger("sparelink.debounce")


class Debouncer:
    """
    Delay a coroutine call until `delay_ms` passes without a new schedule().

    Each schedule() cancels the pending call (if it has not started yet)
    and replaces it. Once the delay elapses the call runs to completion;
    later schedules do not interrupt it.
    """

    def __init__(self, delay_ms: int):
        self.delay = max(0, delay_ms) / 1000.0
        self._task: Optional[asyncio.Task] = None
        self._running: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def schedule(self, func: Callable[..., Awaitable], *args, **kwargs) -> asyncio.Task:
        self.cancel()
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run(func, args, kwargs))
        return self._task

    def cancel(self) -> bool:
        """Cancel the pending call. Returns True if one was waiting."""
        task = self._task
        self._task = None
        if task is None or task.done():
            return False
        task.cancel()
        return True

    async def wait(self):
        """Wait for the pending call and any call already running to finish."""
        for task in (self._task, self._running):
            if task is None:
                continue
            try:
                await task
            except asyncio.CancelledError:
                pass

    async def _run(self, func, args, kwargs):
        await asyncio.sleep(self.delay)
        # Past the delay: detach so a later cancel() cannot abort the call itself
        current = asyncio.current_task()
        if self._task is current:
            self._task = None
        self._running = current
        try:
            return await func(*args, **kwargs)
        finally:
            if self._running is current:
                self._running = None


class RequestSequencer:
    """Hands out increasing tickets; a response is applied only for the latest one."""

    def __init__(self):
        self._latest = 0

    @property
    def latest(self) -> int:
        return self._latest

    def next_ticket(self) -> int:
        self._latest += 1
        return self._latest

    def is_current(self, ticket: int) -> bool:
        return ticket == self._latest

"""
Global cap on how many site builds run at once.
"""

import asyncio
import logging
import weakref
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from .config import Settings

logger = logging.getLogger(__name__)


class BuildLimiter:
    """
    Bounded counting semaphore shared by every site build.

    The label passed to acquire() is only used for logging; builds of the
    same site are not serialized against each other.
    """

    def __init__(self, capacity: int = 1):
        if capacity < 1:
            raise ValueError(f"Limiter capacity must be at least 1, got {capacity}")
        self.capacity = capacity
        self.active = 0
        self.peak = 0
        self._semaphore = asyncio.Semaphore(capacity)

    @asynccontextmanager
    async def acquire(self, label: str) -> AsyncIterator[None]:
        logger.debug(f"Waiting for build slot: {label}")
        await self._semaphore.acquire()
        self.active += 1
        self.peak = max(self.peak, self.active)
        logger.debug(f"Acquired build slot ({self.active}/{self.capacity}): {label}")
        try:
            yield
        finally:
            self.active -= 1
            self._semaphore.release()
            logger.debug(f"Released build slot: {label}")


# asyncio.Semaphore binds to the loop that first waits on it, so each
# running loop gets its own limiter
_limiters: "weakref.WeakKeyDictionary[asyncio.AbstractEventLoop, BuildLimiter]" = weakref.WeakKeyDictionary()


def get_limiter(settings: Optional[Settings] = None) -> BuildLimiter:
    """
    Return the shared limiter for the running event loop.

    Created on first use per loop, so repeated asyncio.run() calls in one
    process each get a fresh semaphore.

    Raises:
        RuntimeError: If called outside a running event loop
    """
    loop = asyncio.get_running_loop()
    limiter = _limiters.get(loop)
    if limiter is None:
        settings = settings or Settings.from_env()
        limiter = BuildLimiter(settings.build_concurrency)
        _limiters[loop] = limiter
    return limiter

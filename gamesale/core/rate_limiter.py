# ===== IMPORTS & DEPENDENCIES =====
import asyncio
import logging
import time
from typing import Awaitable, Callable

from gamesale.config import RATE_LIMIT_MIN_DELAY

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

# ===== CORE BUSINESS LOGIC =====
class RateLimiter:
    """
    Serializes outbound storefront calls with a fixed minimum spacing.

    This is not a token bucket: there is no burst allowance and no memory of
    throttling events. Callers that see an HTTP 429 back off on their own.
    """

    def __init__(
        self,
        min_delay: float = RATE_LIMIT_MIN_DELAY,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ):
        self._min_delay = min_delay
        self._clock = clock
        self._sleep = sleep
        self._last_call: float = float('-inf')
        self._lock = asyncio.Lock()

    @property
    def min_delay(self) -> float:
        return self._min_delay

    async def acquire(self) -> None:
        """
        Waits until `min_delay` has passed since the previous permit, then records a new one.
        The spacing is measured between permits (request starts), not from the
        end of the previous request.
        """
        async with self._lock:
            elapsed = self._clock() - self._last_call
            if elapsed < self._min_delay:
                wait = self._min_delay - elapsed
                logger.debug(f"[{self.__class__.__name__}] Waiting {wait:.3f}s before next call.")
                await self._sleep(wait)
            self._last_call = self._clock()

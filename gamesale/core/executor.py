# ===== IMPORTS & DEPENDENCIES =====
import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, Sequence, TypeVar

from gamesale.config import MAX_CONCURRENT

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

T = TypeVar('T')
R = TypeVar('R')

# ===== CORE BUSINESS LOGIC =====
async def run_bounded(
    items: Sequence[T],
    operation: Callable[[T], Awaitable[R]],
    max_concurrent: int = MAX_CONCURRENT
) -> List[Optional[R]]:
    """
    Runs `operation` over `items` with at most `max_concurrent` calls in flight.

    The returned list is aligned with `items`. An item whose operation raises
    yields None; the failure is logged and does not affect the other items.
    """
    if max_concurrent < 1:
        raise ValueError("max_concurrent must be at least 1")

    semaphore = asyncio.Semaphore(max_concurrent)
    results: List[Optional[R]] = [None] * len(items)

    async def _run(index: int, item: T) -> None:
        async with semaphore:
            try:
                results[index] = await operation(item)
            except Exception as e:
                logger.warning(f"⚠️ [run_bounded] Item {index} failed: {type(e).__name__}: {e}")
                results[index] = None

    await asyncio.gather(*(_run(i, item) for i, item in enumerate(items)))
    return results

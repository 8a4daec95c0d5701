# ===== IMPORTS & DEPENDENCIES =====
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable

import aiohttp

from gamesale.core.rate_limiter import RateLimiter
from gamesale.core.response_cache import ResponseCache

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

# ===== CORE BUSINESS LOGIC =====
@dataclass
class ApiServices:
    """
    Shared per-session collaborators for every API client: the HTTP session,
    the storefront rate limiter, the response cache and the sleep function
    used for retry back-off. Built once per application session.
    """
    session: aiohttp.ClientSession
    rate_limiter: RateLimiter = field(default_factory=RateLimiter)
    cache: ResponseCache = field(default_factory=ResponseCache)
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep

    @classmethod
    def create(cls, session: aiohttp.ClientSession) -> "ApiServices":
        services = cls(session=session)
        logger.debug(f"[{cls.__name__}] Created services (min delay {services.rate_limiter.min_delay}s).")
        return services

    def reset(self) -> None:
        """Drops cached responses, e.g. on logout."""
        self.cache.clear()

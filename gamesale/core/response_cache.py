# ===== IMPORTS & DEPENDENCIES =====
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

from gamesale.config import RESPONSE_CACHE_TTL

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    payload: Any
    stored_at: float


# ===== CORE BUSINESS LOGIC =====
class ResponseCache:
    """
    Session-scoped in-memory cache of decoded API payloads.

    Entries expire after `ttl` seconds and are only dropped when read or
    overwritten, so the map grows for the lifetime of the session. Concurrent
    misses on the same key each run their producer.
    """

    def __init__(self, ttl: float = RESPONSE_CACHE_TTL, clock: Callable[[], float] = time.monotonic):
        self._ttl = ttl
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str) -> Optional[Any]:
        """Returns the cached payload for `key`, or None if missing or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.stored_at >= self._ttl:
            logger.debug(f"[{self.__class__.__name__}] Entry expired: {key}")
            del self._entries[key]
            return None
        logger.debug(f"[{self.__class__.__name__}] Cache hit: {key}")
        return entry.payload

    def store(self, key: str, payload: Any) -> bool:
        """Stores a payload unless it is None or empty. Returns True if it was stored."""
        if payload is None or (hasattr(payload, '__len__') and len(payload) == 0):
            return False
        self._entries[key] = CacheEntry(payload=payload, stored_at=self._clock())
        logger.debug(f"💾 [{self.__class__.__name__}] Stored: {key}")
        return True

    async def get_or_fetch(self, key: str, producer: Callable[[], Awaitable[Any]]) -> Any:
        """Returns a fresh cached payload, otherwise awaits `producer()` and caches its result."""
        cached = self.get(key)
        if cached is not None:
            return cached
        payload = await producer()
        self.store(key, payload)
        return payload

    def clear(self) -> int:
        """Drops every entry and returns how many were removed."""
        count = len(self._entries)
        self._entries.clear()
        logger.info(f"[{self.__class__.__name__}] Cache cleared ({count} entries removed).")
        return count

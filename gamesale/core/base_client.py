# ===== IMPORTS & DEPENDENCIES =====
import asyncio
import json
import logging
from typing import Any, Dict, Optional

import aiohttp

from gamesale.config import COMMON_HEADERS, REQUEST_TIMEOUT, THROTTLE_EXTRA_DELAY
from gamesale.core.services import ApiServices
from gamesale.models.result import FetchResult, FetchStatus

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

THROTTLE_STATUS = 429
NOT_FOUND_STATUS = 404

# ===== CORE BUSINESS LOGIC =====
class BaseWebClient:
    """A base class for JSON API clients providing caching, rate limiting and retries."""

    def __init__(self, services: ApiServices):
        self._services = services
        self._session = services.session
        self._sleep = services.sleep
        logger.debug(f"[{self.__class__.__name__}] Initialized.")

    async def _request_once(self, url: str, params: Optional[Dict[str, Any]]) -> FetchResult:
        """Performs one GET and classifies the outcome. Never raises for network or decoding errors."""
        try:
            async with self._session.get(
                url,
                params=params,
                headers=COMMON_HEADERS,
                timeout=aiohttp.ClientTimeout(total=REQUEST_TIMEOUT)
            ) as response:
                if response.status == NOT_FOUND_STATUS:
                    logger.warning(f"⚠️ [{self.__class__.__name__}] Not found: {url}")
                    return FetchResult.not_found(response.status)
                if response.status >= 400:
                    logger.warning(f"⚠️ [{self.__class__.__name__}] HTTP error on {url}: Status {response.status}")
                    return FetchResult.transient(response.status)
                try:
                    # content_type=None handles non-standard API content-types
                    content = await response.json(content_type=None)
                except (json.JSONDecodeError, aiohttp.ContentTypeError, ValueError):
                    logger.warning(f"⚠️ [{self.__class__.__name__}] Non-JSON body from {url}")
                    return FetchResult.malformed(response.status)
                if content is None:
                    return FetchResult.malformed(response.status)
                return FetchResult.success(content, response.status)
        except (asyncio.TimeoutError, aiohttp.ClientError) as e:
            logger.warning(f"⚠️ [{self.__class__.__name__}] Network error on {url}: {type(e).__name__}")
            return FetchResult.transient()

    async def _request_with_retries(
        self,
        url: str,
        params: Optional[Dict[str, Any]],
        retries: int,
        retry_delay: float,
        rate_limited: bool
    ) -> FetchResult:
        """Bounded retry loop: `retries + 1` attempts, fixed delay, extra delay after a 429."""
        result = FetchResult.transient()
        attempts = retries + 1
        for attempt in range(attempts):
            if rate_limited:
                await self._services.rate_limiter.acquire()

            logger.info(f"➡️ [{self.__class__.__name__}] Fetching from network: {url} (Attempt {attempt + 1}/{attempts})")
            result = await self._request_once(url, params)
            if result.status in (FetchStatus.OK, FetchStatus.NOT_FOUND):
                return result

            if attempt >= attempts - 1:
                logger.error(f"❌ [{self.__class__.__name__}] Giving up on {url} after {attempts} attempts ({result.status.value}).")
                break

            delay = retry_delay
            if result.http_status == THROTTLE_STATUS:
                delay += THROTTLE_EXTRA_DELAY
                logger.warning(f"⚠️ [{self.__class__.__name__}] Throttled on {url}, backing off {delay:.2f}s.")
            logger.info(f"Retrying request to {url} in {delay:.2f} seconds...")
            await self._sleep(delay)

        return result

    async def _fetch(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        cache_key: Optional[str] = None,
        retries: int = 0,
        retry_delay: float = 0.0,
        rate_limited: bool = False
    ) -> FetchResult:
        """
        Fetches a JSON document. When `cache_key` is given the request goes
        through the response cache; only successful payloads are cached.
        """
        if cache_key is None:
            return await self._request_with_retries(url, params, retries, retry_delay, rate_limited)

        failures = []

        async def _producer() -> Any:
            result = await self._request_with_retries(url, params, retries, retry_delay, rate_limited)
            if result.ok:
                return result.payload
            failures.append(result)
            return None

        payload = await self._services.cache.get_or_fetch(cache_key, _producer)
        if failures:
            return failures[-1]
        return FetchResult.success(payload)

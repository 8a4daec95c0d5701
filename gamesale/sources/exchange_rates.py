# ===== IMPORTS & DEPENDENCIES =====
import logging

from gamesale.core.base_client import BaseWebClient
from gamesale.config import EXCHANGE_RATE_URL, LOCAL_CURRENCY, DEFAULT_EXCHANGE_RATE

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

# ===== CORE BUSINESS LOGIC =====
class ExchangeRateSource(BaseWebClient):
    """Latest exchange rate lookup, used to convert aggregator USD prices when no regional price exists."""

    async def fetch_rate(self, base: str = 'USD', target: str = LOCAL_CURRENCY) -> float:
        result = await self._fetch(EXCHANGE_RATE_URL.format(base=base))
        if result.ok and isinstance(result.payload, dict):
            rate = (result.payload.get('rates') or {}).get(target)
            if isinstance(rate, (int, float)) and rate > 0:
                logger.info(f"✅ [{self.__class__.__name__}] 1 {base} = {rate} {target}")
                return float(rate)

        logger.warning(f"⚠️ [{self.__class__.__name__}] Using default exchange rate {DEFAULT_EXCHANGE_RATE} {target}/{base}.")
        return DEFAULT_EXCHANGE_RATE

# ===== IMPORTS & DEPENDENCIES =====
import logging
from typing import List, Sequence

from gamesale.core.executor import run_bounded
from gamesale.models.listing import Listing, effective_discount, minor_to_major, regional_price_from_overview
from gamesale.sources.steam_store import SteamStoreClient
from gamesale.config import (
    MAX_CONCURRENT, MIN_DISCOUNT_PERCENT, PRICE_RETRIES, PRICE_RETRY_DELAY, STEAM_DEAL_PREFIX
)

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

# ===== CORE BUSINESS LOGIC =====
class PriceEnricher:
    """Attaches the authoritative regional Steam price to aggregator candidates."""

    def __init__(
        self,
        store: SteamStoreClient,
        retries: int = PRICE_RETRIES,
        retry_delay: float = PRICE_RETRY_DELAY,
        min_discount: float = MIN_DISCOUNT_PERCENT,
        max_concurrent: int = MAX_CONCURRENT
    ):
        self._store = store
        self.retries = retries
        self.retry_delay = retry_delay
        self.min_discount = min_discount
        self.max_concurrent = max_concurrent

    async def enrich(self, candidate: Listing) -> Listing:
        """
        Returns a copy of `candidate` priced from the storefront, with
        normal/sale price and savings recomputed from the minor-unit values.
        On any failure the candidate comes back unchanged so the aggregator's
        own price fields are used instead.
        """
        app_id = candidate.get('external_app_id')
        title = candidate.get('title')
        if not app_id:
            logger.debug(f"[{self.__class__.__name__}] No App ID for '{title}'. Keeping aggregator price.")
            return candidate

        result = await self._store.fetch_app_details(app_id, retries=self.retries, retry_delay=self.retry_delay)
        if not result.ok:
            logger.warning(f"⚠️ [{self.__class__.__name__}] No Steam price for '{title}' ({result.status.value}). Keeping aggregator price.")
            return candidate

        regional = regional_price_from_overview(result.payload.get('price_overview'))
        if regional is None:
            logger.info(f"[{self.__class__.__name__}] '{title}' has no price_overview. Keeping aggregator price.")
            return candidate

        enriched: Listing = dict(candidate)  # type: ignore[assignment]
        enriched.update(
            deal_id=f"{STEAM_DEAL_PREFIX}{app_id}",
            normal_price=minor_to_major(regional['initial_minor']),
            sale_price=minor_to_major(regional['final_minor']),
            savings_percent=float(regional['discount_percent']),
            regional_price=regional,
        )
        logger.debug(f"✅ [{self.__class__.__name__}] Priced '{title}': {regional['final_formatted']}")
        return enriched

    async def enrich_many(self, candidates: Sequence[Listing]) -> List[Listing]:
        """Enriches a slice of candidates, then keeps only those still discounted enough."""
        results = await run_bounded(candidates, self.enrich, self.max_concurrent)
        enriched = [result if result is not None else candidate for candidate, result in zip(candidates, results)]

        on_sale = [listing for listing in enriched if effective_discount(listing) >= self.min_discount]
        logger.info(
            f"[{self.__class__.__name__}] Filtered: {len(enriched)} -> {len(on_sale)} listings on sale >= {self.min_discount:g}% "
            f"(removed {len(enriched) - len(on_sale)})"
        )
        return on_sale

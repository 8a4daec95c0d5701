# ===== IMPORTS & DEPENDENCIES =====
import logging
from typing import Dict, List, Optional

from gamesale.core.executor import run_bounded
from gamesale.core.response_cache import ResponseCache
from gamesale.enrichment.price_enricher import PriceEnricher
from gamesale.models.listing import Listing
from gamesale.sources.cheapshark import CheapSharkSource
from gamesale.config import (
    SEARCH_CACHE_TTL, SEARCH_MIN_QUERY_LENGTH, SEARCH_PAGE_SIZE, RECENT_SEARCH_LIMIT, DEFAULT_RECENT_SEARCHES,
    HIGHLIGHT_PAGE_SIZE, HIGHLIGHT_PRICE_MIN_SAVINGS, HIGHLIGHT_MIN_SAVINGS, HIGHLIGHT_GAME_LIMIT,
    HIGHLIGHT_DLC_LIMIT, MAX_CONCURRENT
)

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

# ===== CORE BUSINESS LOGIC =====
class SearchService:
    """Title search and on-sale highlights over the aggregator, priced from the storefront."""

    def __init__(
        self,
        aggregator: CheapSharkSource,
        price_enricher: PriceEnricher,
        results_cache: Optional[ResponseCache] = None
    ):
        self._aggregator = aggregator
        self._price_enricher = price_enricher
        self._results_cache = results_cache or ResponseCache(ttl=SEARCH_CACHE_TTL)
        self.recent_searches: List[str] = list(DEFAULT_RECENT_SEARCHES)

    def _remember(self, query: str) -> None:
        if query in self.recent_searches:
            return
        self.recent_searches = [query, *self.recent_searches][:RECENT_SEARCH_LIMIT]

    async def _price(self, listings: List[Listing], min_savings: float = -1.0) -> List[Listing]:
        """Storefront-prices the listings whose aggregator savings exceed `min_savings`."""
        async def _maybe_enrich(listing: Listing) -> Listing:
            if listing.get('external_app_id') and float(listing.get('savings_percent') or 0) > min_savings:
                return await self._price_enricher.enrich(listing)
            return listing

        priced = await run_bounded(listings, _maybe_enrich, MAX_CONCURRENT)
        return [p if p is not None else original for original, p in zip(listings, priced)]

    async def search(self, query: str) -> List[Listing]:
        """Searches Steam deals by title. Queries shorter than the minimum length return nothing."""
        query = (query or '').strip()
        if len(query) < SEARCH_MIN_QUERY_LENGTH:
            return []

        cache_key = query.lower()
        cached = self._results_cache.get(cache_key)
        if cached is not None:
            logger.info(f"✅ [{self.__class__.__name__}] Loading results for '{query}' from cache.")
            return list(cached)

        logger.info(f"➡️ [{self.__class__.__name__}] Searching for '{query}'...")
        results = await self._price(await self._aggregator.search_deals(query, SEARCH_PAGE_SIZE))
        self._results_cache.store(cache_key, results)
        self._remember(query)
        logger.info(f"✅ [{self.__class__.__name__}] {len(results)} results for '{query}'.")
        return results

    async def sale_highlights(self) -> Dict[str, List[Listing]]:
        """
        Biggest current sales, split into games and DLCs. The savings cut uses
        the aggregator's figure; the storefront price is only attached for display.
        """
        listings = await self._aggregator.fetch_on_sale(HIGHLIGHT_PAGE_SIZE)
        priced = await self._price(listings, min_savings=HIGHLIGHT_PRICE_MIN_SAVINGS)
        significant = [
            item for original, item in zip(listings, priced)
            if float(original.get('savings_percent') or 0) >= HIGHLIGHT_MIN_SAVINGS
        ]

        highlights = {
            'games': [item for item in significant if item.get('category') == 'Game'][:HIGHLIGHT_GAME_LIMIT],
            'dlcs': [item for item in significant if item.get('category') == 'DLC'][:HIGHLIGHT_DLC_LIMIT],
        }
        logger.info(f"✅ [{self.__class__.__name__}] {len(highlights['games'])} games and {len(highlights['dlcs'])} DLCs on sale.")
        return highlights

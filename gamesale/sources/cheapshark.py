# ===== IMPORTS & DEPENDENCIES =====
import asyncio
import logging
from typing import Any, Dict, List, Optional

from gamesale.core.base_client import BaseWebClient
from gamesale.core.services import ApiServices
from gamesale.models.listing import Listing, LowestPrice
from gamesale.config import (
    CHEAPSHARK_DEALS_URL, CHEAPSHARK_GAMES_URL, STEAM_STORE_ID,
    AGGREGATOR_PAGE_COUNT, AGGREGATOR_PAGE_SIZE, MIN_DISCOUNT_PERCENT
)
from gamesale.utils.game_utils import classify_content, external_id_of, parse_price, summarize_by_category

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

# ===== CORE BUSINESS LOGIC =====
class CheapSharkSource(BaseWebClient):
    """Fetches discounted Steam listings from the CheapShark deals aggregator."""

    def __init__(
        self,
        services: ApiServices,
        page_count: int = AGGREGATOR_PAGE_COUNT,
        page_size: int = AGGREGATOR_PAGE_SIZE,
        min_discount: float = MIN_DISCOUNT_PERCENT
    ):
        super().__init__(services)
        self.page_count = page_count
        self.page_size = page_size
        self.min_discount = min_discount

    @staticmethod
    def _to_listing(row: Dict[str, Any]) -> Listing:
        """Maps one aggregator deal row onto a Listing and classifies its title."""
        title = row.get('title') or ''
        classification = classify_content(title)
        return Listing(
            deal_id=row.get('dealID') or '',
            title=title,
            normal_price=str(row.get('normalPrice') or '0'),
            sale_price=str(row.get('salePrice') or '0'),
            savings_percent=parse_price(row.get('savings')),
            thumbnail_url=row.get('thumb') or '',
            store_id=str(row.get('storeID') or STEAM_STORE_ID),
            external_app_id=external_id_of(row),
            category=classification['category'],
            is_dlc=classification['is_dlc'],
            is_bundle=classification['is_bundle'],
        )

    async def _fetch_deals_page(self, params: Dict[str, Any]) -> Optional[List[Dict[str, Any]]]:
        result = await self._fetch(CHEAPSHARK_DEALS_URL, params=params)
        if not result.ok:
            return None
        if not isinstance(result.payload, list):
            logger.warning(f"⚠️ [{self.__class__.__name__}] Unexpected deals payload type: {type(result.payload).__name__}")
            return None
        return result.payload

    async def fetch_candidates(self) -> List[Listing]:
        """
        Fetches every configured page in parallel, then drops rows below the
        minimum discount or without an app id, and de-duplicates by app id
        keeping the first row seen.
        """
        logger.info(f"🚀 [{self.__class__.__name__}] Fetching {self.page_count} pages of Steam deals...")
        tasks = [
            self._fetch_deals_page({
                'storeID': STEAM_STORE_ID,
                'onSale': 1,
                'sortBy': 'Savings',
                'desc': 1,
                'pageNumber': page_number,
                'pageSize': self.page_size,
            })
            for page_number in range(self.page_count)
        ]
        pages = await asyncio.gather(*tasks)

        failed_pages = [i for i, page in enumerate(pages) if page is None]
        if len(failed_pages) == len(pages):
            logger.error(f"❌ [{self.__class__.__name__}] All {len(pages)} deal pages failed. Returning no candidates.")
            return []
        if failed_pages:
            logger.warning(f"⚠️ [{self.__class__.__name__}] Skipping failed deal pages: {failed_pages}")

        rows = [row for page in pages if page for row in page if isinstance(row, dict)]
        logger.info(f"[{self.__class__.__name__}] Fetched {len(rows)} total Steam deals.")

        candidates: List[Listing] = []
        seen_ids = set()
        for row in rows:
            if parse_price(row.get('savings')) < self.min_discount:
                continue
            app_id = external_id_of(row)
            if not app_id or app_id in seen_ids:
                continue
            seen_ids.add(app_id)
            candidates.append(self._to_listing(row))

        stats = summarize_by_category(candidates)
        logger.info(
            f"✅ [{self.__class__.__name__}] {len(candidates)} unique candidates (discount >= {self.min_discount:g}%): "
            f"Games {stats['Game']['count']} (avg {stats['Game']['avg_savings']}%), "
            f"DLC {stats['DLC']['count']} (avg {stats['DLC']['avg_savings']}%), "
            f"Bundles {stats['Bundle']['count']} (avg {stats['Bundle']['avg_savings']}%)"
        )
        return candidates

    async def search_deals(self, query: str, page_size: int = 50) -> List[Listing]:
        """Title search restricted to the Steam store."""
        rows = await self._fetch_deals_page({'title': query, 'storeID': STEAM_STORE_ID, 'pageSize': page_size})
        if rows is None:
            logger.warning(f"⚠️ [{self.__class__.__name__}] Search failed for '{query}'.")
            return []
        return [self._to_listing(row) for row in rows if isinstance(row, dict)]

    async def fetch_on_sale(self, page_size: int = 100) -> List[Listing]:
        """A single page of current Steam sales, biggest savings first."""
        rows = await self._fetch_deals_page({
            'storeID': STEAM_STORE_ID, 'pageSize': page_size, 'onSale': 1, 'sortBy': 'Savings'
        })
        if rows is None:
            return []
        return [self._to_listing(row) for row in rows if isinstance(row, dict)]

    async def fetch_lowest_price(self, app_id: str) -> Optional[LowestPrice]:
        """
        Best-effort historical low for a Steam app: resolves the aggregator's
        game id from the app id, then reads that game's `cheapestPriceEver`.
        """
        lookup = await self._fetch(
            CHEAPSHARK_GAMES_URL, params={'steamAppID': app_id}, cache_key=f"cheapshark:lookup:{app_id}"
        )
        if not lookup.ok or not isinstance(lookup.payload, list) or not lookup.payload:
            logger.debug(f"[{self.__class__.__name__}] No aggregator game found for app {app_id}.")
            return None
        game_id = lookup.payload[0].get('gameID')
        if not game_id:
            return None

        detail = await self._fetch(
            CHEAPSHARK_GAMES_URL, params={'id': game_id}, cache_key=f"cheapshark:game:{game_id}"
        )
        if not detail.ok or not isinstance(detail.payload, dict):
            return None
        cheapest = detail.payload.get('cheapestPriceEver') or {}
        if 'price' not in cheapest:
            return None
        return LowestPrice(price=str(cheapest['price']), date=int(cheapest.get('date') or 0))

# ===== IMPORTS & DEPENDENCIES =====
import asyncio
import logging
from typing import Any, Dict, List, Optional, Tuple

from gamesale.core.executor import run_bounded
from gamesale.models.listing import (
    DetailRecord, LowestPrice, RelatedContentRecord, minor_to_major, regional_price_from_overview
)
from gamesale.sources.cheapshark import CheapSharkSource
from gamesale.sources.steam_store import SteamStoreClient
from gamesale.utils.game_utils import sanitize_html
from gamesale.config import (
    DETAIL_RETRIES, DETAIL_RETRY_DELAY, MAX_RELATED_CONTENT, MAX_SCREENSHOTS, MAX_CONCURRENT, STEAM_DLC_DEAL_PREFIX
)

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

Resolution = Tuple[Optional[DetailRecord], List[RelatedContentRecord]]

# ===== CORE BUSINESS LOGIC =====
class DetailResolver:
    """Builds the detail view for one Steam app: full description plus its DLC list."""

    def __init__(
        self,
        store: SteamStoreClient,
        aggregator: Optional[CheapSharkSource] = None,
        max_related: int = MAX_RELATED_CONTENT,
        max_concurrent: int = MAX_CONCURRENT
    ):
        self._store = store
        self._aggregator = aggregator
        self.max_related = max_related
        self.max_concurrent = max_concurrent

    def _build_detail(self, app_id: str, data: Dict[str, Any]) -> DetailRecord:
        screenshots = [
            shot.get('path_full') or shot.get('path_thumbnail')
            for shot in data.get('screenshots') or []
            if isinstance(shot, dict) and (shot.get('path_full') or shot.get('path_thumbnail'))
        ][:MAX_SCREENSHOTS]
        release = data.get('release_date') or {}
        return DetailRecord(
            external_app_id=str(app_id),
            title=data.get('name') or '',
            hero_image_url=data.get('header_image') or '',
            description=sanitize_html(data.get('short_description') or ''),
            screenshots=screenshots,
            genres=self._store.parse_genres(data),
            developers=list(data.get('developers') or []),
            publishers=list(data.get('publishers') or []),
            regional_price=regional_price_from_overview(data.get('price_overview')),
            lowest_price=None,
            release_date=release.get('date') if isinstance(release, dict) else None,
        )

    @staticmethod
    def _build_related(data: Dict[str, Any]) -> Optional[RelatedContentRecord]:
        """Formats a DLC's app data; entries without a name or header image are dropped."""
        if not data.get('name') or not data.get('header_image'):
            return None
        app_id = str(data.get('steam_appid') or '')
        regional = regional_price_from_overview(data.get('price_overview'))
        return RelatedContentRecord(
            deal_id=f"{STEAM_DLC_DEAL_PREFIX}{app_id}",
            title=data['name'],
            normal_price=minor_to_major(regional['initial_minor']) if regional else '0',
            sale_price=minor_to_major(regional['final_minor']) if regional else '0',
            savings_percent=float(regional['discount_percent']) if regional else 0.0,
            thumbnail_url=data['header_image'],
            external_app_id=app_id or None,
            regional_price=regional,
        )

    async def _fetch_related_details(self, dlc_app_id: Any) -> Optional[Dict[str, Any]]:
        result = await self._store.fetch_app_details(str(dlc_app_id))
        return result.payload if result.ok else None

    async def fetch_related(self, data: Dict[str, Any]) -> List[RelatedContentRecord]:
        dlc_ids = list(data.get('dlc') or [])[:self.max_related]
        if not dlc_ids:
            logger.info(f"[{self.__class__.__name__}] No DLC listed for '{data.get('name')}'.")
            return []

        logger.info(f"[{self.__class__.__name__}] Found {len(dlc_ids)} DLC App IDs for '{data.get('name')}'.")
        details = await run_bounded(dlc_ids, self._fetch_related_details, self.max_concurrent)
        related = [record for record in (self._build_related(d) for d in details if d) if record]
        logger.info(f"✅ [{self.__class__.__name__}] Processed {len(related)} DLCs.")
        return related

    async def _lowest_price(self, app_id: str) -> Optional[LowestPrice]:
        if self._aggregator is None:
            return None
        return await self._aggregator.fetch_lowest_price(app_id)

    async def resolve(self, app_id: str) -> Resolution:
        """
        Returns `(detail, related)`. A failed detail fetch yields `(None, [])`;
        failed DLC lookups only shrink the related list.
        """
        result = await self._store.fetch_app_details(app_id, retries=DETAIL_RETRIES, retry_delay=DETAIL_RETRY_DELAY)
        if not result.ok:
            logger.error(f"❌ [{self.__class__.__name__}] Could not load details for App ID {app_id} ({result.status.value}).")
            return None, []

        detail = self._build_detail(app_id, result.payload)
        lowest, related = await asyncio.gather(
            self._lowest_price(app_id),
            self.fetch_related(result.payload),
            return_exceptions=True
        )
        if isinstance(related, BaseException):
            logger.warning(f"⚠️ [{self.__class__.__name__}] Related content failed for {app_id}: {related}")
            related = []
        if isinstance(lowest, BaseException):
            logger.warning(f"⚠️ [{self.__class__.__name__}] Lowest price lookup failed for {app_id}: {lowest}")
        else:
            detail['lowest_price'] = lowest

        logger.info(f"✅ [{self.__class__.__name__}] Resolved '{detail['title']}' with {len(related)} DLCs.")
        return detail, related

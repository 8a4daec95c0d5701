# ===== IMPORTS & DEPENDENCIES =====
import asyncio
import logging
from typing import Callable, List, Optional

from gamesale.enrichment.genre_enricher import GenreEnricher
from gamesale.enrichment.price_enricher import PriceEnricher
from gamesale.filters.listing_filter import apply_filters, validate_filters
from gamesale.models.listing import DetailRecord, Listing, RelatedContentRecord
from gamesale.services.detail_resolver import DetailResolver
from gamesale.sources.cheapshark import CheapSharkSource
from gamesale.sources.exchange_rates import ExchangeRateSource
from gamesale.utils.currency import display_price
from gamesale.config import ALL_FILTER, DEFAULT_EXCHANGE_RATE, PAGE_SLICE_SIZE

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

FeedListener = Callable[[List[Listing], List[Listing]], None]

# ===== CORE BUSINESS LOGIC =====
class DealsFeed:
    """
    The working set behind the sale list.

    A refresh fetches the aggregator's candidate pool once; `load_more` then
    slices the pool `page_size` listings at a time and prices only that slice.
    Listeners registered with `subscribe` receive `(working_set, filtered)`
    whenever either changes.
    """

    def __init__(
        self,
        aggregator: CheapSharkSource,
        price_enricher: PriceEnricher,
        genre_enricher: GenreEnricher,
        detail_resolver: DetailResolver,
        exchange_rates: Optional[ExchangeRateSource] = None,
        page_size: int = PAGE_SLICE_SIZE
    ):
        self._aggregator = aggregator
        self._price_enricher = price_enricher
        self._genre_enricher = genre_enricher
        self._detail_resolver = detail_resolver
        self._exchange_rates = exchange_rates
        self.page_size = page_size
        self._listeners: List[FeedListener] = []

        self.candidates: List[Listing] = []
        self.working_set: List[Listing] = []
        self.filtered: List[Listing] = []
        self.page = 0
        self.has_more = True
        self.loading = False
        self.loading_more = False
        self.price_filter = ALL_FILTER
        self.genre_filter = ALL_FILTER
        self.exchange_rate = DEFAULT_EXCHANGE_RATE

        self.detail: Optional[DetailRecord] = None
        self.related: List[RelatedContentRecord] = []
        self.loading_detail = False

    # --- Publishing ---

    def subscribe(self, listener: FeedListener) -> None:
        self._listeners.append(listener)

    def _publish(self) -> None:
        for listener in self._listeners:
            listener(self.working_set, self.filtered)

    def _set_working_set(self, working_set: List[Listing]) -> None:
        self.working_set = working_set
        self.filtered = apply_filters(working_set, self.price_filter, self.genre_filter)
        self._publish()

    def _merge_genres(self, backfilled: List[Listing]) -> bool:
        """
        Copies genres from `backfilled` onto the current working set by deal id.
        The backfill runs on a snapshot, so listings appended or replaced since
        it started are kept as they are now. Returns True if anything changed.
        """
        genres_by_deal = {
            listing.get('deal_id'): listing['genres']
            for listing in backfilled
            if listing.get('genres') is not None
        }
        merged: List[Listing] = []
        changed = False
        for listing in self.working_set:
            genres = genres_by_deal.get(listing.get('deal_id'))
            if genres is not None and listing.get('genres') is None:
                listing = {**listing, 'genres': genres}  # type: ignore[misc]
                changed = True
            merged.append(listing)

        if changed:
            self._set_working_set(merged)
        return changed

    def _on_genre_progress(self, backfilled: List[Listing], filtered: List[Listing]) -> None:
        if not self._merge_genres(backfilled):
            logger.debug(f"[{self.__class__.__name__}] Genre batch matched no current listings.")

    # --- Paging ---

    async def _load_page(self, page_number: int) -> List[Listing]:
        if not self.candidates:
            self.candidates = await self._aggregator.fetch_candidates()

        start = page_number * self.page_size
        page_slice = self.candidates[start:start + self.page_size]
        logger.info(f"[{self.__class__.__name__}] Loading page {page_number}, items {start}-{start + len(page_slice)} of {len(self.candidates)}.")
        if not page_slice:
            return []
        return await self._price_enricher.enrich_many(page_slice)

    def _update_has_more(self) -> None:
        if self.page * self.page_size >= len(self.candidates):
            self.has_more = False
            logger.info(f"[{self.__class__.__name__}] No more listings available.")

    async def _refresh_exchange_rate(self) -> None:
        if self._exchange_rates is not None:
            self.exchange_rate = await self._exchange_rates.fetch_rate()

    async def refresh(self) -> List[Listing]:
        """Drops the cached pool and loads the first page from scratch."""
        logger.info(f"🚀 [{self.__class__.__name__}] Refreshing deals...")
        self.loading = True
        self.candidates = []
        self.page = 0
        self.has_more = True
        try:
            first_page, _ = await asyncio.gather(self._load_page(0), self._refresh_exchange_rate())
            self.page = 1
            self._update_has_more()
            self._set_working_set(first_page)
            logger.info(f"🏁 [{self.__class__.__name__}] Refresh done: {len(first_page)} listings.")
            return first_page
        finally:
            self.loading = False

    async def load_more(self) -> List[Listing]:
        """
        Appends the next priced slice. Ignored while another load is in flight
        or once the pool is exhausted.
        """
        if self.loading_more or not self.has_more:
            logger.info(f"[{self.__class__.__name__}] Load more blocked (loading_more={self.loading_more}, has_more={self.has_more}).")
            return []

        self.loading_more = True
        try:
            new_listings = await self._load_page(self.page)
            self.page += 1
            self._update_has_more()
            if not new_listings:
                return []

            self._set_working_set(self.working_set + new_listings)
            logger.info(f"[{self.__class__.__name__}] Now on page {self.page}, {len(self.working_set)} listings total.")
            return new_listings
        finally:
            self.loading_more = False

    # --- Filters ---

    def set_price_filter(self, price_filter: str) -> List[Listing]:
        validate_filters(price_filter, self.genre_filter)
        self.price_filter = price_filter
        self._set_working_set(self.working_set)
        return self.filtered

    async def set_genre_filter(self, genre_filter: str) -> List[Listing]:
        """Applies the genre filter right away, then backfills missing genres and re-filters."""
        validate_filters(self.price_filter, genre_filter)
        self.genre_filter = genre_filter
        self._set_working_set(self.working_set)

        updated = await self._genre_enricher.backfill_genres(
            self.working_set, genre_filter, self.price_filter, on_progress=self._on_genre_progress
        )
        self._merge_genres(updated)
        return self.filtered

    # --- Detail view ---

    async def open_detail(self, listing: Listing) -> Optional[DetailRecord]:
        app_id = listing.get('external_app_id')
        if not app_id:
            logger.warning(f"⚠️ [{self.__class__.__name__}] '{listing.get('title')}' has no detail information.")
            return None

        self.loading_detail = True
        self.detail, self.related = None, []
        try:
            self.detail, self.related = await self._detail_resolver.resolve(app_id)
            return self.detail
        finally:
            self.loading_detail = False

    def close_detail(self) -> None:
        self.detail, self.related = None, []

    def display_price(self, listing: Listing) -> str:
        return display_price(listing, self.exchange_rate)

# ===== IMPORTS & DEPENDENCIES =====
import asyncio
import logging
from typing import Awaitable, Callable, List, Optional

from gamesale.core.executor import run_bounded
from gamesale.filters.listing_filter import apply_filters, validate_filters
from gamesale.models.listing import Genre, Listing
from gamesale.sources.steam_store import SteamStoreClient
from gamesale.config import (
    ALL_FILTER, GENRE_BATCH_SIZE, GENRE_BATCH_DELAY, MAX_CONCURRENT, GENRE_RETRIES, GENRE_RETRY_DELAY
)

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

ProgressCallback = Callable[[List[Listing], List[Listing]], None]

# ===== CORE BUSINESS LOGIC =====
class GenreEnricher:
    """
    Backfills genre labels on demand, when the user picks a genre filter and
    most of the working set has never been looked up.

    Items are fetched in batches; after every batch the updated working set
    and its filtered view are handed to `on_progress` so the caller can show
    partial results while the backfill continues.
    """

    def __init__(
        self,
        store: SteamStoreClient,
        batch_size: int = GENRE_BATCH_SIZE,
        batch_delay: float = GENRE_BATCH_DELAY,
        max_concurrent: int = MAX_CONCURRENT,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ):
        self._store = store
        self.batch_size = batch_size
        self.batch_delay = batch_delay
        self.max_concurrent = max_concurrent
        self._sleep = sleep
        self._in_progress = False

    @property
    def in_progress(self) -> bool:
        return self._in_progress

    @staticmethod
    def has_genres(listing: Listing) -> bool:
        return listing.get('genres') is not None

    async def _fetch_genres(self, listing: Listing) -> Optional[List[Genre]]:
        app_id = listing.get('external_app_id')
        if not app_id:
            return None
        result = await self._store.fetch_app_details(app_id, retries=GENRE_RETRIES, retry_delay=GENRE_RETRY_DELAY)
        if not result.ok:
            logger.debug(f"[{self.__class__.__name__}] No genres for App ID {app_id} ({result.status.value}).")
            return None
        return self._store.parse_genres(result.payload)

    async def backfill_genres(
        self,
        working_set: List[Listing],
        genre_filter: str,
        price_filter: str = ALL_FILTER,
        on_progress: Optional[ProgressCallback] = None
    ) -> List[Listing]:
        """
        Returns the working set with genres attached where they could be fetched.
        Returns the input unchanged for the 'all' filter, while another backfill
        runs, or when more than half of the items already carry genres.
        """
        validate_filters(price_filter, genre_filter)
        if genre_filter == ALL_FILTER:
            return working_set
        if self._in_progress:
            logger.info(f"[{self.__class__.__name__}] Backfill already running. Skipping.")
            return working_set

        with_genres = sum(1 for listing in working_set if self.has_genres(listing))
        if with_genres * 2 > len(working_set):
            logger.debug(f"[{self.__class__.__name__}] {with_genres}/{len(working_set)} items already have genres.")
            return working_set

        self._in_progress = True
        try:
            updated = list(working_set)
            pending = [i for i, listing in enumerate(updated) if not self.has_genres(listing)]
            batches = [pending[i:i + self.batch_size] for i in range(0, len(pending), self.batch_size)]
            logger.info(f"🚀 [{self.__class__.__name__}] Backfilling genres for {len(pending)} items in {len(batches)} batches.")

            for batch_number, batch in enumerate(batches):
                genre_lists = await run_bounded([updated[i] for i in batch], self._fetch_genres, self.max_concurrent)
                for index, genres in zip(batch, genre_lists):
                    if genres is not None:
                        updated[index] = {**updated[index], 'genres': genres}  # type: ignore[misc]

                if on_progress is not None:
                    on_progress(updated, apply_filters(updated, price_filter, genre_filter))

                if batch_number < len(batches) - 1:
                    await self._sleep(self.batch_delay)

            logger.info(f"🏁 [{self.__class__.__name__}] Genre backfill finished.")
            return updated
        finally:
            self._in_progress = False

# ===== IMPORTS & DEPENDENCIES =====
import asyncio
import logging
import sys
import aiohttp
from typing import Optional

# --- Configuration ---
from gamesale.config import LOG_LEVEL

# --- Core Components ---
from gamesale.core.services import ApiServices

# --- Data Sources ---
from gamesale.sources.cheapshark import CheapSharkSource
from gamesale.sources.exchange_rates import ExchangeRateSource
from gamesale.sources.steam_store import SteamStoreClient

# --- Enrichment Services ---
from gamesale.enrichment.price_enricher import PriceEnricher
from gamesale.enrichment.genre_enricher import GenreEnricher

# --- Feed & Detail ---
from gamesale.services.deals_feed import DealsFeed
from gamesale.services.detail_resolver import DetailResolver
from gamesale.services.search import SearchService

# --- Utility Functions ---
from gamesale.utils.game_utils import summarize_by_category

# ===== CONFIGURATION & CONSTANTS =====
logging.basicConfig(
    level=LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)

# ===== INITIALIZATION & STARTUP =====
def build_feed(services: ApiServices) -> DealsFeed:
    """Wires every component of the deals feed around one set of shared services."""
    aggregator = CheapSharkSource(services)
    store = SteamStoreClient(services)
    return DealsFeed(
        aggregator=aggregator,
        price_enricher=PriceEnricher(store),
        genre_enricher=GenreEnricher(store, sleep=services.sleep),
        detail_resolver=DetailResolver(store, aggregator),
        exchange_rates=ExchangeRateSource(services),
    )


def build_search(services: ApiServices) -> SearchService:
    return SearchService(CheapSharkSource(services), PriceEnricher(SteamStoreClient(services)))


async def run_search(services: ApiServices, query: str) -> None:
    search = build_search(services)
    results = await search.search(query)
    logger.info(f"🔎 {len(results)} results for '{query}'")
    for listing in results[:10]:
        logger.info(f"  [{listing.get('category')}] {listing.get('title')} - {listing.get('sale_price')} (-{listing.get('savings_percent'):g}%)")


async def main(query: Optional[str] = None):
    """Loads the first two pages of Steam sales and logs a summary, or runs a title search."""
    async with aiohttp.ClientSession() as session:
        services = ApiServices.create(session)
        if query:
            await run_search(services, query)
            return

        feed = build_feed(services)
        try:
            await feed.refresh()
            await feed.load_more()
        except Exception as e:
            logger.critical(f"🔥🔥🔥 A critical error occurred while loading deals: {e}", exc_info=True)
            return

        stats = summarize_by_category(feed.working_set)
        logger.info(
            f"📊 {len(feed.working_set)} listings loaded: "
            + ", ".join(f"{category} {values['count']} (avg {values['avg_savings']}%)" for category, values in stats.items())
        )
        for listing in feed.filtered[:10]:
            logger.info(f"  [{listing.get('category')}] {listing.get('title')} - {feed.display_price(listing)} (-{listing.get('savings_percent'):g}%)")

def cli() -> None:
    asyncio.run(main(" ".join(sys.argv[1:]) or None))

if __name__ == "__main__":
    cli()

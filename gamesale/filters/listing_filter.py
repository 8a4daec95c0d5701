# ===== IMPORTS & DEPENDENCIES =====
import logging
from typing import Iterable, List, Sequence

from gamesale.config import ALL_FILTER, PRICE_BUCKETS, GENRE_KEYWORDS
from gamesale.models.listing import Listing

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

PRICE_FILTERS = [ALL_FILTER, *PRICE_BUCKETS]
GENRE_FILTERS = [ALL_FILTER, *GENRE_KEYWORDS]

# ===== CORE BUSINESS LOGIC =====

def regional_final_minor(listing: Listing) -> int:
    """Regional final price in minor units; listings without one count as 0 (cheapest bucket)."""
    regional = listing.get('regional_price')
    if not regional:
        return 0
    return int(regional.get('final_minor') or 0)


def matches_price(listing: Listing, price_filter: str) -> bool:
    if price_filter == ALL_FILTER:
        return True
    low, high = PRICE_BUCKETS[price_filter]
    price = regional_final_minor(listing)
    return price >= low and (high is None or price < high)


def matches_genre(listing: Listing, genre_keywords: Sequence[str]) -> bool:
    """True if any of the listing's genre labels contains any keyword. No genres never matches."""
    genres = listing.get('genres') or []
    labels = [(genre.get('label') or '').lower() for genre in genres]
    return any(keyword in label for label in labels for keyword in genre_keywords)


def validate_filters(price_filter: str, genre_filter: str) -> None:
    if price_filter not in PRICE_FILTERS:
        raise ValueError(f"Unknown price filter: {price_filter!r}")
    if genre_filter not in GENRE_FILTERS:
        raise ValueError(f"Unknown genre filter: {genre_filter!r}")


def apply_filters(items: Iterable[Listing], price_filter: str = ALL_FILTER, genre_filter: str = ALL_FILTER) -> List[Listing]:
    """
    Returns the listings matching both the price bucket and the genre key.

    A pure function of its arguments, so applying it to its own output gives
    the same list back.
    """
    validate_filters(price_filter, genre_filter)
    items = list(items)
    if price_filter == ALL_FILTER and genre_filter == ALL_FILTER:
        return items

    genre_keywords = [kw.lower() for kw in GENRE_KEYWORDS.get(genre_filter, [])]
    filtered = [
        item for item in items
        if matches_price(item, price_filter)
        and (genre_filter == ALL_FILTER or matches_genre(item, genre_keywords))
    ]
    logger.debug(f"[apply_filters] price={price_filter} genre={genre_filter}: {len(items)} -> {len(filtered)}")
    return filtered

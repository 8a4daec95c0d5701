# ===== TYPES & INTERFACES =====

from typing import Any, Dict, List, Literal, Optional, TypedDict

Category = Literal['Game', 'DLC', 'Bundle']


class RegionalPrice(TypedDict, total=False):
    """
    Currency-specific price tuple for one storefront region, as reported by
    Steam's `price_overview`. Amounts are in minor units (e.g. VND * 100).
    """
    currency: str
    initial_minor: int
    final_minor: int
    discount_percent: int
    initial_formatted: str
    final_formatted: str


class Genre(TypedDict):
    id: str
    label: str


class Classification(TypedDict):
    category: Category
    is_dlc: bool
    is_bundle: bool


class Listing(TypedDict, total=False):
    """
    A discounted offer flowing through the feed. `total=False` because a
    listing starts as a bare aggregator row and is enriched step by step.

    Attributes:
        deal_id (str): Unique per listing instance. `steam_<app id>` once the
            storefront price has been attached.
        title (str): Display title as given by the aggregator.
        normal_price (str): Decimal string, source currency (USD from the
            aggregator, major units of the regional currency after enrichment).
        sale_price (str): Decimal string, same currency as `normal_price`.
        savings_percent (float): 0-100, may be fractional.
        thumbnail_url (str): Small capsule image.
        store_id (str): Aggregator store identifier ('1' is Steam).
        external_app_id (Optional[str]): Steam app id (or aggregator game id).

        regional_price (Optional[RegionalPrice]): Authoritative storefront price.
        category (Category): Derived by keyword heuristics, not authoritative.
        is_dlc (bool): Mirrors `category == 'DLC'`.
        is_bundle (bool): Mirrors `category == 'Bundle'`.
        genres (Optional[List[Genre]]): Populated lazily by the genre backfill.
    """
    deal_id: str
    title: str
    normal_price: str
    sale_price: str
    savings_percent: float
    thumbnail_url: str
    store_id: str
    external_app_id: Optional[str]

    regional_price: Optional[RegionalPrice]
    category: Category
    is_dlc: bool
    is_bundle: bool
    genres: Optional[List[Genre]]


class LowestPrice(TypedDict):
    price: str
    date: int


class DetailRecord(TypedDict, total=False):
    """Full descriptive data for one listing, resolved when the detail view opens."""
    external_app_id: str
    title: str
    hero_image_url: str
    description: str
    screenshots: List[str]
    genres: List[Genre]
    developers: List[str]
    publishers: List[str]
    regional_price: Optional[RegionalPrice]
    lowest_price: Optional[LowestPrice]
    release_date: Optional[str]


class RelatedContentRecord(TypedDict, total=False):
    """A DLC entry scoped to one parent title."""
    deal_id: str
    title: str
    normal_price: str
    sale_price: str
    savings_percent: float
    thumbnail_url: str
    external_app_id: Optional[str]
    regional_price: Optional[RegionalPrice]


# ===== HELPERS =====

def regional_price_from_overview(overview: Optional[Dict[str, Any]]) -> Optional[RegionalPrice]:
    """Converts a Steam `price_overview` block into a RegionalPrice, or None if unusable."""
    if not isinstance(overview, dict):
        return None
    try:
        initial = int(overview['initial'])
        final = int(overview['final'])
    except (KeyError, TypeError, ValueError):
        return None

    currency = overview.get('currency', '')
    return RegionalPrice(
        currency=currency,
        initial_minor=initial,
        final_minor=final,
        discount_percent=int(overview.get('discount_percent') or 0),
        initial_formatted=overview.get('initial_formatted') or f"{minor_to_major(initial)} {currency}".strip(),
        final_formatted=overview.get('final_formatted') or f"{minor_to_major(final)} {currency}".strip(),
    )


def minor_to_major(amount_minor: int) -> str:
    """Renders a minor-unit amount as a decimal string in major units (150000 -> '1500')."""
    if amount_minor % 100:
        return f"{amount_minor / 100:.2f}"
    return str(amount_minor // 100)


def effective_discount(listing: Listing) -> float:
    """The regional discount when a storefront price is attached, else the aggregator savings."""
    regional = listing.get('regional_price')
    if regional:
        return float(regional.get('discount_percent') or 0)
    return float(listing.get('savings_percent') or 0)

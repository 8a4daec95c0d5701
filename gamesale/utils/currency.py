# ===== IMPORTS & DEPENDENCIES =====
import logging

from gamesale.config import LOCAL_CURRENCY
from gamesale.models.listing import Listing
from gamesale.utils.game_utils import parse_price

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

# ===== UTILITY FUNCTIONS =====

def format_local_price(usd_amount, rate: float, currency: str = LOCAL_CURRENCY) -> str:
    """Converts a USD amount into the local currency, e.g. '1.234.000 VND' (vi-VN grouping, no decimals)."""
    local_amount = round(parse_price(usd_amount) * rate)
    grouped = f"{local_amount:,}".replace(',', '.')
    return f"{grouped} {currency}"


def display_price(listing: Listing, rate: float, currency: str = LOCAL_CURRENCY) -> str:
    """Prefers the storefront's own formatted regional price; otherwise converts the aggregator price."""
    regional = listing.get('regional_price')
    if regional and regional.get('final_formatted'):
        return regional['final_formatted']
    return format_local_price(listing.get('sale_price'), rate, currency)


def display_normal_price(listing: Listing, rate: float, currency: str = LOCAL_CURRENCY) -> str:
    regional = listing.get('regional_price')
    if regional and regional.get('initial_formatted'):
        return regional['initial_formatted']
    return format_local_price(listing.get('normal_price'), rate, currency)

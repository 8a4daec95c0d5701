# ===== IMPORTS & DEPENDENCIES =====
import re
import logging
from typing import Any, Dict, Iterable, Optional

from bs4 import BeautifulSoup

from gamesale.config import BUNDLE_KEYWORDS, DLC_KEYWORDS
from gamesale.models.listing import Classification, Listing

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

# ===== UTILITY FUNCTIONS =====

def classify_content(title: str) -> Classification:
    """
    Classifies a title as a Bundle, DLC or Game by case-insensitive keyword match.
    Bundle keywords are checked first; a title matching none of them falls back to Game.
    """
    title_lower = (title or '').lower()

    if any(keyword in title_lower for keyword in BUNDLE_KEYWORDS):
        return Classification(category='Bundle', is_dlc=False, is_bundle=True)
    # " - " also matches subtitled base games ("Batman - Arkham Knight")
    if any(keyword in title_lower for keyword in DLC_KEYWORDS):
        return Classification(category='DLC', is_dlc=True, is_bundle=False)
    return Classification(category='Game', is_dlc=False, is_bundle=False)


def parse_price(value: Any) -> float:
    """Parses a decimal price or percentage string, returning 0.0 for anything unparseable."""
    if value is None:
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    match = re.search(r'-?\d+(?:\.\d+)?', str(value).replace(',', ''))
    return float(match.group(0)) if match else 0.0


def external_id_of(row: Dict[str, Any]) -> Optional[str]:
    """The aggregator row's Steam app id, falling back to its own game id."""
    value = row.get('steamAppID') or row.get('gameID')
    return str(value) if value else None


def summarize_by_category(listings: Iterable[Listing]) -> Dict[str, Dict[str, float]]:
    """Counts listings and averages their savings per category."""
    totals: Dict[str, Dict[str, float]] = {
        category: {'count': 0, 'avg_savings': 0.0} for category in ('Game', 'DLC', 'Bundle')
    }
    for listing in listings:
        bucket = totals.setdefault(listing.get('category', 'Game'), {'count': 0, 'avg_savings': 0.0})
        bucket['count'] += 1
        bucket['avg_savings'] += float(listing.get('savings_percent') or 0)

    for bucket in totals.values():
        if bucket['count']:
            bucket['avg_savings'] = round(bucket['avg_savings'] / bucket['count'], 1)
    return totals


def sanitize_html(html_text: str) -> str:
    """
    Removes all HTML tags from a string, returning only the clean text.
    """
    if not html_text: return ""
    soup = BeautifulSoup(html_text, "lxml")
    text = soup.get_text(separator=' ', strip=True)
    text = re.sub(r'\s\s+', ' ', text)
    return text

# ===== IMPORTS & DEPENDENCIES =====
import logging
from typing import Any, Dict, List

from gamesale.core.base_client import BaseWebClient
from gamesale.core.services import ApiServices
from gamesale.models.listing import Genre
from gamesale.models.result import FetchResult
from gamesale.config import STEAM_API_URL, STEAM_REGION, STEAM_LANGUAGE, PRICE_RETRIES, PRICE_RETRY_DELAY

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

# ===== CORE BUSINESS LOGIC =====
class SteamStoreClient(BaseWebClient):
    """Reads app details and regional prices from Steam's appdetails API."""

    def __init__(self, services: ApiServices, region: str = STEAM_REGION, language: str = STEAM_LANGUAGE):
        super().__init__(services)
        self.region = region
        self.language = language

    def cache_key(self, app_id: str) -> str:
        return f"appdetails:{self.region}:{app_id}"

    def _parse_steam_api_response(self, app_id: str, response_data: Any) -> FetchResult:
        """Unwraps `{app_id: {success, data}}` into the app's data block."""
        if not isinstance(response_data, dict):
            logger.warning(f"[{self.__class__.__name__}] Steam API response for App ID {app_id} is not an object.")
            return FetchResult.malformed()

        entry = response_data.get(str(app_id))
        if not isinstance(entry, dict) or not entry.get('success'):
            logger.warning(f"[{self.__class__.__name__}] Steam API response for App ID {app_id} was unsuccessful or empty.")
            return FetchResult.not_found()

        data = entry.get('data')
        if not isinstance(data, dict):
            return FetchResult.malformed()
        return FetchResult.success(data)

    async def fetch_app_details(
        self,
        app_id: str,
        retries: int = PRICE_RETRIES,
        retry_delay: float = PRICE_RETRY_DELAY
    ) -> FetchResult:
        """Fetches one app's data block through the rate limiter and the response cache."""
        result = await self._fetch(
            STEAM_API_URL,
            params={'appids': app_id, 'cc': self.region, 'l': self.language},
            cache_key=self.cache_key(app_id),
            retries=retries,
            retry_delay=retry_delay,
            rate_limited=True
        )
        if not result.ok:
            return result
        return self._parse_steam_api_response(str(app_id), result.payload)

    @staticmethod
    def parse_genres(details: Dict[str, Any]) -> List[Genre]:
        genres: List[Genre] = []
        for genre in details.get('genres') or []:
            if isinstance(genre, dict) and genre.get('description'):
                genres.append(Genre(id=str(genre.get('id', '')), label=genre['description']))
        return genres

# ===== CONFIGURATION & CONSTANTS =====
import os

# --- General Settings ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "25"))  # seconds

# --- Web & API Headers ---
COMMON_HEADERS = {
    'User-Agent': 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/126.0.0.0 Safari/537.36',
    'Accept-Language': 'en-US,en;q=0.9',
    'Accept': 'application/json, text/plain, */*',
    'Accept-Encoding': 'gzip, deflate, br',
    'Connection': 'keep-alive'
}

# --- Deals Aggregator (CheapShark) ---
CHEAPSHARK_DEALS_URL = "https://www.cheapshark.com/api/1.0/deals"
CHEAPSHARK_GAMES_URL = "https://www.cheapshark.com/api/1.0/games"
STEAM_STORE_ID = "1"
AGGREGATOR_PAGE_COUNT = 10
AGGREGATOR_PAGE_SIZE = 60

# --- Storefront (Steam) ---
STEAM_API_URL = "https://store.steampowered.com/api/appdetails"
STEAM_REGION = os.getenv("STEAM_REGION", "vn")
STEAM_LANGUAGE = os.getenv("STEAM_LANGUAGE", "vietnamese")
STEAM_DEAL_PREFIX = "steam_"
STEAM_DLC_DEAL_PREFIX = "steam_dlc_"

# --- Currency Reference ---
EXCHANGE_RATE_URL = "https://api.exchangerate-api.com/v4/latest/{base}"
LOCAL_CURRENCY = os.getenv("LOCAL_CURRENCY", "VND")
DEFAULT_EXCHANGE_RATE = 25000.0  # VND per USD

# --- Rate Limiting & Retries ---
RATE_LIMIT_MIN_DELAY = 0.15     # seconds between storefront calls
THROTTLE_EXTRA_DELAY = 1.0      # added on HTTP 429 before the normal retry delay
PRICE_RETRIES = 2
PRICE_RETRY_DELAY = 0.5
DETAIL_RETRIES = 2
DETAIL_RETRY_DELAY = 1.0
GENRE_RETRIES = 1
GENRE_RETRY_DELAY = 0.5

# --- Caching ---
RESPONSE_CACHE_TTL = 10 * 60    # 10 minutes
SEARCH_CACHE_TTL = 5 * 60       # 5 minutes

# --- Pipeline ---
MAX_CONCURRENT = 3
MIN_DISCOUNT_PERCENT = 5.0
PAGE_SLICE_SIZE = 10
GENRE_BATCH_SIZE = 5
GENRE_BATCH_DELAY = 0.3
MAX_RELATED_CONTENT = 15
MAX_SCREENSHOTS = 3

# --- Content Classification Keywords ---
# Order matters: Bundle is checked before DLC and the first match wins.
BUNDLE_KEYWORDS = [
    "bundle", "complete edition", "definitive edition", "goty", "game of the year",
    "ultimate edition", "deluxe edition", "gold edition"
]
DLC_KEYWORDS = [
    "dlc", "expansion", "season pass", "add-on", "downloadable content",
    "pack", "chapter", "episode", " - "
]

# --- Filters ---
ALL_FILTER = "all"
# Half-open [low, high) ranges on the regional final price in minor units.
PRICE_BUCKETS = {
    "under100k": (0, 10_000_000),
    "100k-500k": (10_000_000, 50_000_000),
    "500k-1m": (50_000_000, 100_000_000),
    "over1m": (100_000_000, None),
}
# Steam returns localized genre labels, so each key carries both spellings.
GENRE_KEYWORDS = {
    "action": ["action", "hành động"],
    "adventure": ["adventure", "phiêu lưu"],
    "rpg": ["rpg", "nhập vai"],
    "strategy": ["strategy", "chiến thuật", "chiến lược"],
    "simulation": ["simulation", "mô phỏng"],
    "sports": ["sports", "thể thao"],
    "racing": ["racing", "đua xe"],
    "casual": ["casual", "giải trí"],
    "indie": ["indie", "độc lập"],
    "multiplayer": ["massively multiplayer", "nhiều người chơi"],
}

# --- Search ---
SEARCH_MIN_QUERY_LENGTH = 2
SEARCH_PAGE_SIZE = 50
RECENT_SEARCH_LIMIT = 5
DEFAULT_RECENT_SEARCHES = ['Cyberpunk', 'Elden Ring', 'Call of Duty', 'FIFA']
HIGHLIGHT_PAGE_SIZE = 100
HIGHLIGHT_PRICE_MIN_SAVINGS = 10.0
HIGHLIGHT_MIN_SAVINGS = 15.0
HIGHLIGHT_GAME_LIMIT = 20
HIGHLIGHT_DLC_LIMIT = 15

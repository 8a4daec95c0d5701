# tests/fakes.py

"""In-memory stand-ins for the HTTP session, the clock and asyncio.sleep."""

import asyncio
import json
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from gamesale.core.rate_limiter import RateLimiter
from gamesale.core.response_cache import ResponseCache
from gamesale.core.services import ApiServices


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSleep:
    """Records requested delays and advances the clock instead of waiting."""

    def __init__(self, clock: Optional[FakeClock] = None) -> None:
        self.delays: List[float] = []
        self.clock = clock

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        if self.clock is not None:
            self.clock.advance(delay)
        await asyncio.sleep(0)


class FakeResponse:
    """Minimal aiohttp response: a status and a JSON (or raw text) body."""

    def __init__(
        self,
        status: int = 200,
        payload: Any = None,
        text: Optional[str] = None,
    ) -> None:
        self.status = status
        self._text = text if text is not None else json.dumps(payload)

    async def json(self, content_type: Optional[str] = None) -> Any:
        return json.loads(self._text)

    async def __aenter__(self) -> "FakeResponse":
        return self

    async def __aexit__(self, *exc_info: Any) -> bool:
        return False


class _RaisingContext:
    """Context manager that fails on entry, like a refused connection."""

    def __init__(self, exc: BaseException) -> None:
        self._exc = exc

    async def __aenter__(self) -> None:
        raise self._exc

    async def __aexit__(self, *exc_info: Any) -> bool:
        return False


Handler = Callable[[str, Dict[str, Any]], Any]


class FakeSession:
    """Routes every GET through ``handler(url, params)``.

    The handler may return a FakeResponse, an exception instance
    (raised when the request is entered) or any JSON-able value,
    which is served with status 200.
    """

    def __init__(self, handler: Handler) -> None:
        self.handler = handler
        self.calls: List[Tuple[str, Dict[str, Any]]] = []

    def get(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: Any = None,
    ) -> Any:
        params = dict(params or {})
        self.calls.append((url, params))
        outcome = self.handler(url, params)
        if isinstance(outcome, BaseException):
            return _RaisingContext(outcome)
        if isinstance(outcome, FakeResponse):
            return outcome
        return FakeResponse(200, outcome)

    def calls_to(self, url: str) -> List[Dict[str, Any]]:
        return [params for called, params in self.calls if called == url]


def sequence(*outcomes: Any) -> Handler:
    """Handler returning the given outcomes in order, repeating the last."""
    remaining = list(outcomes)

    def _handler(url: str, params: Dict[str, Any]) -> Any:
        if len(remaining) > 1:
            return remaining.pop(0)
        return remaining[0]

    return _handler


def make_services(
    handler: Handler, min_delay: float = 0.15
) -> Tuple[ApiServices, FakeClock]:
    """ApiServices wired to a FakeSession, a fake clock and a recording sleep."""
    clock = FakeClock()
    sleep = FakeSleep(clock)
    services = ApiServices(
        session=FakeSession(handler),  # type: ignore[arg-type]
        rate_limiter=RateLimiter(min_delay, clock=clock, sleep=sleep),
        cache=ResponseCache(clock=clock),
        sleep=sleep,
    )
    return services, clock


# ── Payload builders ────────────────────────────────────


def deal_row(
    app_id: Optional[str],
    title: str,
    savings: float,
    sale: str = "9.99",
    normal: str = "19.99",
    deal_id: Optional[str] = None,
) -> Dict[str, Any]:
    """One CheapShark deal row."""
    return {
        "dealID": deal_id or f"deal-{app_id}",
        "title": title,
        "normalPrice": normal,
        "salePrice": sale,
        "savings": f"{savings:.6f}",
        "thumb": f"https://img.example/{app_id}.jpg",
        "storeID": "1",
        "steamAppID": app_id,
        "gameID": f"g{app_id}" if app_id else None,
    }


def steam_app(
    app_id: str,
    name: str = "Some Game",
    initial: Optional[int] = 20_000_000,
    final: int = 10_000_000,
    discount: int = 50,
    genres: Iterable[str] = (),
    dlc: Iterable[int] = (),
    header_image: Optional[str] = "https://img.example/header.jpg",
    **extra: Any,
) -> Dict[str, Any]:
    """A Steam appdetails ``data`` block."""
    data: Dict[str, Any] = {
        "steam_appid": int(app_id),
        "name": name,
        "short_description": f"<p>About {name}</p>",
        "genres": [
            {"id": str(i), "description": label}
            for i, label in enumerate(genres)
        ],
        "developers": ["Dev Studio"],
        "publishers": ["Pub House"],
        "dlc": list(dlc),
    }
    if header_image:
        data["header_image"] = header_image
    if initial is not None:
        data["price_overview"] = {
            "currency": "VND",
            "initial": initial,
            "final": final,
            "discount_percent": discount,
            "initial_formatted": f"{initial // 100:,}₫".replace(",", "."),
            "final_formatted": f"{final // 100:,}₫".replace(",", "."),
        }
    data.update(extra)
    return data


def steam_handler(
    apps: Dict[str, Dict[str, Any]],
    failing: Iterable[str] = (),
) -> Handler:
    """Serves appdetails for ``apps``; ids in ``failing`` get HTTP 500."""
    failing_ids = set(failing)

    def _handler(url: str, params: Dict[str, Any]) -> Any:
        app_id = str(params.get("appids"))
        if app_id in failing_ids:
            return FakeResponse(500, text="Internal Server Error")
        if app_id not in apps:
            return {app_id: {"success": False}}
        return {app_id: {"success": True, "data": apps[app_id]}}

    return _handler


def router(routes: Dict[str, Handler]) -> Handler:
    """Dispatches by exact URL; unknown URLs get HTTP 404."""

    def _handler(url: str, params: Dict[str, Any]) -> Any:
        if url in routes:
            return routes[url](url, params)
        return FakeResponse(404, text="Not Found")

    return _handler


def deals_pages(pages: Dict[int, List[Dict[str, Any]]]) -> Handler:
    """Serves CheapShark deal pages keyed by ``pageNumber``."""

    def _handler(url: str, params: Dict[str, Any]) -> Any:
        return pages.get(int(params.get("pageNumber", 0)), [])

    return _handler

# tests/test_main.py

"""Tests for component wiring and the command-line entry point."""

import unittest
from unittest.mock import patch

from fakes import FakeSession, deal_row, deals_pages, make_services, router, steam_app, steam_handler

from gamesale.config import CHEAPSHARK_DEALS_URL, STEAM_API_URL
from gamesale.enrichment.genre_enricher import GenreEnricher
from gamesale.main import build_feed, build_search, main
from gamesale.services.deals_feed import DealsFeed
from gamesale.services.search import SearchService


class _SessionContext:
    """Stands in for `aiohttp.ClientSession()` used as an async context manager."""

    def __init__(self, session: FakeSession) -> None:
        self.session = session

    async def __aenter__(self) -> FakeSession:
        return self.session

    async def __aexit__(self, *exc_info) -> bool:
        return False


class TestWiring(unittest.TestCase):

    def test_build_feed(self) -> None:
        services, _ = make_services(lambda url, params: [])
        feed = build_feed(services)

        self.assertIsInstance(feed, DealsFeed)
        self.assertIsInstance(feed._genre_enricher, GenreEnricher)
        self.assertIs(feed._genre_enricher._sleep, services.sleep)
        self.assertEqual(feed.page_size, 10)

    def test_build_search(self) -> None:
        services, _ = make_services(lambda url, params: [])
        self.assertIsInstance(build_search(services), SearchService)


class TestMain(unittest.IsolatedAsyncioTestCase):
    """main() end to end over a fake session."""

    async def test_feed_run(self) -> None:
        session = FakeSession(router({
            CHEAPSHARK_DEALS_URL: deals_pages({0: [deal_row("1", "Game 1", savings=70)]}),
            STEAM_API_URL: steam_handler({"1": steam_app("1", "Game 1")}),
        }))

        with patch("gamesale.main.aiohttp.ClientSession", return_value=_SessionContext(session)):
            with self.assertLogs("gamesale.main", level="INFO") as logs:
                await main()

        self.assertEqual(len(session.calls_to(STEAM_API_URL)), 1)
        self.assertTrue(any("1 listings loaded" in line for line in logs.output))

    async def test_search_run(self) -> None:
        session = FakeSession(router({
            CHEAPSHARK_DEALS_URL: lambda url, params: [deal_row("1", "Portal", savings=0)],
        }))

        with patch("gamesale.main.aiohttp.ClientSession", return_value=_SessionContext(session)):
            with self.assertLogs("gamesale.main", level="INFO") as logs:
                await main("portal")

        self.assertEqual(session.calls_to(CHEAPSHARK_DEALS_URL)[0]["title"], "portal")
        self.assertTrue(any("1 results for 'portal'" in line for line in logs.output))


if __name__ == "__main__":
    unittest.main()

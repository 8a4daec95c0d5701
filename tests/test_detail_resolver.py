# tests/test_detail_resolver.py

"""Tests for the detail view resolver."""

import unittest

from fakes import make_services, router, steam_app, steam_handler

from gamesale.config import CHEAPSHARK_GAMES_URL, STEAM_API_URL
from gamesale.services.detail_resolver import DetailResolver
from gamesale.sources.cheapshark import CheapSharkSource
from gamesale.sources.steam_store import SteamStoreClient


class TestResolve(unittest.IsolatedAsyncioTestCase):
    """resolve(): detail record, related content and failure handling."""

    def _resolver(self, apps, failing=(), games_handler=None):
        routes = {STEAM_API_URL: steam_handler(apps, failing=failing)}
        if games_handler is not None:
            routes[CHEAPSHARK_GAMES_URL] = games_handler
        services, _ = make_services(router(routes))
        aggregator = CheapSharkSource(services) if games_handler is not None else None
        return DetailResolver(SteamStoreClient(services), aggregator), services

    async def test_detail_and_related_content(self) -> None:
        """DLC 202 has no image and 203 fails: only 201 is related."""
        apps = {
            "200": steam_app(
                "200", "Base Game", genres=["Action"], dlc=[201, 202, 203],
                screenshots=[{"path_thumbnail": "t1.jpg", "path_full": "f1.jpg"}, {"path_thumbnail": "t2.jpg"}],
                release_date={"coming_soon": False, "date": "10 Nov, 2015"},
            ),
            "201": steam_app("201", "Base Game - Expansion", initial=5_000_000, final=2_500_000, discount=50),
            "202": steam_app("202", "Base Game - Soundtrack", header_image=None),
        }
        resolver, _ = self._resolver(apps, failing=["203"])

        detail, related = await resolver.resolve("200")

        self.assertEqual(detail["title"], "Base Game")
        self.assertEqual(detail["external_app_id"], "200")
        self.assertEqual(detail["description"], "About Base Game")
        self.assertEqual(detail["screenshots"], ["f1.jpg", "t2.jpg"])
        self.assertEqual(detail["genres"], [{"id": "0", "label": "Action"}])
        self.assertEqual(detail["developers"], ["Dev Studio"])
        self.assertEqual(detail["release_date"], "10 Nov, 2015")
        self.assertEqual(detail["regional_price"]["final_minor"], 10_000_000)
        self.assertIsNone(detail["lowest_price"])

        self.assertEqual(len(related), 1)
        self.assertEqual(related[0]["deal_id"], "steam_dlc_201")
        self.assertEqual(related[0]["sale_price"], "25000")
        self.assertEqual(related[0]["savings_percent"], 50.0)

    async def test_screenshots_capped(self) -> None:
        shots = [{"path_full": f"f{i}.jpg"} for i in range(6)]
        resolver, _ = self._resolver({"200": steam_app("200", screenshots=shots)})

        detail, _ = await resolver.resolve("200")

        self.assertEqual(detail["screenshots"], ["f0.jpg", "f1.jpg", "f2.jpg"])

    async def test_related_content_capped(self) -> None:
        dlc_ids = list(range(300, 320))
        apps = {"200": steam_app("200", dlc=dlc_ids)}
        apps.update({str(i): steam_app(str(i), f"DLC {i}") for i in dlc_ids})
        resolver, services = self._resolver(apps)

        _, related = await resolver.resolve("200")

        self.assertEqual(len(related), 15)
        self.assertEqual([r["external_app_id"] for r in related], [str(i) for i in range(300, 315)])
        self.assertEqual(len(services.session.calls), 16)

    async def test_detail_failure_returns_nothing(self) -> None:
        resolver, services = self._resolver({}, failing=["200"])

        detail, related = await resolver.resolve("200")

        self.assertIsNone(detail)
        self.assertEqual(related, [])
        self.assertEqual(len(services.session.calls), 3)
        self.assertEqual(services.sleep.delays, [1.0, 1.0])

    async def test_unknown_app_returns_nothing(self) -> None:
        resolver, services = self._resolver({})

        self.assertEqual(await resolver.resolve("404"), (None, []))
        self.assertEqual(len(services.session.calls), 1)

    async def test_lowest_price_from_aggregator(self) -> None:
        def _games(url, params):
            if "steamAppID" in params:
                return [{"gameID": "77"}]
            return {"cheapestPriceEver": {"price": "4.99", "date": 1600000000}}

        resolver, _ = self._resolver({"200": steam_app("200")}, games_handler=_games)

        detail, _ = await resolver.resolve("200")

        self.assertEqual(detail["lowest_price"], {"price": "4.99", "date": 1600000000})

    async def test_no_dlc_means_no_related(self) -> None:
        resolver, services = self._resolver({"200": steam_app("200")})

        _, related = await resolver.resolve("200")

        self.assertEqual(related, [])
        self.assertEqual(len(services.session.calls), 1)


if __name__ == "__main__":
    unittest.main()

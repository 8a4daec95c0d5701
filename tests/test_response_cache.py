# tests/test_response_cache.py

"""Tests for the TTL response cache."""

import unittest

from fakes import FakeClock

from gamesale.core.response_cache import ResponseCache


class TestResponseCache(unittest.IsolatedAsyncioTestCase):
    """ResponseCache unit tests."""

    def setUp(self) -> None:
        self.clock = FakeClock()
        self.cache = ResponseCache(ttl=600, clock=self.clock)
        self.calls = 0

    async def _producer(self) -> dict:
        self.calls += 1
        return {"value": self.calls}

    # ── get_or_fetch ─────────────────────────────────────

    async def test_second_call_within_ttl_uses_cache(self) -> None:
        """Producer runs once; both calls see the same payload."""
        first = await self.cache.get_or_fetch("k", self._producer)
        self.clock.advance(599)
        second = await self.cache.get_or_fetch("k", self._producer)
        self.assertEqual(self.calls, 1)
        self.assertEqual(first, second)

    async def test_call_after_ttl_refetches(self) -> None:
        """An entry exactly TTL old is stale."""
        await self.cache.get_or_fetch("k", self._producer)
        self.clock.advance(600)
        second = await self.cache.get_or_fetch("k", self._producer)
        self.assertEqual(self.calls, 2)
        self.assertEqual(second, {"value": 2})

    async def test_keys_are_independent(self) -> None:
        await self.cache.get_or_fetch("a", self._producer)
        await self.cache.get_or_fetch("b", self._producer)
        self.assertEqual(self.calls, 2)
        self.assertEqual(len(self.cache), 2)

    async def test_none_result_not_cached(self) -> None:
        """A None result is returned but the next call retries."""
        async def _nothing() -> None:
            self.calls += 1
            return None

        self.assertIsNone(await self.cache.get_or_fetch("k", _nothing))
        await self.cache.get_or_fetch("k", _nothing)
        self.assertEqual(self.calls, 2)
        self.assertEqual(len(self.cache), 0)

    async def test_empty_result_not_cached(self) -> None:
        async def _empty() -> list:
            self.calls += 1
            return []

        self.assertEqual(await self.cache.get_or_fetch("k", _empty), [])
        self.assertIsNone(self.cache.get("k"))

    # ── get / store / clear ──────────────────────────────

    def test_expired_entry_removed_on_read(self) -> None:
        self.cache.store("k", {"a": 1})
        self.clock.advance(601)
        self.assertIsNone(self.cache.get("k"))
        self.assertEqual(len(self.cache), 0)

    def test_store_overwrites_stale_entry(self) -> None:
        self.cache.store("k", {"a": 1})
        self.clock.advance(601)
        self.cache.store("k", {"a": 2})
        self.assertEqual(self.cache.get("k"), {"a": 2})

    def test_clear_returns_removed_count(self) -> None:
        self.cache.store("a", [1])
        self.cache.store("b", [2])
        self.assertEqual(self.cache.clear(), 2)
        self.assertIsNone(self.cache.get("a"))


if __name__ == "__main__":
    unittest.main()

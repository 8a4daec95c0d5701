# tests/conftest.py

"""Shared pytest fixtures for all tests."""

from collections.abc import Generator
from unittest.mock import patch

import pytest


@pytest.fixture(autouse=True)
def block_network() -> Generator[None, None, None]:
    """Fail loudly if any test reaches a real aiohttp session."""
    with patch(
        "aiohttp.ClientSession._request",
        side_effect=RuntimeError("network access in tests"),
    ):
        yield

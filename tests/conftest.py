"""Pytest configuration and test helpers."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import pytest


# Ensure the application package is importable when running tests without an
# editable install. This mirrors the expected runtime layout where ``app`` sits
# at the project root.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.errors import UpstreamFetchError  # noqa: E402
from app.models import Network, SearchResult, TitleDetail  # noqa: E402


class FakeProvider:
    """In-memory metadata provider recording every call it receives."""

    def __init__(self) -> None:
        self.search_results: list[SearchResult] = []
        self.networks: list[Network] = []
        self.details: dict[str, TitleDetail] = {}
        self.failing_ids: set[str] = set()
        self.delays: dict[str, float] = {}
        self.search_calls: list[str] = []
        self.detail_calls: list[tuple[str, bool]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def search(self, query: str) -> list[SearchResult]:
        self.search_calls.append(query)
        return self.search_results

    async def get_detail(
        self, title_id: str | int, include_sources: bool = False
    ) -> TitleDetail:
        key = str(title_id)
        self.detail_calls.append((key, include_sources))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(key, 0))
            if key in self.failing_ids:
                raise UpstreamFetchError(f"title {key} unavailable", title_id=key)
        finally:
            self.in_flight -= 1
        return self.details.get(key) or TitleDetail(id=int(key), title=f"Title {key}")

    async def list_networks(self) -> list[Network]:
        return self.networks


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO tests to run on asyncio without requiring trio."""

    return "asyncio"


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()

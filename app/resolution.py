"""Selection-aware strategies for producing title details.

Resolvers here look at which fields a caller asked for before deciding
whether the metadata provider needs to be called at all.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Protocol

from .models import Network, SearchResult, TitleDetail
from .selection import FieldSelection, contains_field_anywhere, count_fields_outside

logger = logging.getLogger(__name__)

BASELINE_FIELDS: frozenset[str] = frozenset(
    {"id", "title", "type", "year", "tmdbId", "tmdbType", "poster"}
)
SOURCES_FIELD = "sources"


class MetadataProvider(Protocol):
    """Operations consumed from the external metadata provider."""

    async def search(self, query: str) -> list[SearchResult]: ...

    async def get_detail(
        self, title_id: str | int, include_sources: bool = False
    ) -> TitleDetail: ...

    async def list_networks(self) -> list[Network]: ...


class Strategy(str, Enum):
    LOCAL_DERIVATION = "local-derivation"
    REMOTE_FETCH = "remote-fetch"


@dataclass(frozen=True, slots=True)
class ResolutionDecision:
    strategy: Strategy
    include_sources: bool = False


def decide(
    selection: FieldSelection, baseline: Iterable[str] = BASELINE_FIELDS
) -> ResolutionDecision:
    """Pick local derivation unless a field outside ``baseline`` was requested."""

    if count_fields_outside(selection, baseline) == 0:
        return ResolutionDecision(Strategy.LOCAL_DERIVATION)
    return ResolutionDecision(
        Strategy.REMOTE_FETCH,
        include_sources=contains_field_anywhere(selection, SOURCES_FIELD),
    )


class TitleDetailResolver:
    """Produce a :class:`TitleDetail` as cheaply as the selection allows."""

    def __init__(
        self,
        provider: MetadataProvider,
        baseline: Iterable[str] = BASELINE_FIELDS,
    ) -> None:
        self._provider = provider
        self._baseline = frozenset(baseline)

    async def resolve_from_search_result(
        self, result: SearchResult, selection: FieldSelection
    ) -> TitleDetail:
        decision = decide(selection, self._baseline)
        logger.debug(
            "Resolving details for title %s via %s (sources=%s)",
            result.id,
            decision.strategy.value,
            decision.include_sources,
        )
        if decision.strategy is Strategy.LOCAL_DERIVATION:
            return TitleDetail.from_search_result(result)
        return await self._provider.get_detail(result.id, decision.include_sources)

    async def resolve_by_id(
        self, title_id: str | int, selection: FieldSelection
    ) -> TitleDetail:
        """Fetch a title by bare identifier; there is nothing to derive from."""

        include_sources = contains_field_anywhere(selection, SOURCES_FIELD)
        return await self._provider.get_detail(title_id, include_sources)


class SimilarTitlesResolver:
    """Expand ``similarTitlesIds`` into child details, in the same order."""

    def __init__(self, provider: MetadataProvider, concurrency: int = 8) -> None:
        self._provider = provider
        self._concurrency = max(1, concurrency)

    async def resolve(
        self, detail: TitleDetail, selection: FieldSelection
    ) -> list[TitleDetail]:
        title_ids = list(detail.similar_titles_ids or [])
        if not title_ids:
            return []

        if selection.names() == ("id",):
            return [TitleDetail.stub(title_id) for title_id in title_ids]

        include_sources = contains_field_anywhere(selection, SOURCES_FIELD)
        logger.debug(
            "Fetching %s similar titles of %s (sources=%s)",
            len(title_ids),
            detail.id,
            include_sources,
        )
        semaphore = asyncio.Semaphore(self._concurrency)

        async def fetch(title_id: int) -> TitleDetail:
            async with semaphore:
                return await self._provider.get_detail(title_id, include_sources)

        tasks = [asyncio.ensure_future(fetch(title_id)) for title_id in title_ids]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            raise

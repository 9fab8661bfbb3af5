"""Client for the WatchMode title metadata API."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter, ValidationError

from ..config import Settings
from ..errors import UpstreamFetchError
from ..models import Network, SearchResult, TitleDetail

logger = logging.getLogger(__name__)

# search_type=2 restricts autocomplete results to titles (no people).
TITLE_SEARCH_TYPE = 2

_SEARCH_RESULTS = TypeAdapter(list[SearchResult])
_NETWORKS = TypeAdapter(list[Network])


class WatchModeClient:
    """Thin wrapper around the WatchMode HTTP API.

    Every call is a single attempt; failures surface as
    :class:`~app.errors.UpstreamFetchError`, including calls made while no
    API key is configured.
    """

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient):
        self._settings = settings
        self._client = http_client

    async def search(self, query: str) -> list[SearchResult]:
        """Return the provider's title matches for ``query`` in provider order."""

        payload = await self._get_json(
            "/autocomplete-search/",
            params={"search_value": query, "search_type": TITLE_SEARCH_TYPE},
        )
        results = payload.get("results") if isinstance(payload, dict) else None
        try:
            return _SEARCH_RESULTS.validate_python(results or [])
        except ValidationError as exc:
            logger.warning("WatchMode search for %r returned malformed results", query)
            raise UpstreamFetchError(
                f"Malformed search results for {query!r}"
            ) from exc

    async def get_detail(
        self, title_id: str | int, include_sources: bool = False
    ) -> TitleDetail:
        """Fetch the full detail record of a title."""

        params: dict[str, Any] = {}
        if include_sources:
            params["append_to_response"] = "sources"
            if self._settings.watchmode_regions:
                params["regions"] = ",".join(self._settings.watchmode_regions)

        payload = await self._get_json(
            f"/title/{quote(str(title_id), safe='')}/details/",
            params=params,
            title_id=title_id,
        )
        try:
            return TitleDetail.model_validate(payload)
        except ValidationError as exc:
            logger.warning("WatchMode returned a malformed detail for %s", title_id)
            raise UpstreamFetchError(
                f"Malformed detail payload for title {title_id}", title_id=title_id
            ) from exc

    async def list_networks(self) -> list[Network]:
        """Return every network the provider knows about."""

        payload = await self._get_json("/networks/")
        try:
            return _NETWORKS.validate_python(payload)
        except ValidationError as exc:
            logger.warning("WatchMode returned a malformed network list")
            raise UpstreamFetchError("Malformed network list") from exc

    async def _get_json(
        self,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        title_id: str | int | None = None,
    ) -> Any:
        if not self._settings.watchmode_api_key:
            raise UpstreamFetchError(
                "WatchMode API key is not configured", title_id=title_id
            )
        query = {**(params or {}), "apiKey": self._settings.watchmode_api_key}
        try:
            response = await self._client.get(path, params=query)
        except httpx.HTTPError as exc:
            logger.warning("WatchMode request to %s failed: %s", path, exc)
            raise UpstreamFetchError(
                f"WatchMode request to {path} failed: {exc.__class__.__name__}",
                title_id=title_id,
            ) from exc

        if response.status_code >= 400:
            logger.warning(
                "WatchMode request to %s failed with %s: %s",
                path,
                response.status_code,
                response.text,
            )
            raise UpstreamFetchError(
                f"WatchMode responded with {response.status_code} for {path}",
                title_id=title_id,
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as exc:
            logger.warning("WatchMode returned invalid JSON for %s", path)
            raise UpstreamFetchError(
                f"Invalid JSON returned for {path}", title_id=title_id
            ) from exc

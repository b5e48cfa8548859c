"""TMDB API client - async httpx implementation."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from godseye.domain.entities.media import (
    BrowseMode,
    Catalog,
    DetailRecord,
    MediaKind,
    ProviderPage,
)
from godseye.domain.exceptions import (
    MalformedResponseError,
    MediaNotFoundError,
    ProviderAuthError,
    ProviderHTTPError,
    ProviderUnavailableError,
)
from godseye.domain.ports.metadata import TrendingWindow

log = structlog.get_logger(__name__)

_BASE_URL = "https://api.themoviedb.org/3"

_SEARCH_PATHS: dict[Catalog, str] = {
    Catalog.ALL: "/search/multi",
    Catalog.MOVIES: "/search/movie",
    Catalog.SERIES: "/search/tv",
}

# Single-type endpoints omit media_type; stamp it so one filter fits all.
_SEARCH_STAMP: dict[Catalog, str | None] = {
    Catalog.ALL: None,
    Catalog.MOVIES: "movie",
    Catalog.SERIES: "tv",
}


class HttpxTmdbClient:
    """Async TMDB client using httpx.

    Implements ``MetadataProviderPort`` from domain.ports.metadata.
    Every failure raises a ``ProviderError`` subclass; cancellation is
    never caught here.
    """

    def __init__(
        self,
        *,
        api_key: str,
        http_client: httpx.AsyncClient,
        base_url: str = _BASE_URL,
        language: str = "en-US",
    ) -> None:
        self._api_key = api_key
        self._http = http_client
        self._base_url = base_url.rstrip("/")
        self._language = language

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _params(self, **extra: Any) -> dict[str, Any]:
        """Build query params with api_key and locale."""
        return {"api_key": self._api_key, "language": self._language, **extra}

    async def _get(self, path: str, **extra: Any) -> dict[str, Any]:
        """GET *path* and return the decoded JSON object."""
        url = f"{self._base_url}{path}"
        try:
            resp = await self._http.get(url, params=self._params(**extra))
        except httpx.HTTPError as exc:
            log.warning("tmdb_network_error", path=path, error=str(exc))
            raise ProviderUnavailableError(f"TMDB unreachable: {exc}") from exc

        if resp.status_code == 401:
            log.error("tmdb_api_key_invalid", status=401)
            raise ProviderAuthError(401, path)
        if resp.status_code == 404:
            log.debug("tmdb_resource_not_found", path=path)
            raise MediaNotFoundError(404, path)
        if resp.is_error:
            log.warning("tmdb_http_error", path=path, status=resp.status_code)
            raise ProviderHTTPError(resp.status_code, path)

        try:
            data = resp.json()
        except ValueError as exc:
            raise MalformedResponseError(f"TMDB returned invalid JSON for {path}") from exc
        if not isinstance(data, dict):
            raise MalformedResponseError(f"TMDB returned {type(data).__name__} for {path}")
        return data

    @staticmethod
    def _to_page(
        data: dict[str, Any], path: str, *, stamp: str | None = None
    ) -> ProviderPage:
        """Validate a paged payload; optionally stamp ``media_type`` on each item."""
        results = data.get("results")
        if not isinstance(results, list):
            raise MalformedResponseError(f"TMDB payload for {path} has no results list")
        try:
            page = int(data.get("page", 1))
            total_pages = int(data.get("total_pages", 0))
            total_results = int(data.get("total_results", 0))
        except (TypeError, ValueError) as exc:
            raise MalformedResponseError(
                f"TMDB payload for {path} has non-numeric paging"
            ) from exc

        items = [r for r in results if isinstance(r, dict)]
        if stamp is not None:
            items = [{**r, "media_type": stamp} for r in items]
        return ProviderPage(
            page=page,
            results=items,
            total_pages=total_pages,
            total_results=total_results,
        )

    # ------------------------------------------------------------------
    # Public API (MetadataProviderPort)
    # ------------------------------------------------------------------

    async def search(
        self, query: str, page: int = 1, *, scope: Catalog = Catalog.ALL
    ) -> ProviderPage:
        """Search titles (multi-type, movies or TV depending on *scope*)."""
        path = _SEARCH_PATHS[scope]
        data = await self._get(path, query=query, page=page, include_adult="false")
        return self._to_page(data, path, stamp=_SEARCH_STAMP[scope])

    async def browse(
        self,
        mode: BrowseMode,
        page: int = 1,
        *,
        window: TrendingWindow = "week",
    ) -> ProviderPage:
        """Trending (movies + TV) or popularity-sorted discovery."""
        if mode is BrowseMode.TRENDING:
            path = f"/trending/all/{window}"
            data = await self._get(path, page=page)
            return self._to_page(data, path)

        kind = MediaKind.SERIES if mode is BrowseMode.DISCOVER_SERIES else MediaKind.MOVIE
        path = f"/discover/{kind.provider_type}"
        data = await self._get(
            path, page=page, sort_by="popularity.desc", include_adult="false"
        )
        return self._to_page(data, path, stamp=kind.provider_type)

    async def get_details(self, kind: MediaKind, media_id: int) -> DetailRecord:
        """Full details including credits and videos."""
        path = f"/{kind.provider_type}/{media_id}"
        data = await self._get(path, append_to_response="credits,videos")
        if "id" not in data:
            raise MalformedResponseError(f"TMDB payload for {path} has no id")
        return DetailRecord.from_provider(data, kind)

"""Catalog use case: stateless search/browse/suggest for the HTTP API."""

from __future__ import annotations

import structlog

from godseye.domain.entities.media import (
    PROVIDER_PAGE_CEILING,
    BrowseMode,
    Catalog,
    ResultItem,
    ResultPage,
    build_result_page,
    filter_results,
)
from godseye.domain.exceptions import ProviderError
from godseye.domain.ports.metadata import MetadataProviderPort, TrendingWindow

log = structlog.get_logger(__name__)


class CatalogUseCase:
    """Filtered, clamped result pages backed by the metadata provider.

    Unlike :class:`QueryCoordinator` this keeps no state between calls; each
    HTTP request is answered on its own. Provider failures are logged and
    re-raised for the interface layer to map.
    """

    def __init__(
        self,
        provider: MetadataProviderPort,
        *,
        page_ceiling: int = PROVIDER_PAGE_CEILING,
        suggestion_limit: int = 8,
        suggestion_min_length: int = 2,
    ) -> None:
        self._provider = provider
        self._page_ceiling = page_ceiling
        self._suggestion_limit = suggestion_limit
        self._suggestion_min_length = suggestion_min_length

    def _clamp_page(self, page: int) -> int:
        return max(1, min(page, self._page_ceiling))

    async def search(
        self, query: str, page: int = 1, catalog: Catalog = Catalog.ALL
    ) -> ResultPage:
        """Search by query; blank queries fall back to the catalog's listing.

        Args:
            query: Free text, trimmed before use.
            page: 1-based page, clamped to the provider ceiling.
            catalog: Search scope.
        """
        query = query.strip()
        if not query:
            return await self.browse(catalog.browse_mode, page)

        page = self._clamp_page(page)
        try:
            raw = await self._provider.search(query, page, scope=catalog)
        except ProviderError:
            log.warning(
                "catalog_search_error",
                query=query,
                page=page,
                catalog=catalog.value,
                exc_info=True,
            )
            raise
        return build_result_page(raw, page_ceiling=self._page_ceiling)

    async def browse(
        self, mode: BrowseMode, page: int = 1, window: TrendingWindow = "week"
    ) -> ResultPage:
        page = self._clamp_page(page)
        try:
            raw = await self._provider.browse(mode, page, window=window)
        except ProviderError:
            log.warning(
                "catalog_browse_error", mode=mode.value, page=page, exc_info=True
            )
            raise
        return build_result_page(raw, page_ceiling=self._page_ceiling)

    async def suggest(self, query: str) -> list[ResultItem]:
        """First page of multi-type matches, capped; [] for short input."""
        query = query.strip()
        if len(query) < self._suggestion_min_length:
            return []
        try:
            raw = await self._provider.search(query, 1, scope=Catalog.ALL)
        except ProviderError:
            log.warning("catalog_suggest_error", query=query, exc_info=True)
            raise
        return filter_results(raw.results)[: self._suggestion_limit]

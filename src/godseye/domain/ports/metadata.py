"""Port for the external metadata provider."""

from __future__ import annotations

from typing import Literal, Protocol, runtime_checkable

from godseye.domain.entities.media import (
    BrowseMode,
    Catalog,
    DetailRecord,
    MediaKind,
    ProviderPage,
)

TrendingWindow = Literal["day", "week"]


@runtime_checkable
class MetadataProviderPort(Protocol):
    """Async interface for catalog search, browse and detail lookups.

    Implementations raise ``ProviderError`` subclasses on failure and let
    ``asyncio.CancelledError`` pass through untouched.
    """

    async def search(
        self, query: str, page: int = 1, *, scope: Catalog = Catalog.ALL
    ) -> ProviderPage:
        """Search titles. Single-type scopes stamp ``media_type`` on items."""
        ...

    async def browse(
        self,
        mode: BrowseMode,
        page: int = 1,
        *,
        window: TrendingWindow = "week",
    ) -> ProviderPage:
        """Fetch a default listing (trending or popularity discovery)."""
        ...

    async def get_details(self, kind: MediaKind, media_id: int) -> DetailRecord:
        """Fetch full details (credits + videos) for one title."""
        ...

"""Watch use case: details for one title plus player/asset URLs."""

from __future__ import annotations

import structlog

from godseye.domain.entities.media import MediaKind, WatchPage
from godseye.domain.ports.assets import AssetUrlPort
from godseye.domain.ports.metadata import MetadataProviderPort

log = structlog.get_logger(__name__)


class WatchUseCase:
    def __init__(self, provider: MetadataProviderPort, assets: AssetUrlPort) -> None:
        self._provider = provider
        self._assets = assets

    async def watch(self, kind: MediaKind, media_id: int) -> WatchPage:
        """Fetch details and compose the watch page.

        Raises:
            MediaNotFoundError: The title does not exist.
            ProviderError: Any other provider failure.
        """
        detail = await self._provider.get_details(kind, media_id)
        log.debug("watch_details_loaded", kind=kind.value, media_id=media_id)
        return WatchPage(
            detail=detail,
            embed_url=self._assets.embed_url(kind, media_id),
            poster_url=self._assets.poster_url(detail.poster_path),
            backdrop_url=self._assets.backdrop_url(detail.backdrop_path),
            trailer_url=self._assets.trailer_url(detail.trailer_key),
        )

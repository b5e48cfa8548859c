"""Port for image/player URL templating."""

from __future__ import annotations

from typing import Protocol

from godseye.domain.entities.media import MediaKind


class AssetUrlPort(Protocol):
    """Pure, stateless URL builders. Missing paths give None."""

    def poster_url(self, path: str | None, size: str = "w500") -> str | None: ...

    def backdrop_url(self, path: str | None, size: str = "w1280") -> str | None: ...

    def trailer_url(self, key: str | None) -> str | None: ...

    def embed_url(self, kind: MediaKind, media_id: int) -> str: ...

"""Image, trailer and player URL templating (pure, no I/O)."""

from __future__ import annotations

from dataclasses import dataclass

from godseye.domain.entities.media import MediaKind

_IMAGE_BASE = "https://image.tmdb.org/t/p"
_EMBED_BASE = "https://vidsrc.to/embed"
_YOUTUBE_WATCH = "https://www.youtube.com/watch?v="


@dataclass(frozen=True)
class AssetUrls:
    """Implements ``AssetUrlPort`` from domain.ports.assets."""

    image_base_url: str = _IMAGE_BASE
    embed_base_url: str = _EMBED_BASE

    def poster_url(self, path: str | None, size: str = "w500") -> str | None:
        return self._image(path, size)

    def backdrop_url(self, path: str | None, size: str = "w1280") -> str | None:
        return self._image(path, size)

    def trailer_url(self, key: str | None) -> str | None:
        if not key:
            return None
        return f"{_YOUTUBE_WATCH}{key}"

    def embed_url(self, kind: MediaKind, media_id: int) -> str:
        """External player URL, e.g. ``https://vidsrc.to/embed/tv/1399``."""
        return f"{self.embed_base_url.rstrip('/')}/{kind.provider_type}/{media_id}"

    def _image(self, path: str | None, size: str) -> str | None:
        if not path:
            return None
        return f"{self.image_base_url.rstrip('/')}/{size}{path}"

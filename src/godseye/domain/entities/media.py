"""Domain entities for catalog results and title details.

Pure value objects, no framework dependencies, no I/O.
Provider field variants (``title``/``name``, ``release_date``/``first_air_date``)
are collapsed here, once, so nothing downstream branches on them.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

# TMDB refuses page numbers above this.
PROVIDER_PAGE_CEILING = 500


class MediaKind(str, Enum):
    """Kind of a catalog title."""

    MOVIE = "movie"
    SERIES = "series"

    @property
    def provider_type(self) -> str:
        """TMDB ``media_type`` / path segment for this kind."""
        return "tv" if self is MediaKind.SERIES else "movie"

    @classmethod
    def from_provider(cls, value: Any) -> MediaKind | None:
        """Map a TMDB ``media_type`` to a kind. People and unknowns -> None."""
        if value == "movie":
            return cls.MOVIE
        if value == "tv":
            return cls.SERIES
        return None


class Catalog(str, Enum):
    """Which listing a coordinator drives (search scope + default browse)."""

    ALL = "all"
    MOVIES = "movies"
    SERIES = "series"

    @property
    def browse_mode(self) -> BrowseMode:
        if self is Catalog.MOVIES:
            return BrowseMode.DISCOVER_MOVIES
        if self is Catalog.SERIES:
            return BrowseMode.DISCOVER_SERIES
        return BrowseMode.TRENDING


class BrowseMode(str, Enum):
    """Default listings available without a query."""

    TRENDING = "trending"
    DISCOVER_MOVIES = "discover_movies"
    DISCOVER_SERIES = "discover_series"


def _year(date_str: Any) -> int | None:
    if not isinstance(date_str, str) or len(date_str) < 4:
        return None
    try:
        return int(date_str[:4])
    except ValueError:
        return None


def _rating(value: Any) -> float | None:
    # TMDB reports 0 for titles nobody voted on.
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not value:
        return None
    return float(value)


def _display_title(raw: Mapping[str, Any]) -> str | None:
    title = raw.get("title") or raw.get("name")
    if not isinstance(title, str) or not title.strip():
        return None
    return title


@dataclass(frozen=True)
class ResultItem:
    """A normalized, displayable catalog entry."""

    id: int
    title: str
    kind: MediaKind
    poster_path: str
    year: int | None = None
    rating: float | None = None
    overview: str | None = None
    backdrop_path: str | None = None

    @classmethod
    def from_provider(cls, raw: Mapping[str, Any]) -> ResultItem | None:
        """Build an item from a raw TMDB result.

        Returns None for entries that cannot be displayed: no title, no
        poster, or a kind other than movie/series (e.g. people).
        """
        title = _display_title(raw)
        poster = raw.get("poster_path")
        kind = MediaKind.from_provider(raw.get("media_type"))
        item_id = raw.get("id")
        if title is None or not poster or kind is None:
            return None
        if isinstance(item_id, bool) or not isinstance(item_id, int):
            return None
        return cls(
            id=item_id,
            title=title,
            kind=kind,
            poster_path=poster,
            year=_year(raw.get("release_date") or raw.get("first_air_date")),
            rating=_rating(raw.get("vote_average")),
            overview=raw.get("overview") or None,
            backdrop_path=raw.get("backdrop_path") or None,
        )


@dataclass(frozen=True)
class ProviderPage:
    """One page of raw provider results, before filtering."""

    page: int
    results: list[dict[str, Any]]
    total_pages: int
    total_results: int


@dataclass(frozen=True)
class ResultPage:
    """One page of filtered results; ``total_pages`` already clamped."""

    items: tuple[ResultItem, ...]
    page: int
    total_pages: int
    total_results: int


def filter_results(raw_results: Iterable[Mapping[str, Any]]) -> list[ResultItem]:
    """Drop undisplayable entries and normalize the rest, keeping order."""
    items = []
    for raw in raw_results:
        item = ResultItem.from_provider(raw)
        if item is not None:
            items.append(item)
    return items


def build_result_page(
    provider_page: ProviderPage,
    *,
    page_ceiling: int = PROVIDER_PAGE_CEILING,
) -> ResultPage:
    """Filter a provider page and clamp its page count to the ceiling."""
    return ResultPage(
        items=tuple(filter_results(provider_page.results)),
        page=max(1, provider_page.page),
        total_pages=max(0, min(provider_page.total_pages, page_ceiling)),
        total_results=max(0, provider_page.total_results),
    )


@dataclass(frozen=True)
class DetailRecord:
    """Full metadata for a single title (details/watch view)."""

    id: int
    kind: MediaKind
    title: str
    overview: str | None = None
    poster_path: str | None = None
    backdrop_path: str | None = None
    year: int | None = None
    rating: float | None = None
    vote_count: int = 0
    genres: tuple[str, ...] = ()
    runtime_minutes: int | None = None
    tagline: str | None = None
    status: str | None = None
    imdb_id: str | None = None
    homepage: str | None = None
    cast: tuple[str, ...] = ()
    trailer_key: str | None = None

    @classmethod
    def from_provider(
        cls, raw: Mapping[str, Any], kind: MediaKind, *, cast_limit: int = 10
    ) -> DetailRecord:
        runtime = raw.get("runtime")
        if not runtime:
            episode_times = raw.get("episode_run_time") or []
            runtime = episode_times[0] if episode_times else None

        credits = raw.get("credits") or {}
        cast = tuple(
            member["name"]
            for member in (credits.get("cast") or [])[:cast_limit]
            if member.get("name")
        )

        trailer_key = None
        for video in (raw.get("videos") or {}).get("results") or []:
            if video.get("site") == "YouTube" and video.get("type") == "Trailer":
                trailer_key = video.get("key")
                break

        return cls(
            id=raw["id"],
            kind=kind,
            title=(
                _display_title(raw)
                or raw.get("original_title")
                or raw.get("original_name")
                or ""
            ),
            overview=raw.get("overview") or None,
            poster_path=raw.get("poster_path") or None,
            backdrop_path=raw.get("backdrop_path") or None,
            year=_year(raw.get("release_date") or raw.get("first_air_date")),
            rating=_rating(raw.get("vote_average")),
            vote_count=raw.get("vote_count") or 0,
            genres=tuple(g["name"] for g in raw.get("genres") or [] if g.get("name")),
            runtime_minutes=runtime or None,
            tagline=raw.get("tagline") or None,
            status=raw.get("status") or None,
            imdb_id=raw.get("imdb_id")
            or (raw.get("external_ids") or {}).get("imdb_id")
            or None,
            homepage=raw.get("homepage") or None,
            cast=cast,
            trailer_key=trailer_key,
        )


@dataclass(frozen=True)
class WatchPage:
    """Everything the details/watch view renders for one title."""

    detail: DetailRecord
    embed_url: str
    poster_url: str | None = None
    backdrop_url: str | None = None
    trailer_url: str | None = None

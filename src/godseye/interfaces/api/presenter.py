"""JSON shapes for API responses."""

from __future__ import annotations

from typing import Any

from godseye.domain.entities.media import ResultItem, ResultPage, WatchPage
from godseye.domain.ports.assets import AssetUrlPort


def format_item(item: ResultItem, assets: AssetUrlPort) -> dict[str, Any]:
    return {
        "id": item.id,
        "title": item.title,
        "kind": item.kind.value,
        "year": item.year,
        "rating": item.rating,
        "overview": item.overview,
        "poster_path": item.poster_path,
        "poster_url": assets.poster_url(item.poster_path),
        "backdrop_url": assets.backdrop_url(item.backdrop_path),
    }


def format_page(page: ResultPage, assets: AssetUrlPort, **extra: Any) -> dict[str, Any]:
    return {
        **extra,
        "items": [format_item(item, assets) for item in page.items],
        "page": page.page,
        "total_pages": page.total_pages,
        "total_results": page.total_results,
    }


def format_watch_page(watch: WatchPage) -> dict[str, Any]:
    d = watch.detail
    return {
        "id": d.id,
        "kind": d.kind.value,
        "title": d.title,
        "overview": d.overview,
        "year": d.year,
        "rating": d.rating,
        "vote_count": d.vote_count,
        "genres": list(d.genres),
        "runtime_minutes": d.runtime_minutes,
        "tagline": d.tagline,
        "status": d.status,
        "imdb_id": d.imdb_id,
        "homepage": d.homepage,
        "cast": list(d.cast),
        "poster_url": watch.poster_url,
        "backdrop_url": watch.backdrop_url,
        "trailer_url": watch.trailer_url,
        "embed_url": watch.embed_url,
    }

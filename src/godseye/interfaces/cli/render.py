"""Plain-text rendering of coordinator state for the terminal."""

from __future__ import annotations

from collections.abc import Iterable

from godseye.domain.entities.media import ResultItem, WatchPage
from godseye.domain.entities.query import CoordinatorView, QueryMode


def render_item(item: ResultItem, index: int | None = None) -> str:
    prefix = f"{index:>3}. " if index is not None else "  - "
    year = f" ({item.year})" if item.year is not None else ""
    rating = f"  * {item.rating:.1f}" if item.rating is not None else ""
    return f"{prefix}[{item.kind.value}] {item.title}{year}{rating}  #{item.id}"


def render_summary(view: CoordinatorView) -> str:
    if view.total_results <= 0:
        return "No results."
    searching = view.mode is QueryMode.SEARCH
    verb = "Found" if searching else "Showing"
    noun = "results" if searching else "titles"
    summary = f"{verb} {view.total_results:,} {noun}"
    if view.total_pages > 1:
        summary += f" - page {view.page} of {view.total_pages}"
    return summary


def render_view(view: CoordinatorView) -> str:
    lines = []
    if view.mode is QueryMode.SEARCH:
        lines.append(f'Search: "{view.query}"')
    lines.append(render_summary(view))
    if view.error:
        lines.append(f"! {view.error}")
    lines.extend(render_item(item, i) for i, item in enumerate(view.items, 1))
    return "\n".join(lines)


def render_suggestions(items: Iterable[ResultItem]) -> str:
    lines = [render_item(item) for item in items]
    return "\n".join(lines) if lines else "(no suggestions)"


def render_watch(watch: WatchPage) -> str:
    d = watch.detail
    year = f" ({d.year})" if d.year is not None else ""
    lines = [f"{d.title}{year}  [{d.kind.value}]"]
    if d.tagline:
        lines.append(f'"{d.tagline}"')
    meta = []
    if d.rating is not None:
        meta.append(f"rating {d.rating:.1f} ({d.vote_count} votes)")
    if d.runtime_minutes:
        meta.append(f"{d.runtime_minutes} min")
    if d.status:
        meta.append(d.status)
    if meta:
        lines.append(" | ".join(meta))
    if d.genres:
        lines.append("Genres: " + ", ".join(d.genres))
    if d.cast:
        lines.append("Cast: " + ", ".join(d.cast))
    if d.overview:
        lines.extend(["", d.overview, ""])
    lines.append(f"Watch:   {watch.embed_url}")
    if watch.trailer_url:
        lines.append(f"Trailer: {watch.trailer_url}")
    if watch.poster_url:
        lines.append(f"Poster:  {watch.poster_url}")
    return "\n".join(lines)

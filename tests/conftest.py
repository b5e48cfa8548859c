"""Shared test fixtures for godseye test suite."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any

import pytest

from godseye.domain.entities.media import (
    BrowseMode,
    Catalog,
    DetailRecord,
    MediaKind,
    ProviderPage,
)

# ---------------------------------------------------------------------------
# Raw TMDB payload builders
# ---------------------------------------------------------------------------


def make_movie(item_id: int = 1, title: str = "Dune", **extra: Any) -> dict[str, Any]:
    """Minimal displayable /search/multi movie entry."""
    return {
        "id": item_id,
        "title": title,
        "poster_path": f"/poster-{item_id}.jpg",
        "media_type": "movie",
        "release_date": "2021-09-15",
        "vote_average": 7.8,
        **extra,
    }


def make_series(item_id: int = 2, name: str = "Dark", **extra: Any) -> dict[str, Any]:
    """Minimal displayable /search/multi TV entry."""
    return {
        "id": item_id,
        "name": name,
        "poster_path": f"/poster-{item_id}.jpg",
        "media_type": "tv",
        "first_air_date": "2017-12-01",
        "vote_average": 8.4,
        **extra,
    }


def make_page(
    results: list[dict[str, Any]],
    *,
    page: int = 1,
    total_pages: int = 3,
    total_results: int = 45,
) -> ProviderPage:
    return ProviderPage(
        page=page,
        results=results,
        total_pages=total_pages,
        total_results=total_results,
    )


async def wait_until(predicate: Any = None, *, rounds: int = 50) -> None:
    """Yield to the loop until *predicate()* holds (or a few rounds pass)."""
    for _ in range(rounds):
        if predicate is not None and predicate():
            return
        await asyncio.sleep(0)
    if predicate is not None:
        assert predicate(), "condition not reached"


# ---------------------------------------------------------------------------
# Fake metadata provider
# ---------------------------------------------------------------------------


@dataclass
class ProviderCall:
    """One recorded provider call; ``gate`` releases it when the fake holds."""

    method: str
    query: str
    page: int
    scope: Catalog | BrowseMode
    gate: asyncio.Event = field(default_factory=asyncio.Event)
    cancelled: bool = False


class FakeProvider:
    """In-memory MetadataProviderPort.

    By default every call answers immediately with a page labelled after the
    query (or browse mode) and page number. With ``hold=True`` each call
    waits for ``release(index)``. With ``ignore_cancel=True`` a held call
    swallows cancellation and still answers once released, simulating a
    response that arrives after it was superseded.
    """

    def __init__(
        self,
        *,
        hold: bool = False,
        ignore_cancel: bool = False,
        total_pages: int = 3,
        total_results: int = 45,
    ) -> None:
        self.calls: list[ProviderCall] = []
        self.hold = hold
        self.ignore_cancel = ignore_cancel
        self.total_pages = total_pages
        self.total_results = total_results
        self.error: Exception | None = None
        self.responses: dict[tuple[str, int], ProviderPage] = {}
        self.details: dict[tuple[MediaKind, int], DetailRecord] = {}

    def release(self, index: int) -> None:
        self.calls[index].gate.set()

    def page_for(self, label: str, page: int) -> ProviderPage:
        if (label, page) in self.responses:
            return self.responses[(label, page)]
        results = [
            make_movie(page * 100 + i, f"{label} p{page} #{i}") for i in range(2)
        ]
        return make_page(
            results,
            page=page,
            total_pages=self.total_pages,
            total_results=self.total_results,
        )

    async def _respond(self, call: ProviderCall) -> ProviderPage:
        self.calls.append(call)
        if self.hold:
            try:
                await call.gate.wait()
            except asyncio.CancelledError:
                call.cancelled = True
                if not self.ignore_cancel:
                    raise
                await call.gate.wait()
        if self.error is not None:
            raise self.error
        return self.page_for(call.query, call.page)

    async def search(
        self, query: str, page: int = 1, *, scope: Catalog = Catalog.ALL
    ) -> ProviderPage:
        return await self._respond(ProviderCall("search", query, page, scope))

    async def browse(
        self, mode: BrowseMode, page: int = 1, *, window: str = "week"
    ) -> ProviderPage:
        return await self._respond(ProviderCall("browse", mode.value, page, mode))

    async def get_details(self, kind: MediaKind, media_id: int) -> DetailRecord:
        if self.error is not None:
            raise self.error
        return self.details[(kind, media_id)]


@pytest.fixture()
def raw_movie():
    return make_movie


@pytest.fixture()
def raw_series():
    return make_series


@pytest.fixture()
def provider_page():
    return make_page


@pytest.fixture()
def settle():
    return wait_until


@pytest.fixture()
def provider_factory() -> type[FakeProvider]:
    """FakeProvider class, for tests that need ``hold`` or custom totals."""
    return FakeProvider


@pytest.fixture()
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture()
def dune_detail() -> DetailRecord:
    return DetailRecord(
        id=438631,
        kind=MediaKind.MOVIE,
        title="Dune",
        overview="Paul Atreides leads nomadic tribes.",
        poster_path="/d5NXSklXo0qyIYkgV94XAgMIckC.jpg",
        backdrop_path="/jYEW5xZkZk2WTrdbMGAPFuBqbDc.jpg",
        year=2021,
        rating=7.8,
        vote_count=9000,
        genres=("Science Fiction", "Adventure"),
        runtime_minutes=155,
        cast=("Timothée Chalamet", "Rebecca Ferguson"),
        trailer_key="n9xhJrPXop4",
    )

"""Tests for QueryCoordinator (mode, debounce, supersession, paging)."""

from __future__ import annotations

import asyncio

import pytest

from godseye.application.coordinator import QueryCoordinator
from godseye.domain.entities.media import BrowseMode, Catalog, MediaKind, ResultItem
from godseye.domain.entities.query import (
    FETCH_ERROR_MESSAGE,
    CoordinatorPhase,
    CoordinatorView,
    QueryMode,
)
from godseye.domain.exceptions import ProviderHTTPError, ProviderUnavailableError


def _coordinator(provider, **kwargs) -> QueryCoordinator:
    kwargs.setdefault("debounce_seconds", 0)
    return QueryCoordinator(provider, **kwargs)


def _search_calls(provider) -> list[str]:
    return [c.query for c in provider.calls if c.method == "search"]


# ---------------------------------------------------------------------------
# Ordering and cancellation
# ---------------------------------------------------------------------------


class TestSupersession:
    @pytest.mark.asyncio()
    async def test_late_response_of_superseded_request_is_dropped(
        self, provider_factory, settle
    ) -> None:
        provider = provider_factory(hold=True, ignore_cancel=True)
        coord = _coordinator(provider)

        coord.commit("alpha")
        await settle(lambda: len(provider.calls) == 1)
        coord.commit("beta")
        await settle(lambda: len(provider.calls) == 2)

        # B resolves first, then A arrives late.
        provider.release(1)
        await coord.wait_idle()
        provider.release(0)
        await settle()

        view = coord.view()
        assert provider.calls[0].cancelled is True
        assert view.query == "beta"
        assert [i.title for i in view.items] == ["beta p1 #0", "beta p1 #1"]
        assert view.loading is False

    @pytest.mark.asyncio()
    async def test_only_last_of_many_requests_lands(
        self, provider_factory, settle
    ) -> None:
        provider = provider_factory(hold=True, ignore_cancel=True)
        coord = _coordinator(provider)

        for i, text in enumerate(["a1", "a2", "a3", "a4"]):
            coord.commit(text)
            await settle(lambda n=i: len(provider.calls) == n + 1)

        # Resolve in reverse order.
        for index in reversed(range(4)):
            provider.release(index)
            await settle()

        assert coord.view().query == "a4"
        assert coord.view().items[0].title == "a4 p1 #0"

    @pytest.mark.asyncio()
    async def test_new_query_supersedes_page_change(
        self, provider_factory, settle
    ) -> None:
        provider = provider_factory(hold=True, ignore_cancel=True)
        coord = _coordinator(provider)

        coord.commit("matrix")
        await settle(lambda: len(provider.calls) == 1)
        provider.release(0)
        await coord.wait_idle()

        coord.load_page(2)
        await settle(lambda: len(provider.calls) == 2)
        coord.commit("dune")
        await settle(lambda: len(provider.calls) == 3)

        # The new query answers first; the page-2 response arrives late.
        provider.release(2)
        await coord.wait_idle()
        provider.release(1)
        await settle()

        view = coord.view()
        assert provider.calls[1].cancelled is True
        assert (view.query, view.page) == ("dune", 1)
        assert view.items[0].title == "dune p1 #0"
        assert view.phase is CoordinatorPhase.LOADED

    @pytest.mark.asyncio()
    async def test_clear_supersedes_page_change(self, provider_factory, settle) -> None:
        provider = provider_factory(hold=True, ignore_cancel=True)
        coord = _coordinator(provider)

        coord.commit("matrix")
        await settle(lambda: len(provider.calls) == 1)
        provider.release(0)
        await coord.wait_idle()

        coord.load_page(3)
        await settle(lambda: len(provider.calls) == 2)
        coord.clear()
        await settle(lambda: len(provider.calls) == 3)

        provider.release(1)
        await settle()
        assert coord.view().loading is True

        provider.release(2)
        await coord.wait_idle()

        view = coord.view()
        assert view.mode is QueryMode.BROWSE
        assert view.page == 1
        assert view.items[0].title == "trending p1 #0"

    @pytest.mark.asyncio()
    async def test_cancelled_fetch_sets_no_error_and_keeps_loading(
        self, provider_factory, settle
    ) -> None:
        provider = provider_factory(hold=True)
        coord = _coordinator(provider)
        views: list[CoordinatorView] = []
        coord.subscribe(views.append)

        coord.commit("alpha")
        await settle(lambda: len(provider.calls) == 1)
        coord.commit("beta")
        await settle(lambda: provider.calls[0].cancelled and len(provider.calls) == 2)

        view = coord.view()
        assert view.loading is True
        assert view.error is None
        assert all(v.error is None for v in views)
        assert all(v.loading for v in views)

        provider.release(1)
        await coord.wait_idle()
        assert coord.view().loading is False
        assert coord.view().query == "beta"

    @pytest.mark.asyncio()
    async def test_stale_failure_is_ignored(self, provider_factory, settle) -> None:
        provider = provider_factory(hold=True, ignore_cancel=True)
        coord = _coordinator(provider)

        coord.commit("alpha")
        await settle(lambda: len(provider.calls) == 1)
        coord.commit("beta")
        await settle(lambda: len(provider.calls) == 2)
        provider.release(1)
        await coord.wait_idle()

        provider.error = ProviderUnavailableError("late failure")
        provider.release(0)
        await settle()

        view = coord.view()
        assert view.error is None
        assert view.query == "beta"
        assert view.phase is CoordinatorPhase.LOADED


# ---------------------------------------------------------------------------
# Debounce
# ---------------------------------------------------------------------------


class TestDebounce:
    @pytest.mark.asyncio()
    async def test_rapid_typing_issues_one_fetch_with_final_text(self, provider) -> None:
        coord = _coordinator(provider, debounce_seconds=0.2)

        for text in ["d", "du", "dun", "dune ", "dune"]:
            coord.set_query_text(text)
            await asyncio.sleep(0.005)

        await coord.wait_idle()

        assert _search_calls(provider) == ["dune"]
        assert coord.view().mode is QueryMode.SEARCH

    @pytest.mark.asyncio()
    async def test_raw_text_echoes_immediately(self, provider) -> None:
        coord = _coordinator(provider, debounce_seconds=0.05)

        coord.set_query_text("dun")

        view = coord.view()
        assert view.raw_text == "dun"
        assert view.query == ""
        assert view.phase is CoordinatorPhase.DEBOUNCING
        assert provider.calls == []
        coord.close()

    @pytest.mark.asyncio()
    async def test_committed_query_is_trimmed(self, provider) -> None:
        coord = _coordinator(provider, debounce_seconds=0.01)

        coord.set_query_text("  dune  ")
        await coord.wait_idle()

        assert _search_calls(provider) == ["dune"]
        assert coord.view().raw_text == "  dune  "
        assert coord.view().query == "dune"

    @pytest.mark.asyncio()
    async def test_unchanged_text_does_not_restart_window(self, provider) -> None:
        coord = _coordinator(provider, debounce_seconds=0.01)
        views: list[CoordinatorView] = []
        coord.subscribe(views.append)

        coord.set_query_text("dune")
        coord.set_query_text("dune")

        assert len(views) == 1
        await coord.wait_idle()
        assert _search_calls(provider) == ["dune"]

    @pytest.mark.asyncio()
    async def test_submit_bypasses_pending_debounce(self, provider) -> None:
        coord = _coordinator(provider, debounce_seconds=0.05)

        coord.set_query_text("du")
        coord.submit("dune")
        await coord.wait_idle()
        await asyncio.sleep(0.06)

        assert _search_calls(provider) == ["dune"]
        assert coord.view().raw_text == "dune"

    @pytest.mark.asyncio()
    async def test_clearing_text_returns_to_browse(self, provider) -> None:
        coord = _coordinator(provider, debounce_seconds=0.01)

        coord.set_query_text("dune")
        await coord.wait_idle()
        coord.set_query_text("")
        await coord.wait_idle()

        assert [c.method for c in provider.calls] == ["search", "browse"]
        assert coord.view().mode is QueryMode.BROWSE


# ---------------------------------------------------------------------------
# Mode, paging, clamping, filtering
# ---------------------------------------------------------------------------


class TestModeDerivation:
    @pytest.mark.asyncio()
    @pytest.mark.parametrize("text", ["", "   "])
    async def test_blank_commit_browses(self, provider, text: str) -> None:
        coord = _coordinator(provider)

        coord.commit(text)
        await coord.wait_idle()

        assert coord.view().mode is QueryMode.BROWSE
        assert provider.calls[-1].method == "browse"
        assert provider.calls[-1].scope is BrowseMode.TRENDING

    @pytest.mark.asyncio()
    async def test_text_commit_searches(self, provider) -> None:
        coord = _coordinator(provider)

        coord.commit("matrix")
        await coord.wait_idle()

        assert coord.view().mode is QueryMode.SEARCH
        assert provider.calls[-1].method == "search"
        assert provider.calls[-1].scope is Catalog.ALL

    @pytest.mark.asyncio()
    async def test_catalog_scopes_search_and_browse(self, provider) -> None:
        coord = _coordinator(provider, catalog=Catalog.SERIES)

        coord.mount()
        await coord.wait_idle()
        coord.commit("dark")
        await coord.wait_idle()

        assert provider.calls[0].scope is BrowseMode.DISCOVER_SERIES
        assert provider.calls[1].scope is Catalog.SERIES

    @pytest.mark.asyncio()
    async def test_commit_resets_page(self, provider) -> None:
        coord = _coordinator(provider)

        coord.commit("dune")
        await coord.wait_idle()
        coord.load_page(3)
        await coord.wait_idle()
        coord.commit("matrix")
        await coord.wait_idle()

        assert coord.view().page == 1
        assert provider.calls[-1].page == 1


class TestLoadPage:
    @pytest.mark.asyncio()
    async def test_current_page_is_noop(self, provider) -> None:
        coord = _coordinator(provider)
        coord.mount()
        await coord.wait_idle()

        views: list[CoordinatorView] = []
        coord.subscribe(views.append)
        before = coord.view()
        coord.load_page(1)

        assert len(provider.calls) == 1
        assert views == []
        assert coord.view() == before

    @pytest.mark.asyncio()
    async def test_keeps_mode_and_query(self, provider) -> None:
        coord = _coordinator(provider)

        coord.commit("dune")
        await coord.wait_idle()
        coord.load_page(2)
        await coord.wait_idle()

        call = provider.calls[-1]
        assert (call.method, call.query, call.page) == ("search", "dune", 2)
        assert coord.view().mode is QueryMode.SEARCH
        assert coord.view().page == 2

    @pytest.mark.asyncio()
    async def test_out_of_range_is_clamped(self, provider_factory) -> None:
        provider = provider_factory(total_pages=3)
        coord = _coordinator(provider)
        coord.mount()
        await coord.wait_idle()

        coord.load_page(99)
        await coord.wait_idle()
        assert provider.calls[-1].page == 3

        coord.load_page(0)
        await coord.wait_idle()
        assert provider.calls[-1].page == 1

    @pytest.mark.asyncio()
    async def test_ignored_while_loading(self, provider_factory, settle) -> None:
        provider = provider_factory(hold=True)
        coord = _coordinator(provider)
        coord.mount()
        await settle(lambda: len(provider.calls) == 1)
        provider.release(0)
        await coord.wait_idle()

        coord.commit("dune")
        await settle(lambda: len(provider.calls) == 2)
        coord.load_page(2)

        assert len(provider.calls) == 2
        assert coord.view().page == 1
        provider.release(1)
        await coord.wait_idle()


class TestClampAndFilter:
    @pytest.mark.asyncio()
    async def test_total_pages_clamped_to_ceiling(self, provider_factory) -> None:
        provider = provider_factory(total_pages=10000, total_results=200000)
        coord = _coordinator(provider)

        coord.mount()
        await coord.wait_idle()

        assert coord.view().total_pages == 500
        assert coord.view().total_results == 200000

    @pytest.mark.asyncio()
    async def test_undisplayable_items_are_filtered(
        self, provider, provider_page, raw_movie, raw_series
    ) -> None:
        provider.responses[("trending", 1)] = provider_page(
            [
                raw_movie(1, "Dune"),
                raw_movie(2, ""),
                raw_movie(3, "No Poster", poster_path=None),
                {"id": 4, "name": "Zendaya", "media_type": "person", "poster_path": "/z.jpg"},
                raw_series(5, "Dark"),
            ]
        )
        coord = _coordinator(provider)

        coord.mount()
        await coord.wait_idle()

        assert [i.id for i in coord.view().items] == [1, 5]


# ---------------------------------------------------------------------------
# Errors, lifecycle, observers
# ---------------------------------------------------------------------------


class TestErrors:
    @pytest.mark.asyncio()
    async def test_failure_keeps_last_items(self, provider) -> None:
        coord = _coordinator(provider)
        coord.mount()
        await coord.wait_idle()
        previous = coord.view().items

        provider.error = ProviderHTTPError(500, "/search/multi")
        coord.commit("dune")
        await coord.wait_idle()

        view = coord.view()
        assert view.error == FETCH_ERROR_MESSAGE
        assert view.loading is False
        assert view.items == previous
        assert view.phase is CoordinatorPhase.ERRORED

    @pytest.mark.asyncio()
    async def test_next_fetch_clears_error(self, provider) -> None:
        provider.error = ProviderUnavailableError("down")
        coord = _coordinator(provider)
        coord.mount()
        await coord.wait_idle()
        assert coord.view().error == FETCH_ERROR_MESSAGE

        provider.error = None
        coord.commit("dune")
        assert coord.view().error is None
        await coord.wait_idle()
        assert coord.view().phase is CoordinatorPhase.LOADED


class TestLifecycle:
    @pytest.mark.asyncio()
    async def test_phases(self, provider_factory, settle) -> None:
        provider = provider_factory(hold=True)
        coord = _coordinator(provider, debounce_seconds=0.01)
        assert coord.phase is CoordinatorPhase.IDLE

        coord.set_query_text("dune")
        assert coord.phase is CoordinatorPhase.DEBOUNCING

        await asyncio.sleep(0.05)
        await settle(lambda: len(provider.calls) == 1)
        assert coord.phase is CoordinatorPhase.LOADING

        provider.release(0)
        await coord.wait_idle()
        assert coord.phase is CoordinatorPhase.LOADED

    @pytest.mark.asyncio()
    async def test_clear_returns_to_default_listing(self, provider) -> None:
        coord = _coordinator(provider)
        coord.submit("dune")
        await coord.wait_idle()

        coord.clear()
        await coord.wait_idle()

        view = coord.view()
        assert view.mode is QueryMode.BROWSE
        assert (view.raw_text, view.query, view.page) == ("", "", 1)
        assert provider.calls[-1].method == "browse"

    @pytest.mark.asyncio()
    async def test_close_cancels_and_silences(self, provider_factory, settle) -> None:
        provider = provider_factory(hold=True)
        coord = _coordinator(provider)
        views: list[CoordinatorView] = []
        coord.subscribe(views.append)
        coord.mount()
        await settle(lambda: len(provider.calls) == 1)

        coord.close()
        await settle(lambda: provider.calls[0].cancelled)
        seen = len(views)

        coord.set_query_text("dune")
        coord.commit("dune")
        coord.load_page(2)

        assert len(provider.calls) == 1
        assert len(views) == seen

    @pytest.mark.asyncio()
    async def test_failing_listener_does_not_block_others(self, provider) -> None:
        coord = _coordinator(provider)
        views: list[CoordinatorView] = []

        def _boom(view: CoordinatorView) -> None:
            raise RuntimeError("listener bug")

        coord.subscribe(_boom)
        coord.subscribe(views.append)
        coord.mount()
        await coord.wait_idle()

        assert views[-1].phase is CoordinatorPhase.LOADED

    @pytest.mark.asyncio()
    async def test_unsubscribe(self, provider) -> None:
        coord = _coordinator(provider)
        views: list[CoordinatorView] = []
        unsubscribe = coord.subscribe(views.append)
        unsubscribe()

        coord.mount()
        await coord.wait_idle()

        assert views == []

    def test_rejects_bad_ceiling(self, provider) -> None:
        with pytest.raises(ValueError):
            QueryCoordinator(provider, page_ceiling=0)


class TestScenario:
    @pytest.mark.asyncio()
    async def test_commit_dune(self, provider, provider_page) -> None:
        provider.responses[("dune", 1)] = provider_page(
            [
                {
                    "id": 1,
                    "title": "Dune",
                    "poster_path": "/x.jpg",
                    "media_type": "movie",
                    "vote_average": 8.1,
                }
            ],
            page=1,
            total_pages=3,
            total_results=45,
        )
        coord = _coordinator(provider)

        coord.commit("dune")
        await coord.wait_idle()

        view = coord.view()
        assert view.mode is QueryMode.SEARCH
        assert view.items == (
            ResultItem(
                id=1,
                title="Dune",
                kind=MediaKind.MOVIE,
                poster_path="/x.jpg",
                rating=8.1,
            ),
        )
        assert (view.page, view.total_pages, view.total_results) == (1, 3, 45)
        assert view.loading is False
        assert view.error is None

"""Query coordinator: search-vs-browse mode, debounce, supersession, paging.

One coordinator instance belongs to one view. All public operations are
plain (non-async) calls made from inside a running event loop; they
schedule work and return immediately, and never raise. Observers receive
an immutable :class:`CoordinatorView` after every state change.

Acceptance of a response is gated on its :class:`RequestToken`: a late
response to a superseded request is dropped even if it arrives after the
newer one, so state always reflects the last issued request.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable

import structlog

from godseye.application.debounce import Debouncer
from godseye.application.request_slot import RequestSlot
from godseye.domain.entities.media import (
    PROVIDER_PAGE_CEILING,
    Catalog,
    ResultItem,
    build_result_page,
)
from godseye.domain.entities.query import (
    FETCH_ERROR_MESSAGE,
    CoordinatorPhase,
    CoordinatorView,
    QueryMode,
    QueryState,
    RequestToken,
)
from godseye.domain.ports.metadata import MetadataProviderPort

log = structlog.get_logger(__name__)

Listener = Callable[[CoordinatorView], None]

DEFAULT_DEBOUNCE_SECONDS = 0.3


class QueryCoordinator:
    """Decides what to request, when, and which response wins.

    Args:
        provider: Metadata provider (search + browse).
        catalog: Which search scope / default listing this view drives.
        debounce_seconds: Quiet window before typed text is committed.
        page_ceiling: Highest page the provider serves; ``total_pages``
            is clamped to it.
    """

    def __init__(
        self,
        provider: MetadataProviderPort,
        *,
        catalog: Catalog = Catalog.ALL,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        page_ceiling: int = PROVIDER_PAGE_CEILING,
    ) -> None:
        if page_ceiling < 1:
            raise ValueError("page_ceiling must be >= 1")
        self._provider = provider
        self._catalog = catalog
        self._page_ceiling = page_ceiling

        self._state = QueryState()
        self._items: tuple[ResultItem, ...] = ()
        self._loaded = False
        self._loading = False
        self._error: str | None = None
        self._closed = False

        self._debouncer: Debouncer[str] = Debouncer(
            debounce_seconds, self._on_text_settled, name="query"
        )
        self._slot = RequestSlot("query")
        self._listeners: list[Listener] = []

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    @property
    def phase(self) -> CoordinatorPhase:
        if self._loading:
            return CoordinatorPhase.LOADING
        if self._debouncer.pending:
            return CoordinatorPhase.DEBOUNCING
        if self._error is not None:
            return CoordinatorPhase.ERRORED
        if self._loaded:
            return CoordinatorPhase.LOADED
        return CoordinatorPhase.IDLE

    def view(self) -> CoordinatorView:
        return CoordinatorView(
            items=self._items,
            loading=self._loading,
            error=self._error,
            page=self._state.page,
            total_pages=self._state.total_pages,
            total_results=self._state.total_results,
            mode=self._state.mode,
            query=self._state.committed_query,
            raw_text=self._state.raw_text,
            phase=self.phase,
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener* for state snapshots. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def mount(self) -> None:
        """Start the initial browse listing (page 1)."""
        if self._closed:
            return
        self._fetch()

    def set_query_text(self, text: str) -> None:
        """Echo *text* immediately and (re)start the debounce window."""
        if self._closed or text == self._state.raw_text:
            return
        self._state.raw_text = text
        self._debouncer.trigger(text)
        self._notify()

    def commit(self, text: str) -> None:
        """Commit *text* now: reset to page 1, derive the mode and fetch.

        Cancels any pending debounce so a stale keystroke cannot land later.
        """
        if self._closed:
            return
        self._debouncer.cancel()
        self._commit(text)

    def submit(self, text: str) -> None:
        """Explicit submit from the view: echo and commit, bypassing debounce."""
        if self._closed:
            return
        self._state.raw_text = text
        self.commit(text)

    def load_page(self, page: int) -> None:
        """Switch to *page* of the current query, keeping the mode.

        No-op for the current page or while a fetch is in flight. Out-of-range
        pages are clamped rather than rejected.
        """
        if self._closed:
            return
        upper = self._state.total_pages if self._state.total_pages > 0 else 1
        page = max(1, min(page, upper))
        if page == self._state.page or self._loading:
            return
        self._state.page = page
        self._fetch()

    def clear(self) -> None:
        """Drop the query and go back to the default listing."""
        if self._closed:
            return
        self._debouncer.cancel()
        self._slot.cancel()
        self._state.raw_text = ""
        self._state.committed_query = ""
        self._state.page = 1
        self._state.mode = QueryMode.BROWSE
        self._fetch()

    def close(self) -> None:
        """Unmount: cancel the timer and any in-flight request, stop notifying."""
        if self._closed:
            return
        self._closed = True
        self._debouncer.cancel()
        self._slot.cancel()
        self._listeners.clear()
        log.debug("query_coordinator_closed", catalog=self._catalog.value)

    async def wait_idle(self) -> None:
        """Wait until no debounce is pending and no request is in flight."""
        while self._debouncer.pending or self._slot.in_flight:
            await self._debouncer.wait()
            await self._slot.wait()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _on_text_settled(self, text: str) -> None:
        if not self._closed:
            self._commit(text)

    def _commit(self, text: str) -> None:
        query = text.strip()
        self._state.committed_query = query
        self._state.page = 1
        self._state.mode = QueryMode.for_query(query)
        log.debug("query_committed", query=query, mode=self._state.mode.value)
        self._fetch()

    def _fetch(self) -> None:
        query = self._state.committed_query
        page = self._state.page
        mode = self._state.mode

        self._loading = True
        self._error = None
        token = self._slot.start(lambda t: self._run_fetch(t, query, page, mode))
        log.debug(
            "query_fetch_started",
            generation=token.generation,
            query=query,
            page=page,
            mode=mode.value,
        )
        self._notify()

    async def _run_fetch(
        self, token: RequestToken, query: str, page: int, mode: QueryMode
    ) -> None:
        try:
            if mode is QueryMode.SEARCH:
                raw = await self._provider.search(query, page, scope=self._catalog)
            else:
                raw = await self._provider.browse(self._catalog.browse_mode, page)
            result = build_result_page(raw, page_ceiling=self._page_ceiling)
        except asyncio.CancelledError:
            # Superseded: no state transition at all.
            log.debug("query_fetch_cancelled", generation=token.generation)
            raise
        except Exception:
            if not self._slot.is_current(token):
                log.debug("query_fetch_stale_error", generation=token.generation)
                return
            log.warning(
                "query_fetch_failed",
                query=query,
                page=page,
                mode=mode.value,
                exc_info=True,
            )
            self._error = FETCH_ERROR_MESSAGE
            self._loading = False
            self._notify()
            return

        if not self._slot.is_current(token):
            log.debug("query_fetch_stale", generation=token.generation)
            return

        self._items = result.items
        self._state.page = result.page
        self._state.total_pages = result.total_pages
        self._state.total_results = result.total_results
        self._loaded = True
        self._loading = False
        log.debug(
            "query_fetch_applied",
            query=query,
            page=result.page,
            items=len(result.items),
            total_pages=result.total_pages,
        )
        self._notify()

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.view()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                log.error("query_listener_failed", exc_info=True)

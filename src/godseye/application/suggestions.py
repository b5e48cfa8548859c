"""Search-as-you-type suggestions for the search box.

Independent of :class:`QueryCoordinator`: its own debounce window, its own
request slot, its own tokens. Failures are logged and otherwise ignored.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable

import structlog

from godseye.application.debounce import Debouncer
from godseye.application.request_slot import RequestSlot
from godseye.domain.entities.media import Catalog, ResultItem, filter_results
from godseye.domain.entities.query import RequestToken
from godseye.domain.ports.metadata import MetadataProviderPort

log = structlog.get_logger(__name__)

DEFAULT_SUGGESTION_LIMIT = 8
DEFAULT_MIN_LENGTH = 2


class SuggestionCoordinator:
    """Debounced multi-search suggestions, capped at ``limit`` displayable items.

    Text shorter than ``min_length`` (after trimming) clears and hides the
    list without touching the provider.
    """

    def __init__(
        self,
        provider: MetadataProviderPort,
        *,
        debounce_seconds: float = 0.3,
        limit: int = DEFAULT_SUGGESTION_LIMIT,
        min_length: int = DEFAULT_MIN_LENGTH,
    ) -> None:
        self._provider = provider
        self._limit = limit
        self._min_length = min_length
        self._debouncer: Debouncer[str] = Debouncer(
            debounce_seconds, self._on_text_settled, name="suggestions"
        )
        self._slot = RequestSlot("suggestions")
        self._suggestions: tuple[ResultItem, ...] = ()
        self._loading = False
        self._visible = False
        self._closed = False
        self._on_change: Callable[[], None] | None = None

    @property
    def suggestions(self) -> tuple[ResultItem, ...]:
        return self._suggestions

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def visible(self) -> bool:
        return self._visible

    def on_change(self, callback: Callable[[], None] | None) -> None:
        self._on_change = callback

    def set_query_text(self, text: str) -> None:
        if self._closed:
            return
        if len(text.strip()) < self._min_length:
            self._debouncer.cancel()
            self._slot.cancel()
            self._suggestions = ()
            self._visible = False
            self._loading = False
            self._changed()
            return
        self._debouncer.trigger(text)

    def hide(self) -> None:
        self._visible = False
        self._changed()

    def close(self) -> None:
        self._closed = True
        self._debouncer.cancel()
        self._slot.cancel()
        self._on_change = None

    async def wait_idle(self) -> None:
        while self._debouncer.pending or self._slot.in_flight:
            await self._debouncer.wait()
            await self._slot.wait()

    def _on_text_settled(self, text: str) -> None:
        if self._closed:
            return
        self._loading = True
        query = text.strip()
        self._slot.start(lambda token: self._run_fetch(token, query))
        self._changed()

    async def _run_fetch(self, token: RequestToken, query: str) -> None:
        try:
            raw = await self._provider.search(query, 1, scope=Catalog.ALL)
            items = filter_results(raw.results)[: self._limit]
        except asyncio.CancelledError:
            raise
        except Exception:
            if self._slot.is_current(token):
                log.warning("suggestions_fetch_failed", query=query, exc_info=True)
                self._loading = False
                self._changed()
            return

        if not self._slot.is_current(token):
            return
        self._suggestions = tuple(items)
        self._visible = True
        self._loading = False
        self._changed()

    def _changed(self) -> None:
        if self._on_change is None:
            return
        try:
            self._on_change()
        except Exception:
            log.error("suggestions_listener_failed", exc_info=True)

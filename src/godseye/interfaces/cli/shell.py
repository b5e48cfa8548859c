"""Interactive terminal view driving a live QueryCoordinator.

Plain lines act as typed text (debounced, with suggestions); lines starting
with ``:`` are commands.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

import structlog

from godseye.application.coordinator import QueryCoordinator
from godseye.application.suggestions import SuggestionCoordinator
from godseye.domain.entities.query import CoordinatorPhase, CoordinatorView
from godseye.interfaces.cli.render import render_suggestions, render_view

log = structlog.get_logger(__name__)

ReadLine = Callable[[], Awaitable[str]]
Write = Callable[[str], None]

HELP = """\
Type to search (results follow after a short pause).
  :submit [text]  search now
  :page N         jump to page N
  :next / :prev   page forward / back
  :suggest        show current suggestions
  :clear          back to the default listing
  :quit           leave"""


async def _read_stdin() -> str:
    return await asyncio.to_thread(input, "> ")


class Shell:
    def __init__(
        self,
        coordinator: QueryCoordinator,
        suggestions: SuggestionCoordinator,
        *,
        read_line: ReadLine = _read_stdin,
        write: Write = print,
    ) -> None:
        self._coordinator = coordinator
        self._suggestions = suggestions
        self._read_line = read_line
        self._write = write
        self._awaiting_result = False

    def _on_view(self, view: CoordinatorView) -> None:
        # One print per settled fetch, empty pages included.
        if view.phase is CoordinatorPhase.LOADING:
            self._awaiting_result = True
        elif self._awaiting_result and view.phase in (
            CoordinatorPhase.LOADED,
            CoordinatorPhase.ERRORED,
        ):
            self._awaiting_result = False
            self._write(render_view(view))

    def _handle_command(self, line: str) -> bool:
        """Run a ``:command``. Returns False when the shell should stop."""
        name, _, arg = line[1:].partition(" ")
        arg = arg.strip()
        view = self._coordinator.view()

        if name in ("quit", "q"):
            return False
        if name == "submit":
            self._suggestions.hide()
            self._coordinator.submit(arg or view.raw_text)
        elif name == "page":
            try:
                self._coordinator.load_page(int(arg))
            except ValueError:
                self._write(f"not a page number: {arg!r}")
        elif name == "next":
            self._coordinator.load_page(view.page + 1)
        elif name == "prev":
            self._coordinator.load_page(view.page - 1)
        elif name == "clear":
            self._suggestions.set_query_text("")
            self._coordinator.clear()
        elif name == "suggest":
            self._write(render_suggestions(self._suggestions.suggestions))
        else:
            self._write(HELP)
        return True

    async def run(self) -> None:
        unsubscribe = self._coordinator.subscribe(self._on_view)
        self._write(HELP)
        self._coordinator.mount()
        try:
            while True:
                try:
                    line = await self._read_line()
                except EOFError:
                    break
                if line.startswith(":"):
                    if not self._handle_command(line.strip()):
                        break
                    continue
                self._coordinator.set_query_text(line)
                self._suggestions.set_query_text(line)
        finally:
            unsubscribe()
            self._coordinator.close()
            self._suggestions.close()
            log.debug("shell_closed")

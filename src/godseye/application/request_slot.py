"""Single-occupancy slot for cancellable in-flight requests."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine
from typing import Any

import structlog

from godseye.domain.entities.query import RequestToken

log = structlog.get_logger(__name__)


class RequestSlot:
    """Holds at most one current request and its token.

    Starting a request cancels the previous task and bumps the generation,
    so a response carrying an older token can be recognised as stale even
    if it slips past cancellation (e.g. it already finished awaiting).
    """

    def __init__(self, name: str) -> None:
        self._name = name
        self._generation = 0
        self._task: asyncio.Task[None] | None = None

    @property
    def name(self) -> str:
        return self._name

    @property
    def in_flight(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(
        self,
        run: Callable[[RequestToken], Coroutine[Any, Any, None]],
    ) -> RequestToken:
        """Cancel the current request, mint a token and schedule ``run(token)``."""
        self.cancel()
        token = RequestToken(slot=self._name, generation=self._generation)
        self._task = asyncio.get_running_loop().create_task(
            run(token), name=f"{self._name}-request-{token.generation}"
        )
        return token

    def cancel(self) -> None:
        """Invalidate the current token and cancel its task (if still running)."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
            log.debug(
                "request_cancelled", slot=self._name, generation=self._generation
            )
        self._task = None
        self._generation += 1

    def is_current(self, token: RequestToken) -> bool:
        return token.slot == self._name and token.generation == self._generation

    async def wait(self) -> None:
        """Wait for the current request to settle (finished or cancelled)."""
        task = self._task
        if task is not None:
            await asyncio.wait({task})

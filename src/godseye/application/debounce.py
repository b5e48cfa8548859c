"""Resettable delayed execution on the running event loop."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Generic, TypeVar

import structlog

log = structlog.get_logger(__name__)

T = TypeVar("T")


class Debouncer(Generic[T]):
    """Run *callback* once input has been quiet for *delay* seconds.

    Every ``trigger()`` restarts the window; only the value passed to the
    last call within the window reaches the callback.

    Usage::

        debouncer = Debouncer(0.3, coordinator.commit, name="query")
        debouncer.trigger("dun")
        debouncer.trigger("dune")   # "dun" is dropped
        await debouncer.wait()
    """

    def __init__(
        self, delay: float, callback: Callable[[T], None], *, name: str = "debounce"
    ) -> None:
        if delay < 0:
            raise ValueError("delay must be >= 0")
        self._delay = delay
        self._callback = callback
        self._name = name
        self._task: asyncio.Task[None] | None = None

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def pending(self) -> bool:
        """True while a trigger is waiting for the window to settle."""
        return self._task is not None and not self._task.done()

    def trigger(self, value: T) -> None:
        """Restart the window with *value*. Must be called inside a running loop."""
        self.cancel()
        self._task = asyncio.get_running_loop().create_task(
            self._fire_later(value), name=f"{self._name}-debounce"
        )

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def wait(self) -> None:
        """Wait until the pending window (if any) fired or was cancelled."""
        task = self._task
        if task is not None:
            await asyncio.wait({task})

    async def _fire_later(self, value: T) -> None:
        await asyncio.sleep(self._delay)
        # Detach first so the callback may trigger again.
        self._task = None
        try:
            self._callback(value)
        except Exception:
            log.error("debounce_callback_failed", name=self._name, exc_info=True)

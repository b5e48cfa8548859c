"""Port for persisted user preferences."""

from __future__ import annotations

from typing import Protocol


class ThemeStorePort(Protocol):
    """Persists the single theme preference as a raw string."""

    async def read(self) -> str | None:
        """Return the stored value, or None if nothing was stored."""
        ...

    async def write(self, value: str) -> None:
        ...

    async def aclose(self) -> None:
        ...

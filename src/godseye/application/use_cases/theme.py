"""Theme preference: explicit init, explicit write-through mutation."""

from __future__ import annotations

import structlog

from godseye.domain.entities.preferences import DEFAULT_THEME, Theme
from godseye.domain.ports.preferences import ThemeStorePort

log = structlog.get_logger(__name__)


class ThemeService:
    """Holds the current theme for the process.

    Call :meth:`load` once at startup; until then :attr:`theme` is the
    default. Every change is written to the store before it is returned.
    """

    def __init__(self, store: ThemeStorePort) -> None:
        self._store = store
        self._theme = DEFAULT_THEME

    @property
    def theme(self) -> Theme:
        return self._theme

    async def load(self) -> Theme:
        raw = await self._store.read()
        try:
            self._theme = Theme(raw) if raw is not None else DEFAULT_THEME
        except ValueError:
            log.warning("theme_invalid_stored_value", value=raw)
            self._theme = DEFAULT_THEME
        return self._theme

    async def set(self, theme: Theme) -> Theme:
        await self._store.write(theme.value)
        self._theme = theme
        log.info("theme_changed", theme=theme.value)
        return theme

    async def toggle(self) -> Theme:
        return await self.set(self._theme.toggled)

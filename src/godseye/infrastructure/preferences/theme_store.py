"""Diskcache-backed theme store - SQLite file, no daemon."""

from __future__ import annotations

import asyncio
from pathlib import Path

import structlog
from diskcache import Cache as DiskCache

log = structlog.get_logger(__name__)

THEME_KEY = "gods-eye-theme"


class DiskcacheThemeStore:
    """Async wrapper around ``diskcache.Cache`` for the theme preference.

    Implements ``ThemeStorePort`` from domain.ports.preferences. Disk I/O runs
    via ``asyncio.to_thread``; the cache opens lazily on first access.

    Args:
        directory: Directory holding the SQLite file.
    """

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)
        self._cache: DiskCache | None = None
        self._lock = asyncio.Lock()

    async def __aenter__(self) -> DiskcacheThemeStore:
        await self._open()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def _open(self) -> DiskCache:
        async with self._lock:
            if self._cache is None:
                self._cache = await asyncio.to_thread(DiskCache, str(self.directory))
                log.debug("theme_store_opened", path=str(self.directory))
            return self._cache

    async def read(self) -> str | None:
        cache = await self._open()
        value = await asyncio.to_thread(cache.get, THEME_KEY, default=None)
        return value if isinstance(value, str) else None

    async def write(self, value: str) -> None:
        cache = await self._open()
        await asyncio.to_thread(cache.set, THEME_KEY, value)

    async def aclose(self) -> None:
        if self._cache is not None:
            await asyncio.to_thread(self._cache.close)
            self._cache = None
            log.debug("theme_store_closed", path=str(self.directory))

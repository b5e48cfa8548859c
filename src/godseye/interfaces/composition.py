"""Composition root: dependency injection via FastAPI lifespan."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, cast

import structlog
from fastapi import FastAPI

from godseye.application.use_cases import CatalogUseCase, ThemeService, WatchUseCase
from godseye.infrastructure.composition import (
    create_asset_urls,
    create_http_client,
    create_theme_store,
    create_tmdb_client,
)
from godseye.interfaces.app_state import AppState

log = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan Hook: Initialize and cleanup all resources (DI Composition Root).

    Order matters:
        1. Theme store + service (loads the persisted preference)
        2. HTTP client
        3. TMDB provider (requires the API key; fails startup without it)
        4. Use cases
    """
    state = cast(AppState, app.state)
    config = state.config

    # 1) Theme preference (explicit init: read persisted value or default)
    state.theme_store = create_theme_store(config)
    state.theme_service = ThemeService(state.theme_store)
    theme = await state.theme_service.load()
    log.info("theme_loaded", theme=theme.value)

    # 2) HTTP client (shared resource)
    state.http_client = create_http_client(config)

    try:
        # 3) Provider
        state.provider = create_tmdb_client(config, state.http_client)
        log.info("tmdb_client_initialized", language=config.tmdb_language)

        # 4) Use cases
        state.catalog_uc = CatalogUseCase(
            state.provider,
            page_ceiling=config.search.page_ceiling,
            suggestion_limit=config.search.suggestion_limit,
            suggestion_min_length=config.search.suggestion_min_length,
        )
        state.assets = create_asset_urls(config)
        state.watch_uc = WatchUseCase(state.provider, state.assets)

        log.info("app_startup_complete")
        yield
    finally:
        await state.http_client.aclose()
        log.info("http_client_closed")

        await state.theme_store.aclose()
        log.info("theme_store_closed")

        log.info("app_shutdown_complete")

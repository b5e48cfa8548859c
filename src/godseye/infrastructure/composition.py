"""Factories shared by the HTTP lifespan and the CLI."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
import structlog

from godseye.infrastructure.common.retry_transport import RetryTransport
from godseye.infrastructure.config.schema import AppConfig
from godseye.infrastructure.preferences.theme_store import DiskcacheThemeStore
from godseye.infrastructure.tmdb.assets import AssetUrls
from godseye.infrastructure.tmdb.client import HttpxTmdbClient

log = structlog.get_logger(__name__)


def create_http_client(config: AppConfig) -> httpx.AsyncClient:
    """HTTP client with 429/503 retry and the configured timeout."""
    transport = RetryTransport(
        wrapped=httpx.AsyncHTTPTransport(),
        max_retries=config.http_max_retries,
    )
    client = httpx.AsyncClient(
        transport=transport,
        timeout=httpx.Timeout(config.http_timeout_seconds),
        headers={"User-Agent": config.http_user_agent},
    )
    log.debug(
        "http_client_initialized",
        timeout=config.http_timeout_seconds,
        max_retries=config.http_max_retries,
    )
    return client


def create_tmdb_client(
    config: AppConfig, http_client: httpx.AsyncClient
) -> HttpxTmdbClient:
    """TMDB adapter. Raises ConfigError when no API key is configured."""
    return HttpxTmdbClient(
        api_key=config.require_tmdb_api_key(),
        http_client=http_client,
        base_url=config.tmdb_base_url,
        language=config.tmdb_language,
    )


def create_asset_urls(config: AppConfig) -> AssetUrls:
    return AssetUrls(
        image_base_url=config.tmdb_image_base_url,
        embed_base_url=config.tmdb_embed_base_url,
    )


def create_theme_store(config: AppConfig) -> DiskcacheThemeStore:
    return DiskcacheThemeStore(config.preferences_dir)


@asynccontextmanager
async def open_tmdb_client(config: AppConfig) -> AsyncIterator[HttpxTmdbClient]:
    """Provider with its own HTTP client, closed on exit (CLI use)."""
    http_client = create_http_client(config)
    try:
        yield create_tmdb_client(config, http_client)
    finally:
        await http_client.aclose()

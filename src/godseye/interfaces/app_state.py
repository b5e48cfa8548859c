"""Application state container for FastAPI dependency injection."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
from starlette.datastructures import State

from godseye.infrastructure.config import AppConfig

if TYPE_CHECKING:
    from godseye.application.use_cases import (
        CatalogUseCase,
        ThemeService,
        WatchUseCase,
    )
    from godseye.domain.ports import (
        AssetUrlPort,
        MetadataProviderPort,
        ThemeStorePort,
    )


class AppState(State):
    """FastAPI application state with all DI resources.

    Lifecycle managed by composition.py::lifespan().
    """

    # Configuration
    config: AppConfig

    # Infrastructure
    http_client: httpx.AsyncClient
    theme_store: ThemeStorePort

    # Domain Ports
    provider: MetadataProviderPort
    assets: AssetUrlPort

    # Application Services
    catalog_uc: CatalogUseCase
    watch_uc: WatchUseCase
    theme_service: ThemeService

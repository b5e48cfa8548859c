"""Catalog API endpoints (search, browse, suggestions, details).

A thin backend-for-frontend: the browser never sees the TMDB key, and every
payload is already filtered, normalized and clamped.
"""

from __future__ import annotations

from typing import cast

import structlog
from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from godseye.domain.entities.media import BrowseMode, Catalog, MediaKind
from godseye.domain.entities.query import FETCH_ERROR_MESSAGE, QueryMode
from godseye.domain.exceptions import MediaNotFoundError, ProviderError
from godseye.domain.ports.metadata import TrendingWindow
from godseye.interfaces.api.presenter import format_item, format_page, format_watch_page
from godseye.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/api", tags=["catalog"])

_DETAILS_ERROR_MESSAGE = "Failed to load details"


def _provider_failed(message: str = FETCH_ERROR_MESSAGE) -> JSONResponse:
    return JSONResponse(status_code=502, content={"error": message})


@router.get("/search")
async def search(
    request: Request,
    query: str = "",
    page: int = Query(default=1, ge=1),
    catalog: Catalog = Catalog.ALL,
) -> JSONResponse:
    """Search; a blank query returns the catalog's default listing."""
    state = cast(AppState, request.app.state)
    mode = QueryMode.for_query(query)
    try:
        result = await state.catalog_uc.search(query, page, catalog)
    except ProviderError:
        return _provider_failed()

    payload = format_page(result, state.assets, mode=mode.value, query=query.strip())
    return JSONResponse(content=payload)


@router.get("/browse/{mode}")
async def browse(
    request: Request,
    mode: BrowseMode,
    page: int = Query(default=1, ge=1),
    window: TrendingWindow = "week",
) -> JSONResponse:
    state = cast(AppState, request.app.state)
    try:
        result = await state.catalog_uc.browse(mode, page, window)
    except ProviderError:
        return _provider_failed()

    payload = format_page(result, state.assets, mode=QueryMode.BROWSE.value, query="")
    return JSONResponse(content=payload)


@router.get("/suggestions")
async def suggestions(request: Request, query: str = "") -> JSONResponse:
    state = cast(AppState, request.app.state)
    try:
        items = await state.catalog_uc.suggest(query)
    except ProviderError:
        # Suggestions fail quietly; the search box just shows nothing.
        return JSONResponse(content={"items": []})

    return JSONResponse(
        content={"items": [format_item(i, state.assets) for i in items]}
    )


@router.get("/details/{kind}/{media_id}")
async def details(request: Request, kind: MediaKind, media_id: int) -> JSONResponse:
    """Details + embed URL for the watch page."""
    state = cast(AppState, request.app.state)
    try:
        watch = await state.watch_uc.watch(kind, media_id)
    except MediaNotFoundError:
        return JSONResponse(status_code=404, content={"error": "Title not found"})
    except ProviderError:
        log.warning(
            "details_failed", kind=kind.value, media_id=media_id, exc_info=True
        )
        return _provider_failed(_DETAILS_ERROR_MESSAGE)

    return JSONResponse(content=format_watch_page(watch))

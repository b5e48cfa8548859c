from __future__ import annotations

import time

import structlog
from fastapi import FastAPI, Request

from godseye import __version__
from godseye.infrastructure.config import AppConfig
from godseye.interfaces.app_state import AppState
from godseye.interfaces.composition import lifespan

log = structlog.get_logger(__name__)


def build_app(config: AppConfig) -> FastAPI:
    """Build the FastAPI app. Configuration only, no resource initialization.

    Resources (HTTP client, provider, theme store) are created in lifespan().
    """
    app = FastAPI(
        title=config.app_name,
        description="Movie/TV discovery API backed by TMDB",
        version=__version__,
        lifespan=lifespan,
    )

    app.state = AppState()
    app.state.config = config

    from godseye.interfaces.api.catalog import router as catalog_router
    from godseye.interfaces.api.theme import router as theme_router

    app.include_router(catalog_router)
    app.include_router(theme_router)

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = None
        try:
            response = await call_next(request)
            return response
        finally:
            duration_ms = (time.perf_counter() - start) * 1000.0
            status_code = response.status_code if response is not None else 500

            # Query strings carry user search text only; the API key stays server-side.
            log.info(
                "http_request",
                method=request.method,
                path=request.url.path,
                query=str(request.url.query),
                status_code=status_code,
                duration_ms=round(duration_ms, 2),
                client_host=(request.client.host if request.client else None),
            )

    return app

"""
cityweaver.api.app

FastAPI app factory for the City Weaver enrichment service.

Responsibilities:
- Build the FastAPI application and register routers/middleware.
- Create and dispose shared infrastructure (provider HTTP clients, coordinator).
- Provide a single composition root where cross-cutting concerns live.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from cityweaver import __version__
from cityweaver.api.deps import build_coordinator, build_provider_http
from cityweaver.api.routers.health import router as health_router
from cityweaver.api.routers.internal.router import router as internal_router
from cityweaver.api.routers.personas import router as personas_router
from cityweaver.api.routers.routes import router as routes_router
from cityweaver.api.routers.search import router as search_router
from cityweaver.enrichment.coordinator import EnrichmentCoordinator
from cityweaver.observability.logging import configure_logging, get_logger
from cityweaver.observability.middleware import RequestContextMiddleware
from cityweaver.settings import Settings

log = get_logger(__name__)


def create_app(
    *, settings: Settings, coordinator: EnrichmentCoordinator | None = None
) -> FastAPI:
    """
    `coordinator` may be injected (tests); otherwise one is built on startup from
    `settings`, with provider clients that live as long as the app.
    """

    configure_logging(
        service_name=settings.service_name, level=settings.log_level, fmt=settings.log_format
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env, dummy_providers=settings.use_dummy_providers)
        http = None
        if coordinator is None:
            http = build_provider_http(settings, app=app)
            app.state.coordinator = build_coordinator(settings, http)
        else:
            app.state.coordinator = coordinator
        try:
            yield
        finally:
            # Pending debounce timers are cancelled before the clients go away.
            await app.state.coordinator.aclose()
            if http is not None:
                await http.aclose()
            log.info("shutdown")

    app = FastAPI(
        title="City Weaver Enrichment Service",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.add_middleware(RequestContextMiddleware)
    app.include_router(health_router, tags=["health"])
    app.include_router(search_router)
    app.include_router(routes_router)
    app.include_router(personas_router)
    if settings.use_dummy_providers:
        app.include_router(internal_router)

    return app


# --- Module Notes -----------------------------------------------------------
# App composition stays here; enrichment logic stays in `cityweaver.enrichment`.

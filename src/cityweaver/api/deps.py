"""
cityweaver.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for settings and the coordinator.
- Build the provider HTTP clients and the coordinator from settings.
"""

from __future__ import annotations

from dataclasses import dataclass

import httpx
from fastapi import FastAPI, Request

from cityweaver import __version__
from cityweaver.enrichment.coordinator import EnrichmentCoordinator
from cityweaver.providers.geocoding import NominatimGeocoder
from cityweaver.providers.http import ProviderHttpClient, RetryPolicy
from cityweaver.providers.personas import PersonasApiClient
from cityweaver.providers.routes import RoutesApiClient
from cityweaver.settings import Settings, get_settings

# Host used when provider calls are routed in-process through ASGITransport.
DUMMY_PROVIDER_BASE = "http://cityweaver.internal/internal/v1"


@dataclass(slots=True)
class ProviderHttp:
    geocoding: httpx.AsyncClient
    backend: httpx.AsyncClient

    async def aclose(self) -> None:
        await self.geocoding.aclose()
        await self.backend.aclose()


def settings_dep(request: Request) -> Settings:
    # Prefer the settings the app was built with; fall back to the env-driven cache.
    return getattr(request.app.state, "settings", None) or get_settings()


def coordinator_dep(request: Request) -> EnrichmentCoordinator:
    # Created on app startup in `cityweaver.api.app.create_app`.
    return request.app.state.coordinator  # type: ignore[attr-defined]


def build_provider_http(settings: Settings, *, app: FastAPI) -> ProviderHttp:
    timeout = httpx.Timeout(settings.http_timeout_seconds)
    headers = {"User-Agent": settings.geocoding_user_agent or f"cityweaver/{__version__}"}

    if settings.use_dummy_providers:
        transport = httpx.ASGITransport(app=app)
        return ProviderHttp(
            geocoding=httpx.AsyncClient(
                transport=transport,
                base_url=f"{DUMMY_PROVIDER_BASE}/geocoding",
                timeout=timeout,
                headers=headers,
            ),
            backend=httpx.AsyncClient(
                transport=transport, base_url=DUMMY_PROVIDER_BASE, timeout=timeout
            ),
        )

    backend_headers: dict[str, str] = {}
    if settings.provider_api_token:
        backend_headers["Authorization"] = f"Bearer {settings.provider_api_token}"
    return ProviderHttp(
        geocoding=httpx.AsyncClient(
            base_url=settings.geocoding_base_url, timeout=timeout, headers=headers
        ),
        backend=httpx.AsyncClient(
            base_url=settings.provider_api_base_url, timeout=timeout, headers=backend_headers
        ),
    )


def build_coordinator(settings: Settings, http: ProviderHttp) -> EnrichmentCoordinator:
    retry = RetryPolicy.from_settings(settings)
    geo_client = ProviderHttpClient(http=http.geocoding, retry=retry)
    backend_client = ProviderHttpClient(http=http.backend, retry=retry)
    return EnrichmentCoordinator.from_settings(
        settings,
        geocoder=NominatimGeocoder(client=geo_client),
        routes=RoutesApiClient(client=backend_client),
        personas=PersonasApiClient(client=backend_client),
    )


# --- Module Notes -----------------------------------------------------------
# The coordinator is process-wide: search sessions are keyed by the caller's
# session id, route and persona concerns are shared by every caller.

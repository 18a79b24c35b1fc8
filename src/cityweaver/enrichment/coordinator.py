"""
cityweaver.enrichment.coordinator

Composition root for the enrichment layer.

Responsibilities:
- Own the three independent concerns (search, route, persona) and the
  append-only persona log.
- Expose every operation through the `{is_loading, error, data}` contract.
- Provide clear/reset per concern and a single teardown for all sessions.

The coordinator performs no I/O itself; it delegates to the components, which
never raise past their contract methods.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Literal

from cityweaver.domain.models import (
    Coordinates,
    DistanceMatrixRequest,
    DistanceMatrixResult,
    PersonaResult,
    Route,
    RouteRequest,
    StyleEnrichment,
    StyleSelection,
    TravelMode,
)
from cityweaver.enrichment.persona_enricher import PersonaData, PersonaEnricher
from cityweaver.enrichment.persona_log import PersonaLog
from cityweaver.enrichment.route_resolver import RouteData, RouteResolver
from cityweaver.enrichment.search_session import DebouncedSearchSession, SearchData
from cityweaver.enrichment.state import Snapshot
from cityweaver.observability.logging import get_logger
from cityweaver.providers.geocoding import Geocoder
from cityweaver.providers.personas import PersonaProvider
from cityweaver.providers.routes import RoutesProvider
from cityweaver.settings import Settings

log = get_logger(__name__)

DEFAULT_SESSION = "default"


class EnrichmentCoordinator:
    def __init__(
        self,
        *,
        geocoder: Geocoder,
        routes: RoutesProvider,
        personas: PersonaProvider,
        debounce_seconds: float = 0.3,
        min_query_length: int = 2,
        result_limit: int = 5,
        persona_strategy: Literal["batch", "fanout"] = "batch",
        persona_fanout_concurrency: int = 4,
    ) -> None:
        self._geocoder = geocoder
        self._search_opts = {
            "debounce_seconds": debounce_seconds,
            "min_query_length": min_query_length,
            "result_limit": result_limit,
        }
        self._sessions: dict[str, DebouncedSearchSession] = {}

        self.persona_log = PersonaLog()
        self.routes = RouteResolver(provider=routes)
        self.personas = PersonaEnricher(
            provider=personas,
            persona_log=self.persona_log,
            strategy=persona_strategy,
            fanout_concurrency=persona_fanout_concurrency,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        geocoder: Geocoder,
        routes: RoutesProvider,
        personas: PersonaProvider,
    ) -> EnrichmentCoordinator:
        return cls(
            geocoder=geocoder,
            routes=routes,
            personas=personas,
            debounce_seconds=settings.search_debounce_seconds,
            min_query_length=settings.search_min_query_length,
            result_limit=settings.search_result_limit,
            persona_strategy=settings.persona_strategy,
            persona_fanout_concurrency=settings.persona_fanout_concurrency,
        )

    # --- Search --------------------------------------------------------------

    def search_session(self, session_id: str = DEFAULT_SESSION) -> DebouncedSearchSession:
        session = self._sessions.get(session_id)
        if session is None:
            session = DebouncedSearchSession(
                geocoder=self._geocoder, name=session_id, **self._search_opts
            )
            self._sessions[session_id] = session
        return session

    def search_locations(self, query: str, *, session_id: str = DEFAULT_SESSION) -> None:
        self.search_session(session_id).submit(query)

    def clear_suggestions(self, *, session_id: str = DEFAULT_SESSION) -> None:
        session = self._sessions.get(session_id)
        if session is not None:
            session.clear()

    def search_snapshot(self, *, session_id: str = DEFAULT_SESSION) -> Snapshot[SearchData]:
        session = self._sessions.get(session_id)
        if session is None:
            # Reads never open a session; only `search_locations` does.
            return Snapshot(is_loading=False, error=None, data=SearchData())
        return session.snapshot()

    @property
    def open_sessions(self) -> tuple[str, ...]:
        return tuple(self._sessions)

    async def close_search(self, *, session_id: str) -> None:
        session = self._sessions.pop(session_id, None)
        if session is not None:
            await session.aclose()

    # --- Routes --------------------------------------------------------------

    async def get_directions(self, request: RouteRequest) -> Route | None:
        return await self.routes.get_directions(request)

    async def get_distance_matrix(
        self, request: DistanceMatrixRequest
    ) -> DistanceMatrixResult | None:
        return await self.routes.get_distance_matrix(request)

    def generate_maps_url(
        self,
        origin: Coordinates,
        destination: Coordinates,
        mode: TravelMode | str = TravelMode.walking,
    ) -> str:
        return self.routes.generate_maps_url(origin, destination, mode)

    def route_snapshot(self) -> Snapshot[RouteData]:
        return self.routes.snapshot()

    def clear_routes(self) -> None:
        self.routes.clear_routes()

    def clear_route_error(self) -> None:
        self.routes.clear_error()

    def reset_routes(self) -> None:
        self.routes.reset()

    # --- Personas ------------------------------------------------------------

    async def generate_persona(
        self, interests: Sequence[str], location: str
    ) -> PersonaResult | None:
        return await self.personas.generate_persona(interests, location)

    async def generate_personas_for_styles(
        self, styles: Sequence[StyleSelection], location: str
    ) -> StyleEnrichment:
        return await self.personas.generate_personas_for_styles(styles, location)

    async def get_suggested_personas(self, location: str) -> list[PersonaResult]:
        return await self.personas.get_suggested_personas(location)

    def persona_snapshot(self) -> Snapshot[PersonaData]:
        return self.personas.snapshot()

    def clear_personas(self) -> None:
        self.personas.clear_personas()

    def clear_persona_error(self) -> None:
        self.personas.clear_error()

    def reset_personas(self) -> None:
        self.personas.reset()

    # --- Lifecycle -----------------------------------------------------------

    async def aclose(self) -> None:
        sessions = list(self._sessions.values())
        self._sessions.clear()
        for session in sessions:
            await session.aclose()
        log.info("coordinator.closed", sessions=len(sessions))


# --- Module Notes -----------------------------------------------------------
# Concerns share nothing but the persona log (owned here). A slow persona batch
# and a route lookup are separate awaits on separate state holders, so neither
# can delay or cancel the other.

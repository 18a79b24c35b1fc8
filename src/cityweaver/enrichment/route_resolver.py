"""
cityweaver.enrichment.route_resolver

Route and distance-matrix resolution.

Responsibilities:
- Resolve directions and keep the provider-ranked candidate list.
- Classify provider statuses into domain errors, distinct from transport errors.
- Resolve distance matrices as all-or-nothing.
- Commit only the latest generation of each operation to the route concern.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from cityweaver.domain.errors import (
    DomainStatusError,
    EnrichmentError,
    LocationNotFoundError,
    NoRouteFoundError,
    ProviderTransportError,
)
from cityweaver.domain.models import (
    Coordinates,
    DistanceMatrixRequest,
    DistanceMatrixResult,
    MatrixCell,
    Route,
    RouteRequest,
    RouteResult,
    RouteStatus,
    TravelMode,
)
from cityweaver.enrichment.generations import GenerationCounter
from cityweaver.enrichment.geometry import maps_url
from cityweaver.enrichment.state import ConcernState, Snapshot
from cityweaver.observability.logging import get_logger
from cityweaver.providers.routes import RoutesProvider

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class RouteData:
    current_route: Route | None = None
    routes: tuple[Route, ...] = ()
    distance_matrix: DistanceMatrixResult | None = None


class RouteResolver:
    def __init__(self, *, provider: RoutesProvider) -> None:
        self._provider = provider
        self._state: ConcernState[RouteData] = ConcernState(RouteData())
        self._directions_gen = GenerationCounter()
        self._matrix_gen = GenerationCounter()

    @property
    def state(self) -> ConcernState[RouteData]:
        return self._state

    def snapshot(self) -> Snapshot[RouteData]:
        return self._state.snapshot()

    async def get_directions(self, request: RouteRequest) -> Route | None:
        """
        Returns the current (first-ranked) route, or None with the error captured in state.
        """

        token = self._directions_gen.issue()
        with self._state.loading():
            try:
                result = await self._provider.directions(request)
                route = classify_route_result(result)
            except EnrichmentError as e:
                log.warning(
                    "route.directions_failed",
                    kind=e.kind,
                    error=e.message,
                    stale=token.cancelled,
                )
                if not token.cancelled:
                    self._state.fail(e)
                return None

            if token.cancelled:
                log.debug("route.directions_stale", generation=token.generation)
                return route

            self._state.commit(current_route=route, routes=result.routes)
            log.info("route.directions_resolved", candidates=len(result.routes))
            return route

    async def get_distance_matrix(
        self, request: DistanceMatrixRequest
    ) -> DistanceMatrixResult | None:
        if not request.origins or not request.destinations:
            # Input-rejected: nothing to ask the provider.
            return None

        token = self._matrix_gen.issue()
        with self._state.loading():
            try:
                payload = await self._provider.distance_matrix(request)
                matrix = build_distance_matrix(
                    payload,
                    origin_count=len(request.origins),
                    destination_count=len(request.destinations),
                )
            except EnrichmentError as e:
                log.warning(
                    "route.matrix_failed", kind=e.kind, error=e.message, stale=token.cancelled
                )
                if not token.cancelled:
                    self._state.fail(e)
                return None

            if not token.cancelled:
                self._state.commit(distance_matrix=matrix)
            return matrix

    def generate_maps_url(
        self,
        origin: Coordinates,
        destination: Coordinates,
        mode: TravelMode | str = TravelMode.walking,
    ) -> str:
        return maps_url(origin, destination, mode)

    def clear_routes(self) -> None:
        self._directions_gen.invalidate()
        self._matrix_gen.invalidate()
        self._state.update(current_route=None, routes=(), distance_matrix=None)

    def clear_error(self) -> None:
        self._state.clear_error()

    def reset(self) -> None:
        self.clear_routes()
        self._state.reset()


def classify_route_result(result: RouteResult) -> Route:
    if result.status is RouteStatus.ok and result.routes:
        return result.routes[0]
    if result.status is RouteStatus.zero_results:
        raise NoRouteFoundError()
    if result.status is RouteStatus.not_found:
        raise LocationNotFoundError()
    raise DomainStatusError(
        f"Route calculation failed: {result.raw_status}", status=result.raw_status
    )


def build_distance_matrix(
    payload: dict[str, Any], *, origin_count: int, destination_count: int
) -> DistanceMatrixResult:
    """
    All-or-nothing: any missing row, short row or unresolved cell fails the call.
    """

    status = str(payload.get("status", ""))
    if status != "OK":
        raise DomainStatusError(f"Distance matrix failed: {status or 'UNKNOWN'}", status=status)

    rows = payload.get("rows")
    if not isinstance(rows, list) or len(rows) != origin_count:
        raise ProviderTransportError("Incomplete distance matrix response")

    cells: dict[tuple[int, int], MatrixCell] = {}
    for i, row in enumerate(rows):
        elements = row.get("elements") if isinstance(row, dict) else None
        if not isinstance(elements, list) or len(elements) != destination_count:
            raise ProviderTransportError("Incomplete distance matrix response")
        for j, el in enumerate(elements):
            if not isinstance(el, dict):
                raise ProviderTransportError("Incomplete distance matrix response")
            el_status = str(el.get("status", ""))
            if el_status != "OK":
                raise DomainStatusError(
                    f"Distance matrix failed: element ({i}, {j}) is {el_status or 'UNKNOWN'}",
                    status=el_status,
                )
            try:
                cells[(i, j)] = MatrixCell(
                    duration=float(el["duration"]["value"]),
                    distance=float(el["distance"]["value"]),
                    duration_text=str(el["duration"].get("text", "")),
                    distance_text=str(el["distance"].get("text", "")),
                )
            except (KeyError, TypeError, ValueError) as e:
                raise ProviderTransportError("Incomplete distance matrix response") from e

    return DistanceMatrixResult(
        origin_count=origin_count,
        destination_count=destination_count,
        cells=cells,
        origin_addresses=_addresses(payload.get("origin_addresses")),
        destination_addresses=_addresses(payload.get("destination_addresses")),
    )


def _addresses(raw: Any) -> tuple[str, ...]:
    if not raw:
        return ()
    if not isinstance(raw, list):
        raise ProviderTransportError("Incomplete distance matrix response")
    return tuple(str(a) for a in raw)


# --- Module Notes -----------------------------------------------------------
# Directions and matrix calls share one concern (one loading flag, one error slot)
# but have separate generation counters, so a newer matrix call never hides the
# result of an in-flight directions call.

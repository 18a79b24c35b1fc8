"""
cityweaver.providers.routes

Directions and distance-matrix client.

Responsibilities:
- Encode `RouteRequest` / `DistanceMatrixRequest` as provider query params.
- Parse the directions payload into a `RouteResult` (status is kept, not judged).
- Return the raw distance-matrix payload; completeness is checked by the resolver.
"""

from __future__ import annotations

from typing import Any, Protocol

from cityweaver.domain.errors import ProviderTransportError
from cityweaver.domain.models import (
    Bounds,
    Coordinates,
    DistanceMatrixRequest,
    Route,
    RouteLeg,
    RouteRequest,
    RouteResult,
    RouteStatus,
    RouteStep,
    TravelMode,
)
from cityweaver.providers.http import ProviderHttpClient


class RoutesProvider(Protocol):
    async def directions(self, request: RouteRequest) -> RouteResult: ...

    async def distance_matrix(self, request: DistanceMatrixRequest) -> dict[str, Any]: ...


class RoutesApiClient:
    def __init__(self, *, client: ProviderHttpClient, prefix: str = "/api/routes") -> None:
        self._client = client
        self._prefix = prefix.rstrip("/")

    async def directions(self, request: RouteRequest) -> RouteResult:
        payload = await self._client.get_json(self._prefix, params=directions_params(request))
        return parse_route_response(payload)

    async def distance_matrix(self, request: DistanceMatrixRequest) -> dict[str, Any]:
        payload = await self._client.get_json(
            f"{self._prefix}/distance-matrix", params=matrix_params(request)
        )
        if not isinstance(payload, dict):
            raise ProviderTransportError("Failed to get distance matrix")
        return payload


def directions_params(request: RouteRequest) -> dict[str, str]:
    params: dict[str, str] = {
        "origin_lat": str(request.origin.latitude),
        "origin_lng": str(request.origin.longitude),
        "destination_lat": str(request.destination.latitude),
        "destination_lng": str(request.destination.longitude),
        "travel_mode": request.mode.value,
    }
    _flags(
        params,
        avoid_tolls=request.avoid_tolls,
        avoid_highways=request.avoid_highways,
        avoid_ferries=request.avoid_ferries,
        optimize_waypoints=request.optimize_waypoints,
    )
    if request.departure_time:
        params["departure_time"] = request.departure_time
    if request.arrival_time:
        params["arrival_time"] = request.arrival_time
    if request.waypoints:
        params["waypoints"] = "|".join(wp.location.as_param() for wp in request.waypoints)
    return params


def matrix_params(request: DistanceMatrixRequest) -> dict[str, str]:
    params: dict[str, str] = {
        "origins": "|".join(o.as_param() for o in request.origins),
        "destinations": "|".join(d.as_param() for d in request.destinations),
        "travel_mode": request.mode.value,
    }
    _flags(
        params,
        avoid_tolls=request.avoid_tolls,
        avoid_highways=request.avoid_highways,
        avoid_ferries=request.avoid_ferries,
    )
    if request.departure_time:
        params["departure_time"] = request.departure_time
    return params


def _flags(params: dict[str, str], **flags: bool) -> None:
    for name, enabled in flags.items():
        if enabled:
            params[name] = "true"


def parse_route_response(payload: Any) -> RouteResult:
    if not isinstance(payload, dict) or "status" not in payload:
        raise ProviderTransportError("Failed to get directions")

    raw_status = str(payload["status"])
    raw_routes = payload.get("routes") or []
    if not isinstance(raw_routes, list):
        raise ProviderTransportError("Failed to get directions")
    try:
        routes = tuple(_route(r) for r in raw_routes)
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise ProviderTransportError("Failed to get directions") from e
    return RouteResult(
        status=RouteStatus.classify(raw_status), raw_status=raw_status, routes=routes
    )


def _coords(raw: dict[str, Any]) -> Coordinates:
    return Coordinates(latitude=float(raw["latitude"]), longitude=float(raw["longitude"]))


def _route(raw: dict[str, Any]) -> Route:
    bounds = raw.get("bounds")
    return Route(
        legs=tuple(_leg(leg) for leg in raw.get("legs", [])),
        overview_polyline=str(raw.get("overview_polyline", "")),
        total_distance=float(raw["total_distance"]),
        total_duration=float(raw["total_duration"]),
        bounds=(
            Bounds(northeast=_coords(bounds["northeast"]), southwest=_coords(bounds["southwest"]))
            if bounds
            else None
        ),
        warnings=tuple(str(w) for w in raw.get("warnings") or []),
    )


def _leg(raw: dict[str, Any]) -> RouteLeg:
    return RouteLeg(
        start_location=_coords(raw["start_location"]),
        end_location=_coords(raw["end_location"]),
        start_address=str(raw.get("start_address", "")),
        end_address=str(raw.get("end_address", "")),
        distance=float(raw["distance"]),
        duration=float(raw["duration"]),
        steps=tuple(_step(s) for s in raw.get("steps", [])),
    )


def _step(raw: dict[str, Any]) -> RouteStep:
    mode = raw.get("travel_mode")
    return RouteStep(
        instruction=str(raw.get("instruction", "")),
        distance=float(raw["distance"]),
        duration=float(raw["duration"]),
        polyline=str(raw.get("polyline", "")),
        maneuver=raw.get("maneuver"),
        travel_mode=TravelMode(mode) if mode else None,
    )


# --- Module Notes -----------------------------------------------------------
# Mapping statuses to domain errors is the resolver's job; this module only
# rejects payloads it cannot read. Any unreadable nesting (a route, leg or step
# that is not an object) surfaces as the same transport error.

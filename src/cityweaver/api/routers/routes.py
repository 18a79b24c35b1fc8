"""
cityweaver.api.routers.routes

Route concern endpoints.

Responsibilities:
- Resolve directions and distance matrices through the coordinator.
- Build navigation deep links (pure, no provider call).
- Expose and clear the route concern's state.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from cityweaver.api.deps import coordinator_dep
from cityweaver.api.serializers import to_jsonable
from cityweaver.domain.models import (
    Coordinates,
    DistanceMatrixRequest,
    RouteRequest,
    RouteWaypoint,
    TravelMode,
)
from cityweaver.enrichment.coordinator import EnrichmentCoordinator
from cityweaver.enrichment.geometry import summarize_route

router = APIRouter(prefix="/v1/routes", tags=["routes"])


class Point(BaseModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)

    def to_domain(self) -> Coordinates:
        return Coordinates(latitude=self.latitude, longitude=self.longitude)


class DirectionsBody(BaseModel):
    origin: Point
    destination: Point
    mode: TravelMode = TravelMode.walking
    waypoints: list[Point] = Field(default_factory=list)
    avoid_tolls: bool = False
    avoid_highways: bool = False
    avoid_ferries: bool = False
    optimize_waypoints: bool = False
    departure_time: str | None = None
    arrival_time: str | None = None


class DistanceMatrixBody(BaseModel):
    origins: list[Point] = Field(default_factory=list)
    destinations: list[Point] = Field(default_factory=list)
    mode: TravelMode = TravelMode.walking
    avoid_tolls: bool = False
    avoid_highways: bool = False
    avoid_ferries: bool = False
    departure_time: str | None = None


class MapsUrlBody(BaseModel):
    origin: Point
    destination: Point
    mode: TravelMode = TravelMode.walking


@router.post("/directions")
async def get_directions(
    body: DirectionsBody,
    coordinator: EnrichmentCoordinator = Depends(coordinator_dep),
) -> dict[str, Any]:
    request = RouteRequest(
        origin=body.origin.to_domain(),
        destination=body.destination.to_domain(),
        mode=body.mode,
        waypoints=tuple(RouteWaypoint(location=w.to_domain()) for w in body.waypoints),
        avoid_tolls=body.avoid_tolls,
        avoid_highways=body.avoid_highways,
        avoid_ferries=body.avoid_ferries,
        optimize_waypoints=body.optimize_waypoints,
        departure_time=body.departure_time,
        arrival_time=body.arrival_time,
    )
    route = await coordinator.get_directions(request)
    summary = summarize_route(route, body.mode) if route is not None else None
    return {
        "result": to_jsonable(route),
        "summary": to_jsonable(summary),
        **to_jsonable(coordinator.route_snapshot()),
    }


@router.post("/distance-matrix")
async def get_distance_matrix(
    body: DistanceMatrixBody,
    coordinator: EnrichmentCoordinator = Depends(coordinator_dep),
) -> dict[str, Any]:
    request = DistanceMatrixRequest(
        origins=tuple(p.to_domain() for p in body.origins),
        destinations=tuple(p.to_domain() for p in body.destinations),
        mode=body.mode,
        avoid_tolls=body.avoid_tolls,
        avoid_highways=body.avoid_highways,
        avoid_ferries=body.avoid_ferries,
        departure_time=body.departure_time,
    )
    matrix = await coordinator.get_distance_matrix(request)
    return {"result": to_jsonable(matrix), **to_jsonable(coordinator.route_snapshot())}


@router.post("/maps-url")
async def maps_url(
    body: MapsUrlBody,
    coordinator: EnrichmentCoordinator = Depends(coordinator_dep),
) -> dict[str, str]:
    url = coordinator.generate_maps_url(
        body.origin.to_domain(), body.destination.to_domain(), body.mode
    )
    return {"url": url}


@router.get("")
async def get_route_state(
    coordinator: EnrichmentCoordinator = Depends(coordinator_dep),
) -> dict[str, Any]:
    return to_jsonable(coordinator.route_snapshot())


@router.delete("/results")
async def clear_route_results(
    coordinator: EnrichmentCoordinator = Depends(coordinator_dep),
) -> dict[str, Any]:
    # Keeps the last error; DELETE /v1/routes clears everything.
    coordinator.clear_routes()
    return to_jsonable(coordinator.route_snapshot())


@router.delete("")
async def reset_routes(
    coordinator: EnrichmentCoordinator = Depends(coordinator_dep),
) -> dict[str, Any]:
    coordinator.reset_routes()
    return to_jsonable(coordinator.route_snapshot())


@router.delete("/error")
async def clear_route_error(
    coordinator: EnrichmentCoordinator = Depends(coordinator_dep),
) -> dict[str, Any]:
    coordinator.clear_route_error()
    return to_jsonable(coordinator.route_snapshot())

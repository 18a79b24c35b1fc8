from __future__ import annotations

import math
from typing import Any

from fastapi import APIRouter, HTTPException, Query
from starlette.status import HTTP_400_BAD_REQUEST

from cityweaver.domain.models import Coordinates, TravelMode
from cityweaver.enrichment.geometry import calculate_bounds, format_distance, format_duration

router = APIRouter()

# km/h, applied to the straight-line distance times a detour factor.
_SPEED_KMH = {
    TravelMode.walking: 5.0,
    TravelMode.cycling: 15.0,
    TravelMode.transit: 25.0,
    TravelMode.driving: 40.0,
}
_DETOUR_FACTOR = 1.4
# Beyond this, walking/cycling report ZERO_RESULTS.
_MAX_ACTIVE_KM = 100.0


def haversine_km(a: Coordinates, b: Coordinates) -> float:
    radius_km = 6371.0
    dlat = math.radians(b.latitude - a.latitude)
    dlon = math.radians(b.longitude - a.longitude)
    h = (
        math.sin(dlat / 2) ** 2
        + math.cos(math.radians(a.latitude))
        * math.cos(math.radians(b.latitude))
        * math.sin(dlon / 2) ** 2
    )
    return radius_km * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def _estimate(a: Coordinates, b: Coordinates, mode: TravelMode) -> tuple[float, float]:
    km = haversine_km(a, b) * _DETOUR_FACTOR
    return km * 1000, km / _SPEED_KMH[mode] * 3600


def _point(c: Coordinates) -> dict[str, float]:
    return {"latitude": c.latitude, "longitude": c.longitude}


def _parse_points(raw: str) -> list[Coordinates]:
    points = []
    for chunk in filter(None, raw.split("|")):
        try:
            lat, lng = (float(v) for v in chunk.split(","))
        except ValueError as e:
            raise HTTPException(
                status_code=HTTP_400_BAD_REQUEST, detail=f"Invalid coordinate: {chunk}"
            ) from e
        points.append(Coordinates(latitude=lat, longitude=lng))
    return points


def _valid(c: Coordinates) -> bool:
    return -90 <= c.latitude <= 90 and -180 <= c.longitude <= 180


@router.get("")
async def directions(
    origin_lat: float,
    origin_lng: float,
    destination_lat: float,
    destination_lng: float,
    travel_mode: TravelMode = TravelMode.walking,
    waypoints: str = "",
) -> dict[str, Any]:
    origin = Coordinates(latitude=origin_lat, longitude=origin_lng)
    destination = Coordinates(latitude=destination_lat, longitude=destination_lng)
    stops = [origin, *_parse_points(waypoints), destination]

    if not all(_valid(s) for s in stops):
        return {"status": "NOT_FOUND", "routes": []}
    if origin == destination and len(stops) == 2:
        return {"status": "ZERO_RESULTS", "routes": []}

    legs = []
    for a, b in zip(stops, stops[1:]):
        distance, duration = _estimate(a, b, travel_mode)
        legs.append(
            {
                "start_location": _point(a),
                "end_location": _point(b),
                "start_address": a.as_param(),
                "end_address": b.as_param(),
                "distance": distance,
                "duration": duration,
                "steps": [
                    {
                        "instruction": f"Head to {b.as_param()}",
                        "distance": distance,
                        "duration": duration,
                        "polyline": "",
                        "travel_mode": travel_mode.value,
                    }
                ],
            }
        )

    total_distance = sum(leg["distance"] for leg in legs)
    if travel_mode in (TravelMode.walking, TravelMode.cycling) and (
        total_distance / 1000 > _MAX_ACTIVE_KM
    ):
        return {"status": "ZERO_RESULTS", "routes": []}

    bounds = calculate_bounds(stops)
    return {
        "status": "OK",
        "routes": [
            {
                "legs": legs,
                "overview_polyline": "",
                "total_distance": total_distance,
                "total_duration": sum(leg["duration"] for leg in legs),
                "warnings": ["Estimated route (dummy provider)"],
                "bounds": {
                    "northeast": _point(bounds.northeast),
                    "southwest": _point(bounds.southwest),
                },
            }
        ],
    }


@router.get("/distance-matrix")
async def distance_matrix(
    origins: str = Query(min_length=1),
    destinations: str = Query(min_length=1),
    travel_mode: TravelMode = TravelMode.walking,
) -> dict[str, Any]:
    origin_points = _parse_points(origins)
    destination_points = _parse_points(destinations)

    rows = []
    for o in origin_points:
        elements = []
        for d in destination_points:
            if not (_valid(o) and _valid(d)):
                elements.append({"status": "NOT_FOUND"})
                continue
            distance, duration = _estimate(o, d, travel_mode)
            elements.append(
                {
                    "status": "OK",
                    "distance": {"text": format_distance(distance), "value": distance},
                    "duration": {"text": format_duration(duration), "value": duration},
                }
            )
        rows.append({"elements": elements})

    return {
        "status": "OK",
        "rows": rows,
        "origin_addresses": [o.as_param() for o in origin_points],
        "destination_addresses": [d.as_param() for d in destination_points],
    }

"""
cityweaver.enrichment.geometry

Pure route helpers (no I/O).

Responsibilities:
- Build external-navigation deep links.
- Decode encoded polylines and compute bounds.
- Human-readable distance/duration formatting and a rough trip cost estimate.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from cityweaver.domain.models import Bounds, Coordinates, Route, TravelMode, format_coordinate

MAPS_DIRECTIONS_URL = "https://www.google.com/maps/dir/"

_MODE_PARAM = {
    TravelMode.walking: "w",
    TravelMode.driving: "d",
    TravelMode.transit: "r",
    TravelMode.cycling: "b",
}

_MODE_ICON = {
    TravelMode.walking: "\U0001f6b6",
    TravelMode.driving: "\U0001f697",
    TravelMode.transit: "\U0001f68c",
    TravelMode.cycling: "\U0001f6b4",
}

# Cost model: fuel per km, flat toll once a drive exceeds the toll threshold.
_TRANSIT_FARE = 2.5
_FUEL_COST_PER_KM = 0.45
_TOLL_THRESHOLD_KM = 20
_TOLL_COST = 5.0


def maps_url(
    origin: Coordinates,
    destination: Coordinates,
    mode: TravelMode | str = TravelMode.walking,
) -> str:
    m = _MODE_PARAM[TravelMode(mode)]
    o_lat = format_coordinate(origin.latitude)
    o_lng = format_coordinate(origin.longitude)
    return (
        f"{MAPS_DIRECTIONS_URL}{origin.as_param()}/{destination.as_param()}"
        f"/@{o_lat},{o_lng},15z/data=!3m1!4b1!4m2!4m1!3e{m}"
    )


def format_distance(meters: float) -> str:
    if meters < 1000:
        return f"{math.floor(meters + 0.5)} m"
    return f"{meters / 1000:.1f} km"


def format_duration(seconds: float) -> str:
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def travel_mode_icon(mode: str) -> str:
    try:
        return _MODE_ICON[TravelMode(mode)]
    except ValueError:
        return "➡️"


def decode_polyline(encoded: str) -> list[Coordinates]:
    """
    Decode a polyline in the standard 1e5-precision encoding.
    """

    points: list[Coordinates] = []
    index = 0
    lat = 0
    lng = 0
    length = len(encoded)

    while index < length:
        deltas = []
        for _ in range(2):
            shift = 0
            result = 0
            while True:
                b = ord(encoded[index]) - 63
                index += 1
                result |= (b & 0x1F) << shift
                shift += 5
                if b < 0x20:
                    break
            deltas.append(~(result >> 1) if result & 1 else result >> 1)
        lat += deltas[0]
        lng += deltas[1]
        points.append(Coordinates(latitude=lat / 1e5, longitude=lng / 1e5))

    return points


def calculate_bounds(coordinates: Sequence[Coordinates]) -> Bounds:
    if not coordinates:
        raise ValueError("Cannot calculate bounds for empty coordinates")

    lats = [c.latitude for c in coordinates]
    lngs = [c.longitude for c in coordinates]
    return Bounds(
        northeast=Coordinates(latitude=max(lats), longitude=max(lngs)),
        southwest=Coordinates(latitude=min(lats), longitude=min(lngs)),
    )


def validate_route(route: Route) -> bool:
    return len(route.legs) > 0 and route.total_distance > 0 and route.total_duration > 0


def estimate_cost(distance_meters: float, mode: TravelMode | str) -> float:
    mode = TravelMode(mode)
    if mode in (TravelMode.walking, TravelMode.cycling):
        return 0.0
    if mode is TravelMode.transit:
        return _TRANSIT_FARE
    km = distance_meters / 1000
    toll = _TOLL_COST if km > _TOLL_THRESHOLD_KM else 0.0
    return km * _FUEL_COST_PER_KM + toll


@dataclass(frozen=True, slots=True)
class RouteSummary:
    distance_text: str
    duration_text: str
    icon: str
    estimated_cost: float
    valid: bool
    path: tuple[Coordinates, ...] = ()


def summarize_route(route: Route, mode: TravelMode | str) -> RouteSummary:
    return RouteSummary(
        distance_text=format_distance(route.total_distance),
        duration_text=format_duration(route.total_duration),
        icon=travel_mode_icon(mode),
        estimated_cost=round(estimate_cost(route.total_distance, mode), 2),
        valid=validate_route(route),
        path=tuple(decode_polyline(route.overview_polyline)),
    )

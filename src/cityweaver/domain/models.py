"""
cityweaver.domain.models

Value types for the enrichment layer.

Responsibilities:
- Describe requests handed to providers (routes, matrices, personas).
- Describe results copied into coordinator-visible state.
- Model the tagged `Enriched | Degraded` outcome of style enrichment.

All types are frozen so a result can be shared with the presentation layer
without the network layer being able to mutate it afterwards.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Literal


class TravelMode(enum.StrEnum):
    walking = "walking"
    driving = "driving"
    transit = "transit"
    cycling = "cycling"


class RouteStatus(enum.StrEnum):
    # Provider statuses the resolver distinguishes; everything else maps to `other`.
    ok = "OK"
    zero_results = "ZERO_RESULTS"
    not_found = "NOT_FOUND"
    other = "OTHER"

    @classmethod
    def classify(cls, raw: str) -> RouteStatus:
        try:
            status = cls(raw)
        except ValueError:
            return cls.other
        return status


def format_coordinate(value: float) -> str:
    # 48.0 -> "48", 48.8566 -> "48.8566"; stable across calls for the same float.
    text = repr(float(value))
    return text[:-2] if text.endswith(".0") else text


@dataclass(frozen=True, slots=True)
class Coordinates:
    latitude: float
    longitude: float

    def as_param(self) -> str:
        return f"{format_coordinate(self.latitude)},{format_coordinate(self.longitude)}"


@dataclass(frozen=True, slots=True)
class LocationSuggestion:
    name: str
    coordinates: Coordinates


# --- Routes -----------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RouteWaypoint:
    location: Coordinates
    place_id: str | None = None
    address: str | None = None


@dataclass(frozen=True, slots=True)
class RouteRequest:
    origin: Coordinates
    destination: Coordinates
    mode: TravelMode = TravelMode.walking
    waypoints: tuple[RouteWaypoint, ...] = ()
    avoid_tolls: bool = False
    avoid_highways: bool = False
    avoid_ferries: bool = False
    optimize_waypoints: bool = False
    departure_time: str | None = None  # ISO 8601
    arrival_time: str | None = None  # ISO 8601


@dataclass(frozen=True, slots=True)
class RouteStep:
    instruction: str
    distance: float  # meters
    duration: float  # seconds
    polyline: str = ""
    maneuver: str | None = None
    travel_mode: TravelMode | None = None


@dataclass(frozen=True, slots=True)
class RouteLeg:
    start_location: Coordinates
    end_location: Coordinates
    start_address: str
    end_address: str
    distance: float
    duration: float
    steps: tuple[RouteStep, ...] = ()


@dataclass(frozen=True, slots=True)
class Bounds:
    northeast: Coordinates
    southwest: Coordinates


@dataclass(frozen=True, slots=True)
class Route:
    legs: tuple[RouteLeg, ...]
    overview_polyline: str
    total_distance: float  # meters
    total_duration: float  # seconds
    bounds: Bounds | None = None
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class RouteResult:
    status: RouteStatus
    raw_status: str
    routes: tuple[Route, ...] = ()

    @property
    def current_route(self) -> Route | None:
        # Provider rank order: the first candidate is the preferred one.
        return self.routes[0] if self.routes else None


@dataclass(frozen=True, slots=True)
class DistanceMatrixRequest:
    origins: tuple[Coordinates, ...]
    destinations: tuple[Coordinates, ...]
    mode: TravelMode = TravelMode.walking
    avoid_tolls: bool = False
    avoid_highways: bool = False
    avoid_ferries: bool = False
    departure_time: str | None = None


@dataclass(frozen=True, slots=True)
class MatrixCell:
    duration: float  # seconds
    distance: float  # meters
    duration_text: str = ""
    distance_text: str = ""


@dataclass(frozen=True, slots=True)
class DistanceMatrixResult:
    """
    Fully populated origins x destinations matrix keyed by (origin_idx, destination_idx).
    """

    origin_count: int
    destination_count: int
    cells: Mapping[tuple[int, int], MatrixCell]
    origin_addresses: tuple[str, ...] = ()
    destination_addresses: tuple[str, ...] = ()

    def cell(self, origin_index: int, destination_index: int) -> MatrixCell:
        return self.cells[(origin_index, destination_index)]

    def row(self, origin_index: int) -> tuple[MatrixCell, ...]:
        return tuple(self.cells[(origin_index, j)] for j in range(self.destination_count))


# --- Styles + personas ------------------------------------------------------


@dataclass(frozen=True, slots=True)
class StyleSelection:
    id: str
    name: str
    description: str
    icon: str
    examples: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class PersonaResult:
    name: str
    backstory: str
    tone: str
    # The (interests, location) pair this persona was generated for.
    interests: tuple[str, ...] = ()
    location: str = ""


@dataclass(frozen=True, slots=True)
class EnhancedStyleSelection(StyleSelection):
    persona: PersonaResult | None = None

    @classmethod
    def from_style(
        cls, style: StyleSelection, persona: PersonaResult | None
    ) -> EnhancedStyleSelection:
        return cls(
            id=style.id,
            name=style.name,
            description=style.description,
            icon=style.icon,
            examples=style.examples,
            persona=persona,
        )


@dataclass(frozen=True, slots=True)
class Enriched:
    styles: tuple[EnhancedStyleSelection, ...]
    kind: Literal["enriched"] = field(default="enriched", init=False)

    @property
    def personas(self) -> tuple[PersonaResult, ...]:
        return tuple(s.persona for s in self.styles if s.persona is not None)


@dataclass(frozen=True, slots=True)
class Degraded:
    # `styles` is the caller's input, unchanged.
    styles: tuple[StyleSelection, ...]
    reason: str
    kind: Literal["degraded"] = field(default="degraded", init=False)

    @property
    def personas(self) -> tuple[PersonaResult, ...]:
        return ()


StyleEnrichment = Enriched | Degraded


# --- Module Notes -----------------------------------------------------------
# EnhancedStyleSelection subclasses StyleSelection so a degraded result (the raw
# input list) and an enriched one can be consumed through the same fields.

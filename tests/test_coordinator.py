"""
tests.test_coordinator

Concern isolation and shared persona log at the coordinator level.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import Any

import pytest

from cityweaver.domain.errors import NoRouteFoundError
from cityweaver.domain.models import (
    Coordinates,
    DistanceMatrixRequest,
    EnhancedStyleSelection,
    LocationSuggestion,
    PersonaResult,
    RouteRequest,
    RouteResult,
    StyleSelection,
)
from cityweaver.enrichment.catalog import get_styles
from cityweaver.enrichment.coordinator import EnrichmentCoordinator
from cityweaver.enrichment.persona_context import build_persona_context, is_valid_persona
from cityweaver.providers.personas import PersonaBatch, PersonaBatchItem

A = Coordinates(latitude=38.7223, longitude=-9.1393)
B = Coordinates(latitude=38.7139, longitude=-9.1334)


class SilentGeocoder:
    async def search(self, query: str, *, limit: int) -> tuple[LocationSuggestion, ...]:
        return ()


class FailingRoutes:
    async def directions(self, request: RouteRequest) -> RouteResult:
        raise NoRouteFoundError()

    async def distance_matrix(self, request: DistanceMatrixRequest) -> dict[str, Any]:
        return {"status": "ZERO_RESULTS"}


class SlowPersonas:
    def __init__(self) -> None:
        self.gate = asyncio.Event()

    async def generate(self, *, interests: Sequence[str], location: str) -> PersonaResult:
        return PersonaResult(
            name="Solo", backstory="A lone wanderer at heart", tone="calm", location=location
        )

    async def generate_batch(
        self, *, items: Sequence[PersonaBatchItem], location: str
    ) -> PersonaBatch:
        await self.gate.wait()
        return PersonaBatch(
            status="OK",
            personas={
                i.style_id: PersonaResult(
                    name=f"{i.interests[0]} Guide",
                    backstory="Knows every corner of the city",
                    tone="warm",
                    interests=i.interests,
                    location=location,
                )
                for i in items
            },
        )

    async def suggested(self, *, location: str) -> tuple[PersonaResult, ...]:
        return ()


def _coordinator(personas: SlowPersonas) -> EnrichmentCoordinator:
    return EnrichmentCoordinator(
        geocoder=SilentGeocoder(), routes=FailingRoutes(), personas=personas
    )


@pytest.mark.asyncio
async def test_slow_persona_batch_does_not_block_routes() -> None:
    personas = SlowPersonas()
    coordinator = _coordinator(personas)
    styles = get_styles(["history-buff", "nature-seeker"])

    batch = asyncio.ensure_future(coordinator.generate_personas_for_styles(styles, "Lisbon"))
    await asyncio.sleep(0)
    assert coordinator.persona_snapshot().is_loading is True

    route = await coordinator.get_directions(RouteRequest(origin=A, destination=B))

    assert route is None
    assert coordinator.route_snapshot().error == "No route found between the specified locations"
    assert coordinator.route_snapshot().is_loading is False
    # The persona concern is still in flight and has no error of its own.
    assert coordinator.persona_snapshot().is_loading is True
    assert coordinator.persona_snapshot().error is None

    personas.gate.set()
    outcome = await batch
    assert outcome.kind == "enriched"
    names = [p.name for p in coordinator.persona_log]
    assert names == ["History Buff Guide", "Nature Seeker Guide"]


@pytest.mark.asyncio
async def test_persona_log_accumulates_across_operations() -> None:
    personas = SlowPersonas()
    personas.gate.set()
    coordinator = _coordinator(personas)

    await coordinator.generate_persona(["Food"], "Lisbon")
    await coordinator.generate_personas_for_styles(get_styles(["culture-arts"]), "Lisbon")
    coordinator.reset_personas()

    assert [p.name for p in coordinator.persona_log] == ["Solo", "Culture & Arts Guide"]
    assert coordinator.persona_snapshot().data.last_persona is None


@pytest.mark.asyncio
async def test_route_error_clear_keeps_other_concerns() -> None:
    coordinator = _coordinator(SlowPersonas())
    await coordinator.get_directions(RouteRequest(origin=A, destination=B))

    coordinator.clear_route_error()

    assert coordinator.route_snapshot().error is None
    assert coordinator.search_snapshot().error is None


@pytest.mark.asyncio
async def test_aclose_tears_down_every_session() -> None:
    coordinator = _coordinator(SlowPersonas())
    coordinator.search_locations("Lisbon", session_id="origin")
    coordinator.search_locations("Porto", session_id="destination")
    sessions = [coordinator.search_session("origin"), coordinator.search_session("destination")]

    await coordinator.aclose()

    assert not any(s.has_pending_timer for s in sessions)


def test_reading_unknown_sessions_opens_nothing() -> None:
    coordinator = _coordinator(SlowPersonas())

    for i in range(50):
        snap = coordinator.search_snapshot(session_id=f"s{i}")
        coordinator.clear_suggestions(session_id=f"s{i}")
        assert snap.is_loading is False
        assert snap.data.suggestions == ()

    assert coordinator.open_sessions == ()


@pytest.mark.asyncio
async def test_close_search_drops_the_session() -> None:
    coordinator = _coordinator(SlowPersonas())
    coordinator.search_locations("Lisbon", session_id="origin")
    session = coordinator.search_session("origin")
    assert coordinator.open_sessions == ("origin",)

    await coordinator.close_search(session_id="origin")

    assert coordinator.open_sessions == ()
    assert not session.has_pending_timer


def test_persona_context_prefers_first_valid_persona() -> None:
    weak = PersonaResult(name="Weak", backstory="short", tone="flat")
    strong = PersonaResult(name="Strong", backstory="Walks every old quarter twice", tone="warm")
    plain = StyleSelection(id="x", name="Plain", description="", icon="", examples=("Cafes",))
    styles = [
        EnhancedStyleSelection.from_style(plain, weak),
        EnhancedStyleSelection.from_style(plain, strong),
    ]

    assert not is_valid_persona(weak)
    context = build_persona_context(styles, "Porto")

    assert context.dominant_persona == strong
    assert context.description == "Walks every old quarter twice exploring Porto"


def test_persona_context_without_personas_uses_style_names() -> None:
    context = build_persona_context(get_styles(["nature-seeker"]), "Porto")

    assert context.dominant_persona is None
    assert context.description == "A traveler interested in Nature Seeker in Porto"
    assert "City parks" in context.combined_interests

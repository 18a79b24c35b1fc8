"""
cityweaver.api.routers.personas

Persona concern endpoints.

Responsibilities:
- Single persona generation, style enrichment and location suggestions.
- Serve the static travel-style catalog.
- Expose the persona concern's state and the accumulated persona log.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from cityweaver.api.deps import coordinator_dep
from cityweaver.api.serializers import to_jsonable
from cityweaver.domain.models import StyleSelection
from cityweaver.enrichment.catalog import TRAVEL_STYLES, get_styles
from cityweaver.enrichment.coordinator import EnrichmentCoordinator
from cityweaver.enrichment.persona_context import build_persona_context

router = APIRouter(prefix="/v1/personas", tags=["personas"])


class GeneratePersonaBody(BaseModel):
    interests: list[str] = Field(default_factory=list)
    location: str


class StyleBody(BaseModel):
    id: str
    name: str
    description: str = ""
    icon: str = ""
    examples: list[str] = Field(default_factory=list)

    def to_domain(self) -> StyleSelection:
        return StyleSelection(
            id=self.id,
            name=self.name,
            description=self.description,
            icon=self.icon,
            examples=tuple(self.examples),
        )


class EnrichStylesBody(BaseModel):
    location: str
    # Catalog ids, custom styles, or both (catalog entries first).
    style_ids: list[str] = Field(default_factory=list)
    styles: list[StyleBody] = Field(default_factory=list)


def _state(coordinator: EnrichmentCoordinator) -> dict[str, Any]:
    return {
        **to_jsonable(coordinator.persona_snapshot()),
        "personas": to_jsonable(coordinator.persona_log.snapshot()),
    }


@router.get("/catalog")
async def list_catalog() -> list[dict[str, Any]]:
    return to_jsonable(TRAVEL_STYLES)


@router.post("/generate")
async def generate_persona(
    body: GeneratePersonaBody,
    coordinator: EnrichmentCoordinator = Depends(coordinator_dep),
) -> dict[str, Any]:
    persona = await coordinator.generate_persona(body.interests, body.location)
    return {"result": to_jsonable(persona), **_state(coordinator)}


@router.post("/styles")
async def enrich_styles(
    body: EnrichStylesBody,
    coordinator: EnrichmentCoordinator = Depends(coordinator_dep),
) -> dict[str, Any]:
    styles = [*get_styles(body.style_ids), *(s.to_domain() for s in body.styles)]
    outcome = await coordinator.generate_personas_for_styles(styles, body.location)
    context = build_persona_context(outcome.styles, body.location)
    return {
        "result": to_jsonable(outcome),
        "context": to_jsonable(context),
        **_state(coordinator),
    }


@router.get("/suggested")
async def suggested_personas(
    location: str,
    coordinator: EnrichmentCoordinator = Depends(coordinator_dep),
) -> dict[str, Any]:
    personas = await coordinator.get_suggested_personas(location)
    return {"result": to_jsonable(personas), **_state(coordinator)}


@router.get("")
async def get_persona_state(
    coordinator: EnrichmentCoordinator = Depends(coordinator_dep),
) -> dict[str, Any]:
    return _state(coordinator)


@router.delete("")
async def reset_personas(
    coordinator: EnrichmentCoordinator = Depends(coordinator_dep),
) -> dict[str, Any]:
    coordinator.reset_personas()
    return _state(coordinator)


@router.delete("/results")
async def clear_persona_results(
    coordinator: EnrichmentCoordinator = Depends(coordinator_dep),
) -> dict[str, Any]:
    coordinator.clear_personas()
    return _state(coordinator)


@router.delete("/error")
async def clear_persona_error(
    coordinator: EnrichmentCoordinator = Depends(coordinator_dep),
) -> dict[str, Any]:
    coordinator.clear_persona_error()
    return _state(coordinator)

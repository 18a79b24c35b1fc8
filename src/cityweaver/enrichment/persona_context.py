"""
cityweaver.enrichment.persona_context

Helpers that turn enriched styles into planning context.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from cityweaver.domain.models import EnhancedStyleSelection, PersonaResult, StyleSelection


@dataclass(frozen=True, slots=True)
class PersonaContext:
    dominant_persona: PersonaResult | None
    combined_interests: tuple[str, ...]
    description: str


def is_valid_persona(persona: PersonaResult) -> bool:
    return (
        bool(persona.name.strip())
        and bool(persona.tone.strip())
        and len(persona.backstory.strip()) > 10
    )


def build_persona_context(styles: Sequence[StyleSelection], location: str) -> PersonaContext:
    """
    The first enriched style with a usable persona provides the dominant persona.
    Without one the context falls back to the style names alone.
    """

    with_persona = [
        s
        for s in styles
        if isinstance(s, EnhancedStyleSelection)
        and s.persona is not None
        and is_valid_persona(s.persona)
    ]

    if not with_persona:
        return PersonaContext(
            dominant_persona=None,
            combined_interests=tuple(e for s in styles for e in s.examples),
            description=(
                f"A traveler interested in {', '.join(s.name for s in styles)} in {location}"
            ),
        )

    dominant = with_persona[0].persona
    assert dominant is not None
    if len(with_persona) == 1:
        description = f"{dominant.backstory} exploring {location}"
    else:
        names = " and ".join(s.persona.name for s in with_persona if s.persona is not None)
        description = f"A versatile traveler combining {names} approaches to explore {location}"

    return PersonaContext(
        dominant_persona=dominant,
        combined_interests=tuple(i for s in styles for i in (s.name, *s.examples)),
        description=description,
    )

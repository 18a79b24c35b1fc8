"""
cityweaver.providers.personas

Persona-generation client.

Responsibilities:
- Single persona generation for an (interests, location) pair.
- Batch generation, one entry per style.
- Location-based persona suggestions.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from cityweaver.domain.errors import ProviderTransportError
from cityweaver.domain.models import PersonaResult
from cityweaver.providers.http import ProviderHttpClient


@dataclass(frozen=True, slots=True)
class PersonaBatchItem:
    style_id: str
    interests: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class PersonaBatch:
    status: str
    # Missing key or None value: no persona for that style.
    personas: dict[str, PersonaResult | None]


class PersonaProvider(Protocol):
    async def generate(self, *, interests: Sequence[str], location: str) -> PersonaResult: ...

    async def generate_batch(
        self, *, items: Sequence[PersonaBatchItem], location: str
    ) -> PersonaBatch: ...

    async def suggested(self, *, location: str) -> tuple[PersonaResult, ...]: ...


class PersonasApiClient:
    def __init__(self, *, client: ProviderHttpClient, prefix: str = "/api/personas") -> None:
        self._client = client
        self._prefix = prefix.rstrip("/")

    async def generate(self, *, interests: Sequence[str], location: str) -> PersonaResult:
        payload = await self._client.post_json(
            f"{self._prefix}/generate",
            json={"interests": list(interests), "location": location},
        )
        return parse_persona(payload, interests=interests, location=location)

    async def generate_batch(
        self, *, items: Sequence[PersonaBatchItem], location: str
    ) -> PersonaBatch:
        payload = await self._client.post_json(
            f"{self._prefix}/batch",
            json={
                "location": location,
                "items": [{"style_id": i.style_id, "interests": list(i.interests)} for i in items],
            },
        )
        if not isinstance(payload, dict) or "status" not in payload:
            raise ProviderTransportError("Failed to generate personas for travel styles")
        results = payload.get("results") or []
        if not isinstance(results, list):
            raise ProviderTransportError("Failed to generate personas for travel styles")

        by_id = {i.style_id: i for i in items}
        personas: dict[str, PersonaResult | None] = {}
        for entry in results:
            if not isinstance(entry, dict):
                raise ProviderTransportError("Failed to generate personas for travel styles")
            style_id = str(entry.get("style_id", ""))
            item = by_id.get(style_id)
            raw = entry.get("persona")
            if item is None:
                continue
            personas[style_id] = (
                parse_persona(raw, interests=item.interests, location=location) if raw else None
            )
        return PersonaBatch(status=str(payload["status"]), personas=personas)

    async def suggested(self, *, location: str) -> tuple[PersonaResult, ...]:
        payload = await self._client.get_json(
            f"{self._prefix}/suggested", params={"location": location}
        )
        if not isinstance(payload, dict):
            raise ProviderTransportError("Failed to get suggested personas")
        raw = payload.get("personas") or []
        if not isinstance(raw, list):
            raise ProviderTransportError("Failed to get suggested personas")
        return tuple(parse_persona(p, interests=(), location=location) for p in raw)


def parse_persona(payload: Any, *, interests: Sequence[str], location: str) -> PersonaResult:
    try:
        return PersonaResult(
            name=str(payload["name"]),
            backstory=str(payload["backstory"]),
            tone=str(payload["tone"]),
            interests=tuple(interests),
            location=location,
        )
    except (KeyError, TypeError) as e:
        raise ProviderTransportError("Malformed persona payload") from e


# --- Module Notes -----------------------------------------------------------
# The provider's persona body carries no (interests, location) echo; the client
# stamps the request's pair onto each result so later readers know its origin.

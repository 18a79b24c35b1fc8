"""
cityweaver.enrichment.persona_log

Append-only log of every persona resolved during a coordinator's lifetime.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from cityweaver.domain.models import PersonaResult


class PersonaLog:
    """
    Owned by the coordinator and handed by reference to the persona enricher.
    There is no removal API.
    """

    def __init__(self) -> None:
        self._items: list[PersonaResult] = []

    def append(self, persona: PersonaResult) -> None:
        self._items.append(persona)

    def extend(self, personas: Iterable[PersonaResult]) -> None:
        self._items.extend(personas)

    def snapshot(self) -> tuple[PersonaResult, ...]:
        return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[PersonaResult]:
        return iter(tuple(self._items))

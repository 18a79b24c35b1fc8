"""
tests.test_persona_enricher

All-or-degrade enrichment and the append-only persona log.

Responsibilities:
- A failed batch returns every input style, unmodified, as `Degraded`.
- Only resolved personas are appended to the log, in input order.
- Fan-out degrades only when every per-style call fails.
"""

from __future__ import annotations

from collections.abc import Sequence

import pytest

from cityweaver.domain.errors import ProviderTransportError
from cityweaver.domain.models import (
    Degraded,
    EnhancedStyleSelection,
    Enriched,
    PersonaResult,
    StyleSelection,
)
from cityweaver.enrichment.persona_enricher import PersonaEnricher, style_interests
from cityweaver.enrichment.persona_log import PersonaLog
from cityweaver.providers.personas import PersonaBatch, PersonaBatchItem

STYLES = (
    StyleSelection(id="a", name="Urban Explorer", description="", icon="", examples=("Markets",)),
    StyleSelection(id="b", name="History Buff", description="", icon="", examples=("Museums",)),
    StyleSelection(id="c", name="Nature Seeker", description="", icon="", examples=("Parks",)),
)


def _persona(name: str, location: str = "Lisbon") -> PersonaResult:
    return PersonaResult(
        name=name, backstory=f"{name} backstory text", tone="warm", location=location
    )


class FakePersonas:
    def __init__(self) -> None:
        self.batch: PersonaBatch | Exception = PersonaBatch(status="OK", personas={})
        self.generate_error: dict[str, Exception] = {}
        self.suggested_result: tuple[PersonaResult, ...] | Exception = ()
        self.batch_items: list[PersonaBatchItem] = []

    async def generate(self, *, interests: Sequence[str], location: str) -> PersonaResult:
        key = interests[0] if interests else ""
        if key in self.generate_error:
            raise self.generate_error[key]
        return _persona(f"{key} Persona", location)

    async def generate_batch(
        self, *, items: Sequence[PersonaBatchItem], location: str
    ) -> PersonaBatch:
        self.batch_items = list(items)
        if isinstance(self.batch, Exception):
            raise self.batch
        return self.batch

    async def suggested(self, *, location: str) -> tuple[PersonaResult, ...]:
        if isinstance(self.suggested_result, Exception):
            raise self.suggested_result
        return self.suggested_result


def _enricher(provider: FakePersonas, **kwargs) -> tuple[PersonaEnricher, PersonaLog]:
    log = PersonaLog()
    return PersonaEnricher(provider=provider, persona_log=log, **kwargs), log


@pytest.mark.asyncio
async def test_batch_failure_returns_inputs_unmodified() -> None:
    provider = FakePersonas()
    provider.batch = ProviderTransportError("HTTP 500", status_code=500)
    enricher, log = _enricher(provider)

    outcome = await enricher.generate_personas_for_styles(STYLES, "Lisbon")

    assert isinstance(outcome, Degraded)
    assert outcome.styles == STYLES
    assert outcome.reason == "HTTP 500"
    assert len(log) == 0
    snap = enricher.snapshot()
    assert snap.error == "HTTP 500"
    assert snap.data.last_outcome == outcome
    assert snap.is_loading is False


@pytest.mark.asyncio
async def test_non_ok_batch_status_degrades() -> None:
    provider = FakePersonas()
    provider.batch = PersonaBatch(status="ERROR", personas={})
    enricher, _ = _enricher(provider)

    outcome = await enricher.generate_personas_for_styles(STYLES, "Lisbon")

    assert isinstance(outcome, Degraded)
    assert outcome.reason == "Failed to generate personas for styles: ERROR"
    assert enricher.snapshot().error_kind == "domain"


@pytest.mark.asyncio
async def test_partial_batch_appends_only_resolved_personas() -> None:
    provider = FakePersonas()
    provider.batch = PersonaBatch(
        status="OK",
        personas={"a": _persona("A"), "b": None, "c": _persona("C")},
    )
    enricher, log = _enricher(provider)
    log.append(_persona("Earlier"))

    outcome = await enricher.generate_personas_for_styles(STYLES, "Lisbon")

    assert isinstance(outcome, Enriched)
    assert [s.id for s in outcome.styles] == ["a", "b", "c"]
    assert all(isinstance(s, EnhancedStyleSelection) for s in outcome.styles)
    assert outcome.styles[1].persona is None
    assert [p.name for p in log] == ["Earlier", "A", "C"]
    assert enricher.snapshot().data.enhanced_styles == outcome.styles


@pytest.mark.asyncio
async def test_batch_sends_name_and_examples_as_interests() -> None:
    provider = FakePersonas()
    enricher, _ = _enricher(provider)

    await enricher.generate_personas_for_styles(STYLES[:1], "Lisbon")

    assert provider.batch_items == [
        PersonaBatchItem(style_id="a", interests=("Urban Explorer", "Markets"))
    ]


@pytest.mark.asyncio
async def test_empty_styles_is_a_no_op() -> None:
    provider = FakePersonas()
    provider.batch = ProviderTransportError("should not be called")
    enricher, log = _enricher(provider)

    outcome = await enricher.generate_personas_for_styles([], "Lisbon")

    assert outcome == Enriched(styles=())
    assert provider.batch_items == []
    assert enricher.snapshot().error is None
    assert len(log) == 0


@pytest.mark.asyncio
async def test_fanout_partial_failure_still_enriches() -> None:
    provider = FakePersonas()
    provider.generate_error["History Buff"] = ProviderTransportError("HTTP 502")
    enricher, log = _enricher(provider, strategy="fanout", fanout_concurrency=2)

    outcome = await enricher.generate_personas_for_styles(STYLES, "Lisbon")

    assert isinstance(outcome, Enriched)
    assert [s.persona is not None for s in outcome.styles] == [True, False, True]
    assert [p.name for p in log] == ["Urban Explorer Persona", "Nature Seeker Persona"]
    assert enricher.snapshot().error is None


@pytest.mark.asyncio
async def test_fanout_total_failure_degrades() -> None:
    provider = FakePersonas()
    for style in STYLES:
        provider.generate_error[style.name] = ProviderTransportError("Request timeout")
    enricher, log = _enricher(provider, strategy="fanout")

    outcome = await enricher.generate_personas_for_styles(STYLES, "Lisbon")

    assert isinstance(outcome, Degraded)
    assert outcome.styles == STYLES
    assert len(log) == 0


@pytest.mark.asyncio
async def test_generate_persona_failure_returns_none() -> None:
    provider = FakePersonas()
    provider.generate_error["Food"] = ProviderTransportError("Request timeout", status_code=408)
    enricher, log = _enricher(provider)

    assert await enricher.generate_persona(["Food"], "Tokyo") is None
    assert enricher.snapshot().error == "Request timeout"

    persona = await enricher.generate_persona(["Art"], "Tokyo")
    assert persona is not None
    assert enricher.snapshot().error is None
    assert enricher.snapshot().data.last_persona == persona
    assert log.snapshot() == (persona,)


@pytest.mark.asyncio
async def test_suggested_personas_are_logged() -> None:
    provider = FakePersonas()
    provider.suggested_result = (_persona("Local Explorer"), _persona("Culture Seeker"))
    enricher, log = _enricher(provider)

    suggested = await enricher.get_suggested_personas("Lisbon")

    assert [p.name for p in suggested] == ["Local Explorer", "Culture Seeker"]
    assert len(log) == 2

    provider.suggested_result = ProviderTransportError("HTTP 503")
    assert await enricher.get_suggested_personas("Lisbon") == []
    assert enricher.snapshot().error == "HTTP 503"


@pytest.mark.asyncio
async def test_clear_personas_keeps_log() -> None:
    provider = FakePersonas()
    provider.batch = PersonaBatch(status="OK", personas={"a": _persona("A")})
    enricher, log = _enricher(provider)
    await enricher.generate_personas_for_styles(STYLES[:1], "Lisbon")

    enricher.clear_personas()

    assert enricher.snapshot().data.enhanced_styles == ()
    assert len(log) == 1


def test_style_interests_strips_control_characters() -> None:
    style = StyleSelection(
        id="x", name="Night\x00life", description="", icon="", examples=("\x07", "Bars")
    )

    assert style_interests(style) == ("Nightlife", "Bars")

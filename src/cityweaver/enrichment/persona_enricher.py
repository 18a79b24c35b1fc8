"""
cityweaver.enrichment.persona_enricher

AI persona enrichment for travel styles.

Responsibilities:
- Single persona generation (None + captured error on failure).
- Style enrichment across N styles with an all-or-degrade policy: the caller
  always gets back every style it asked about, enriched or not.
- Location-based persona suggestions.
- Append every resolved persona to the shared `PersonaLog`.
"""

from __future__ import annotations

import asyncio
import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

from cityweaver.domain.errors import DomainStatusError, EnrichmentError
from cityweaver.domain.models import (
    Degraded,
    EnhancedStyleSelection,
    Enriched,
    PersonaResult,
    StyleEnrichment,
    StyleSelection,
)
from cityweaver.enrichment.generations import GenerationCounter
from cityweaver.enrichment.persona_log import PersonaLog
from cityweaver.enrichment.state import ConcernState, Snapshot
from cityweaver.observability.logging import get_logger
from cityweaver.providers.personas import PersonaBatchItem, PersonaProvider

log = get_logger(__name__)

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


@dataclass(frozen=True, slots=True)
class PersonaData:
    enhanced_styles: tuple[StyleSelection, ...] = ()
    last_outcome: StyleEnrichment | None = None
    last_persona: PersonaResult | None = None
    suggested: tuple[PersonaResult, ...] = ()


def clean_text(value: str) -> str:
    return _CONTROL_CHARS.sub("", value)


def style_interests(style: StyleSelection) -> tuple[str, ...]:
    cleaned = (clean_text(v) for v in (style.name, *style.examples))
    return tuple(v for v in cleaned if v.strip())


class PersonaEnricher:
    def __init__(
        self,
        *,
        provider: PersonaProvider,
        persona_log: PersonaLog,
        strategy: Literal["batch", "fanout"] = "batch",
        fanout_concurrency: int = 4,
    ) -> None:
        self._provider = provider
        self._log = persona_log
        self._strategy = strategy
        self._fanout_concurrency = fanout_concurrency
        self._state: ConcernState[PersonaData] = ConcernState(PersonaData())
        self._single_gen = GenerationCounter()
        self._styles_gen = GenerationCounter()
        self._suggested_gen = GenerationCounter()

    @property
    def state(self) -> ConcernState[PersonaData]:
        return self._state

    @property
    def personas(self) -> tuple[PersonaResult, ...]:
        return self._log.snapshot()

    def snapshot(self) -> Snapshot[PersonaData]:
        return self._state.snapshot()

    async def generate_persona(
        self, interests: Sequence[str], location: str
    ) -> PersonaResult | None:
        token = self._single_gen.issue()
        with self._state.loading():
            try:
                persona = await self._provider.generate(
                    interests=list(interests), location=location
                )
            except EnrichmentError as e:
                log.warning("persona.generate_failed", kind=e.kind, error=e.message)
                if not token.cancelled:
                    self._state.fail(e)
                return None

            self._log.append(persona)
            if not token.cancelled:
                self._state.commit(last_persona=persona)
            return persona

    async def generate_personas_for_styles(
        self, styles: Sequence[StyleSelection], location: str
    ) -> StyleEnrichment:
        styles = tuple(styles)
        if not styles:
            return Enriched(styles=())

        token = self._styles_gen.issue()
        location = clean_text(location)
        with self._state.loading():
            try:
                if self._strategy == "fanout":
                    by_id = await self._fanout(styles, location)
                else:
                    by_id = await self._batch(styles, location)
            except EnrichmentError as e:
                degraded = Degraded(styles=styles, reason=e.message)
                log.warning(
                    "persona.styles_degraded",
                    strategy=self._strategy,
                    kind=e.kind,
                    error=e.message,
                    styles=len(styles),
                )
                if not token.cancelled:
                    self._state.fail(e, last_outcome=degraded)
                return degraded

            enhanced = tuple(EnhancedStyleSelection.from_style(s, by_id.get(s.id)) for s in styles)
            outcome = Enriched(styles=enhanced)
            self._log.extend(outcome.personas)
            log.info(
                "persona.styles_enriched",
                strategy=self._strategy,
                styles=len(styles),
                enriched=len(outcome.personas),
            )
            if not token.cancelled:
                self._state.commit(enhanced_styles=enhanced, last_outcome=outcome)
            return outcome

    async def get_suggested_personas(self, location: str) -> list[PersonaResult]:
        token = self._suggested_gen.issue()
        with self._state.loading():
            try:
                suggested = await self._provider.suggested(location=location)
            except EnrichmentError as e:
                log.warning("persona.suggested_failed", kind=e.kind, error=e.message)
                if not token.cancelled:
                    self._state.fail(e)
                return []

            self._log.extend(suggested)
            if not token.cancelled:
                self._state.commit(suggested=suggested)
            return list(suggested)

    def clear_error(self) -> None:
        self._state.clear_error()

    def clear_personas(self) -> None:
        # The log is append-only; only the derived views are cleared.
        self._styles_gen.invalidate()
        self._state.update(enhanced_styles=(), last_outcome=None, last_persona=None, suggested=())

    def reset(self) -> None:
        self._single_gen.invalidate()
        self._styles_gen.invalidate()
        self._suggested_gen.invalidate()
        self._state.reset()

    async def _batch(
        self, styles: tuple[StyleSelection, ...], location: str
    ) -> dict[str, PersonaResult | None]:
        items = [PersonaBatchItem(style_id=s.id, interests=style_interests(s)) for s in styles]
        batch = await self._provider.generate_batch(items=items, location=location)
        if batch.status != "OK":
            raise DomainStatusError(
                f"Failed to generate personas for styles: {batch.status}", status=batch.status
            )
        return batch.personas

    async def _fanout(
        self, styles: tuple[StyleSelection, ...], location: str
    ) -> dict[str, PersonaResult | None]:
        sem = asyncio.Semaphore(self._fanout_concurrency)

        async def one(style: StyleSelection) -> PersonaResult:
            async with sem:
                return await self._provider.generate(
                    interests=list(style_interests(style)), location=location
                )

        results = await asyncio.gather(*(one(s) for s in styles), return_exceptions=True)

        by_id: dict[str, PersonaResult | None] = {}
        failures: list[EnrichmentError] = []
        for style, result in zip(styles, results, strict=True):
            if isinstance(result, EnrichmentError):
                failures.append(result)
                by_id.setdefault(style.id, None)
            elif isinstance(result, BaseException):
                raise result
            else:
                by_id[style.id] = result

        if len(failures) == len(styles):
            raise failures[0]
        if failures:
            log.info("persona.fanout_partial", failed=len(failures), total=len(styles))
        return by_id


# --- Module Notes -----------------------------------------------------------
# Enrichment is additive: a style without a persona is valid data, not an error.
# Only a whole-batch failure is recorded as the concern's error.

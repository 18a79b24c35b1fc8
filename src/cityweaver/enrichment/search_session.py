"""
cityweaver.enrichment.search_session

Debounced geocoding search for one user-driven text input.

Responsibilities:
- Debounce rapid edits; dispatch one lookup per settled query.
- Discard responses for superseded queries (token check before commit).
- Cancel pending timers on clear/teardown so nothing fires afterwards.

State machine (re-entrant from any state via `submit`):

    idle -> searching -> idle(with suggestions) | idle(with error)
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from cityweaver.domain.errors import EnrichmentError
from cityweaver.domain.models import LocationSuggestion
from cityweaver.enrichment.generations import CancellationToken, GenerationCounter
from cityweaver.enrichment.state import ConcernState, Snapshot
from cityweaver.observability.logging import get_logger
from cityweaver.providers.geocoding import Geocoder


@dataclass(frozen=True, slots=True)
class SearchData:
    query: str = ""
    suggestions: tuple[LocationSuggestion, ...] = ()

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(s.name for s in self.suggestions)


class DebouncedSearchSession:
    def __init__(
        self,
        *,
        geocoder: Geocoder,
        debounce_seconds: float = 0.3,
        min_query_length: int = 2,
        result_limit: int = 5,
        name: str = "default",
    ) -> None:
        self._geocoder = geocoder
        self._debounce = debounce_seconds
        self._min_len = min_query_length
        self._limit = result_limit
        self.name = name
        self._log = get_logger(__name__, session=name)

        self._state: ConcernState[SearchData] = ConcernState(SearchData())
        self._tokens = GenerationCounter()
        self._timer: asyncio.TimerHandle | None = None
        self._in_flight: set[asyncio.Task[None]] = set()
        self._closed = False

    # --- Reads ---------------------------------------------------------------

    @property
    def suggestions(self) -> tuple[LocationSuggestion, ...]:
        return self._state.data.suggestions

    @property
    def is_searching(self) -> bool:
        return self._state.is_loading

    @property
    def error(self) -> str | None:
        return self._state.error

    @property
    def has_pending_timer(self) -> bool:
        return self._timer is not None

    def snapshot(self) -> Snapshot[SearchData]:
        return self._state.snapshot()

    # --- Commands ------------------------------------------------------------

    def submit(self, query: str) -> None:
        """
        Schedule a search for `query`, superseding anything scheduled or in flight.

        Must be called from inside a running event loop.
        """

        if self._closed:
            self._log.debug("search.submit_after_close")
            return

        self._cancel_timer()
        token = self._tokens.issue()

        if len(query) < self._min_len:
            # Input-rejected: synchronous, no network, no error surfaced.
            self._state.set_loading(False)
            self._state.update(query=query, suggestions=())
            return

        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self._debounce, self._fire, query, token)

    def clear(self) -> None:
        self._cancel_timer()
        self._tokens.invalidate()
        self._state.set_loading(False)
        self._state.reset()

    async def aclose(self) -> None:
        self.clear()
        self._closed = True
        # Dispatched lookups run to completion; their results are already stale.
        if self._in_flight:
            await asyncio.gather(*self._in_flight, return_exceptions=True)

    # --- Internals -----------------------------------------------------------

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _fire(self, query: str, token: CancellationToken) -> None:
        self._timer = None
        if token.cancelled:
            return
        self._state.set_loading(True)
        task = asyncio.ensure_future(self._dispatch(query, token))
        self._in_flight.add(task)
        task.add_done_callback(self._on_done)

    def _on_done(self, task: asyncio.Task[None]) -> None:
        self._in_flight.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._log.error("search.crashed", exc_info=exc)

    async def _dispatch(self, query: str, token: CancellationToken) -> None:
        if token.cancelled:
            return
        self._log.info("search.dispatched", query=query, token=token.generation)
        try:
            results = await self._geocoder.search(query, limit=self._limit)
        except EnrichmentError as e:
            if not self._tokens.is_current(token):
                self._log.debug("search.stale_discarded", token=token.generation)
                return
            self._log.warning("search.failed", query=query, error=e.message)
            self._state.fail(e, query=query, suggestions=())
            self._state.set_loading(False)
            return

        if not self._tokens.is_current(token):
            self._log.debug("search.stale_discarded", token=token.generation)
            return

        self._state.commit(query=query, suggestions=results[: self._limit])
        self._state.set_loading(False)
        self._log.info("search.completed", count=len(results))


# --- Module Notes -----------------------------------------------------------
# The debounce timer is the only cancellable unit. A lookup already sent is never
# aborted; superseding it only guarantees its result is never applied.

"""
cityweaver.enrichment.generations

Staleness tracking for overlapping async calls.

Responsibilities:
- Hand every dispatched call a cancellation token.
- Cancel the previous token when a newer call (or a reset) supersedes it.

A token is checked twice: before sending (abort-before-send) and before the
result is committed to state (ignore-on-arrival).
"""

from __future__ import annotations


class CancellationToken:
    __slots__ = ("generation", "_cancelled")

    def __init__(self, generation: int) -> None:
        self.generation = generation
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def __repr__(self) -> str:
        return f"CancellationToken(generation={self.generation}, cancelled={self._cancelled})"


class GenerationCounter:
    """
    Monotonic per-operation counter; only the latest issued token is live.
    """

    def __init__(self) -> None:
        self._generation = 0
        self._live: CancellationToken | None = None

    @property
    def current(self) -> int:
        return self._generation

    def issue(self) -> CancellationToken:
        self.invalidate()
        token = CancellationToken(self._generation)
        self._live = token
        return token

    def invalidate(self) -> None:
        if self._live is not None:
            self._live.cancel()
            self._live = None
        self._generation += 1

    def is_current(self, token: CancellationToken) -> bool:
        return not token.cancelled and token.generation == self._generation

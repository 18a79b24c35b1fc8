"""
cityweaver.enrichment.state

Per-concern state holder shared by the enrichment components.

Responsibilities:
- Keep `data`, the last error message and the failure object for one concern.
- Track in-flight calls so `is_loading` stays true until the last one settles.
- Produce immutable `{is_loading, error, data}` snapshots for readers.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Generic, Literal, TypeVar

from cityweaver.domain.errors import EnrichmentError

T = TypeVar("T")


@dataclass(frozen=True)
class Snapshot(Generic[T]):
    is_loading: bool
    error: str | None
    data: T
    # "transport" or "domain" when `error` is set.
    error_kind: Literal["transport", "domain"] | None = None


class ConcernState(Generic[T]):
    """
    `data` must be a frozen dataclass; updates go through `dataclasses.replace`
    so readers holding an older snapshot never see it change.
    """

    def __init__(self, initial: T) -> None:
        self._initial = initial
        self._data = initial
        self._in_flight = 0
        self.error: str | None = None
        self.failure: EnrichmentError | None = None

    @property
    def data(self) -> T:
        return self._data

    @property
    def is_loading(self) -> bool:
        return self._in_flight > 0

    @contextmanager
    def loading(self) -> Iterator[None]:
        self._in_flight += 1
        try:
            yield
        finally:
            self._in_flight -= 1

    def set_loading(self, loading: bool) -> None:
        # For single-flight owners (search sessions) that settle by token, not by count.
        self._in_flight = 1 if loading else 0

    def update(self, **changes: Any) -> None:
        if changes:
            self._data = dataclasses.replace(self._data, **changes)  # type: ignore[type-var]

    def commit(self, **changes: Any) -> None:
        self.update(**changes)
        self.clear_error()

    def fail(self, error: EnrichmentError, **changes: Any) -> None:
        self.update(**changes)
        self.error = error.message
        self.failure = error

    def clear_error(self) -> None:
        self.error = None
        self.failure = None

    def reset(self) -> None:
        self._data = self._initial
        self.clear_error()

    def snapshot(self) -> Snapshot[T]:
        return Snapshot(
            is_loading=self.is_loading,
            error=self.error,
            data=self._data,
            error_kind=self.failure.kind if self.failure is not None else None,
        )

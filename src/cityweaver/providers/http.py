"""
cityweaver.providers.http

Shared HTTP boundary for provider calls.

Responsibilities:
- Issue JSON requests over a caller-owned `httpx.AsyncClient`.
- Retry network errors and 5xx responses with a linear backoff; never retry 4xx.
- Convert timeouts, connection errors, non-2xx responses and unparseable bodies
  into `ProviderTransportError`.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any

import httpx

from cityweaver.domain.errors import ProviderTransportError
from cityweaver.observability.logging import get_logger
from cityweaver.settings import Settings

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    attempts: int = 3
    delay_seconds: float = 1.0

    @classmethod
    def from_settings(cls, settings: Settings) -> RetryPolicy:
        return cls(
            attempts=settings.http_retry_attempts,
            delay_seconds=settings.http_retry_delay_seconds,
        )


class ProviderHttpClient:
    """
    Thin JSON wrapper; the `httpx.AsyncClient` (base_url, transport, timeout) is
    owned by the caller so tests and the API can swap transports.
    """

    def __init__(
        self,
        *,
        http: httpx.AsyncClient,
        retry: RetryPolicy | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self._http = http
        self._retry = retry or RetryPolicy()
        self._headers = dict(headers or {})

    async def get_json(self, path: str, *, params: dict[str, Any] | None = None) -> Any:
        return await self._request("GET", path, params=params)

    async def post_json(self, path: str, *, json: Any) -> Any:
        return await self._request("POST", path, json=json)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        last_error: ProviderTransportError | None = None
        for attempt in range(1, self._retry.attempts + 1):
            try:
                return await self._once(method, path, params=params, json=json)
            except ProviderTransportError as e:
                last_error = e
                if not e.retryable or attempt == self._retry.attempts:
                    break
                log.warning(
                    "provider.retry",
                    method=method,
                    path=path,
                    attempt=attempt,
                    status_code=e.status_code,
                    error=e.message,
                )
                await asyncio.sleep(self._retry.delay_seconds * attempt)

        assert last_error is not None
        raise last_error

    async def _once(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None,
        json: Any,
    ) -> Any:
        try:
            r = await self._http.request(
                method, path, params=params, json=json, headers=self._headers
            )
        except httpx.TimeoutException as e:
            raise ProviderTransportError("Request timeout", status_code=408, retryable=True) from e
        except httpx.HTTPError as e:
            raise ProviderTransportError(str(e) or "Network error", retryable=True) from e

        if r.is_success:
            try:
                return r.json()
            except ValueError as e:
                raise ProviderTransportError(
                    "Malformed response from provider", status_code=r.status_code
                ) from e

        # 5xx is worth retrying; 4xx means the request itself is wrong.
        raise ProviderTransportError(
            _error_message(r),
            status_code=r.status_code,
            retryable=r.status_code >= 500,
        )


def _error_message(r: httpx.Response) -> str:
    try:
        body = r.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        msg = body.get("error") or body.get("message") or body.get("detail")
        if isinstance(msg, str) and msg:
            return msg
    return f"HTTP {r.status_code}"


# --- Module Notes -----------------------------------------------------------
# Timeouts are enforced by the AsyncClient's `timeout`; a hung call is bounded by
# `http_timeout_seconds` times the number of attempts.

"""
cityweaver.observability.middleware

Request-scoped logging context and access logs.

Responsibilities:
- Accept or mint an `x-request-id` and echo it on the response.
- Bind request metadata (plus the search session id, when present) into
  structlog contextvars.
- Emit one `http.request` event per request with status and latency.
"""

from __future__ import annotations

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from cityweaver.observability.logging import get_logger

log = get_logger(__name__)

_SEARCH_PREFIX = "/v1/search/"
# Dummy provider hops are logged by the provider client, not as access logs.
_QUIET_PREFIXES = ("/internal/", "/healthz", "/readyz")


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        path = request.url.path

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id, path=path, method=request.method
        )
        if path.startswith(_SEARCH_PREFIX):
            structlog.contextvars.bind_contextvars(session=path[len(_SEARCH_PREFIX) :])

        started = time.perf_counter()
        try:
            response: Response = await call_next(request)
            if not path.startswith(_QUIET_PREFIXES):
                log.info(
                    "http.request",
                    status_code=response.status_code,
                    duration_ms=round((time.perf_counter() - started) * 1000, 1),
                )
        finally:
            structlog.contextvars.clear_contextvars()

        response.headers["x-request-id"] = request_id
        return response


# --- Module Notes -----------------------------------------------------------
# Background work spawned during a request (debounce timers, in-flight lookups)
# copies the context at creation time, so its log lines keep the request id.

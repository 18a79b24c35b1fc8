"""
cityweaver.observability.logging

Structured logging for the enrichment service.

Responsibilities:
- Configure `structlog` once per process: JSON for deployments, console for local dev.
- Stamp every event with the service name and clip user-typed search text.
- Hand out named loggers, optionally pre-bound to a component instance.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Literal

import structlog

# Search queries are user input of arbitrary length; logs keep a prefix.
MAX_LOGGED_QUERY = 80


def configure_logging(
    *, service_name: str, level: str, fmt: Literal["json", "console"] = "json"
) -> None:
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    renderer: Any
    if fmt == "console":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            _add_service_name(service_name),
            _clip_query,
            structlog.processors.dict_tracebacks,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def _add_service_name(service_name: str):
    def processor(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        event_dict.setdefault("service", service_name)
        return event_dict

    return processor


def _clip_query(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    query = event_dict.get("query")
    if isinstance(query, str) and len(query) > MAX_LOGGED_QUERY:
        event_dict["query"] = query[:MAX_LOGGED_QUERY] + "..."
    return event_dict


def get_logger(name: str, **bindings: Any) -> structlog.stdlib.BoundLogger:
    logger = structlog.get_logger(name)
    return logger.bind(**bindings) if bindings else logger


# --- Module Notes -----------------------------------------------------------
# Components log event-style names (`search.dispatched`, `route.directions_failed`)
# so log queries stay stable when message wording changes.

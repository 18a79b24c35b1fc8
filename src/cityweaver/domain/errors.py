"""
cityweaver.domain.errors

Error taxonomy for the enrichment layer.

Responsibilities:
- Separate "the request could not be completed" (transport) from "the provider
  understood the request but reports a semantic failure" (domain status).
- Give every failure a user-facing message plus structured context for logs.
"""

from __future__ import annotations

from typing import ClassVar, Literal


class EnrichmentError(Exception):
    """
    Base class. Raised inside provider/parsing code and captured at the component
    boundary; contract methods never let it escape.
    """

    kind: ClassVar[Literal["transport", "domain"]]

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ProviderTransportError(EnrichmentError):
    """
    No response, timeout, non-2xx, or a body that could not be parsed.
    """

    kind = "transport"

    def __init__(self, message: str, *, status_code: int = 0, retryable: bool = False) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.retryable = retryable


class DomainStatusError(EnrichmentError):
    """
    The provider answered successfully but the payload encodes a failure.
    """

    kind = "domain"

    def __init__(self, message: str, *, status: str) -> None:
        super().__init__(message)
        self.status = status


class NoRouteFoundError(DomainStatusError):
    def __init__(self) -> None:
        super().__init__("No route found between the specified locations", status="ZERO_RESULTS")


class LocationNotFoundError(DomainStatusError):
    def __init__(self) -> None:
        super().__init__("One or more locations could not be found", status="NOT_FOUND")


# --- Module Notes -----------------------------------------------------------
# Input rejection (short query, empty style list) is not modeled here:
# it is a silent no-op, not an error.

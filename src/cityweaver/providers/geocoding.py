"""
cityweaver.providers.geocoding

Nominatim-compatible geocoding client.

Responsibilities:
- Free-text search returning ranked location suggestions.
- Keep provider rank order; cap to the requested limit.
"""

from __future__ import annotations

from typing import Any, Protocol

from cityweaver.domain.errors import ProviderTransportError
from cityweaver.domain.models import Coordinates, LocationSuggestion
from cityweaver.providers.http import ProviderHttpClient


class Geocoder(Protocol):
    async def search(self, query: str, *, limit: int) -> tuple[LocationSuggestion, ...]:
        """Return up to `limit` suggestions in provider rank order."""


class NominatimGeocoder:
    def __init__(self, *, client: ProviderHttpClient) -> None:
        self._client = client

    async def search(self, query: str, *, limit: int = 5) -> tuple[LocationSuggestion, ...]:
        payload = await self._client.get_json(
            "/search",
            params={"format": "json", "q": query, "limit": limit, "addressdetails": 1},
        )
        return parse_search_results(payload, limit=limit)


def parse_search_results(payload: Any, *, limit: int) -> tuple[LocationSuggestion, ...]:
    if not isinstance(payload, list):
        raise ProviderTransportError("Failed to fetch locations")

    out: list[LocationSuggestion] = []
    for item in payload[:limit]:
        try:
            out.append(
                LocationSuggestion(
                    name=str(item["display_name"]),
                    coordinates=Coordinates(
                        latitude=float(item["lat"]),
                        longitude=float(item["lon"]),
                    ),
                )
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ProviderTransportError("Failed to fetch locations") from e
    return tuple(out)


# --- Module Notes -----------------------------------------------------------
# Nominatim's usage policy requires an identifying User-Agent; it is set on the
# AsyncClient built in `cityweaver.api.deps`.

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Query

router = APIRouter()

# (display_name, lat, lon)
_GAZETTEER: tuple[tuple[str, float, float], ...] = (
    ("Paris, Île-de-France, France", 48.8566, 2.3522),
    ("Paris, Lamar County, Texas, United States", 33.6609, -95.5555),
    ("London, Greater London, England, United Kingdom", 51.5074, -0.1278),
    ("Lisbon, Portugal", 38.7223, -9.1393),
    ("Barcelona, Catalonia, Spain", 41.3874, 2.1686),
    ("Berlin, Germany", 52.52, 13.405),
    ("Tokyo, Japan", 35.6762, 139.6503),
    ("Kyoto, Kyoto Prefecture, Japan", 35.0116, 135.7681),
    ("New York, United States", 40.7128, -74.006),
    ("San Francisco, California, United States", 37.7749, -122.4194),
    ("Singapore", 1.3521, 103.8198),
    ("Sydney, New South Wales, Australia", -33.8688, 151.2093),
)


@router.get("/search")
async def search(
    q: str = Query(min_length=1),
    limit: int = Query(default=5, ge=1, le=50),
    format: str = "json",
    addressdetails: int = 0,
) -> list[dict[str, Any]]:
    _ = format, addressdetails
    needle = q.casefold()
    matches = [
        {"display_name": name, "lat": str(lat), "lon": str(lon)}
        for name, lat, lon in _GAZETTEER
        if needle in name.casefold()
    ]
    return matches[:limit]

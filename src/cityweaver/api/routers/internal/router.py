"""
cityweaver.api.routers.internal.router

Internal provider router aggregator.

Responsibilities:
- Mount per-provider dummy routers under `/internal/v1`, using the same paths
  the real providers expose so the clients need no special casing.
"""

from __future__ import annotations

from fastapi import APIRouter

from cityweaver.api.routers.internal.providers import geocoding, personas, routes

router = APIRouter(prefix="/internal/v1", tags=["internal"], include_in_schema=False)

router.include_router(geocoding.router, prefix="/geocoding")
router.include_router(routes.router, prefix="/api/routes")
router.include_router(personas.router, prefix="/api/personas")

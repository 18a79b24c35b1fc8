"""
cityweaver.api.routers.internal

Internal provider API package.

Responsibilities:
- Host dummy provider endpoints (geocoding, routes, personas) under `/internal/v1/*`.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# In production these providers are external services; the dummies keep the repo runnable offline.

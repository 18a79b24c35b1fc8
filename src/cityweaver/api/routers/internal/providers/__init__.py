"""
cityweaver.api.routers.internal.providers

Dummy provider implementations.

Responsibilities:
- Answer with the wire shapes the real geocoding, routes and persona providers use.
- Stay deterministic so responses are reproducible in tests and demos.
"""

# Package marker.

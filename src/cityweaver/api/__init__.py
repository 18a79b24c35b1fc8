"""
cityweaver.api

HTTP surface for the enrichment coordinator.

Responsibilities:
- App factory, dependency wiring, routers.
- In-process dummy provider endpoints for self-contained development.
"""

# Package marker.

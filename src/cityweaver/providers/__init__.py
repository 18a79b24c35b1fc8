"""
cityweaver.providers

Provider client package.

Responsibilities:
- Provide client interfaces for the geocoding, routes and persona providers.
- Translate every HTTP-level failure into `ProviderTransportError`.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Enrichment components depend on this boundary, never on httpx directly.

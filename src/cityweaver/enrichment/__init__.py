"""
cityweaver.enrichment

Enrichment orchestration package.

Responsibilities:
- Debounced geocoding search sessions.
- Route and distance-matrix resolution with status classification.
- Persona enrichment of travel styles with graceful degradation.
- The coordinator that exposes all three as `{is_loading, error, data}` concerns.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Call sites should go through `EnrichmentCoordinator`; the components are public
# mainly so tests can drive them in isolation.

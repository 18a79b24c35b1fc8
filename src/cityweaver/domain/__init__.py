"""
cityweaver.domain

Domain package.

Responsibilities:
- Immutable value types shared by providers, enrichment components and the API.
- The error taxonomy (transport vs domain-status failures).
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Nothing in this package performs I/O.

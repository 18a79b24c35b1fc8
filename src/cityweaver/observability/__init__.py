"""
cityweaver.observability

Logging setup and request-scoped log context.
"""

# Package marker.

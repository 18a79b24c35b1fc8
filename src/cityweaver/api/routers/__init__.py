"""
cityweaver.api.routers

Public (`/v1/*`) and internal (`/internal/v1/*`) routers.
"""

# Package marker.

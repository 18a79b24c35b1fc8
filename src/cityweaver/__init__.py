"""
cityweaver

City Weaver enrichment service: location search, route resolution and AI
persona enrichment behind one coordinator.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"

"""VIX-driven income rotation allocations and multi-agent analysis reports."""

__version__ = "0.1.0"

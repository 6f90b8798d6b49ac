"""Hierarchical block profiler with a haversine-pair JSON reader and report helpers."""

__version__ = "0.1.0"

__all__ = ["answers", "fileio", "jsonparser", "profiler", "report"]
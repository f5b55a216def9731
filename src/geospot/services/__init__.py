"""Service layer for geometry, settings, landmark lookup and background work."""

__all__ = [
    "geo",
    "landmarks",
    "settings_loader",
    "summaries",
    "tasks",
]

"""Route group exports."""

from . import health, routes, schedule

__all__ = ["schedule", "routes", "health"]

"""Route group exports."""

from . import health, plan, routes

__all__ = ["health", "plan", "routes"]

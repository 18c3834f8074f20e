"""Route group exports."""

from . import customers, health, reports

__all__ = ["customers", "health", "reports"]

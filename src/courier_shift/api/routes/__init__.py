"""Route group exports."""

from . import health, reports, shift

__all__ = ["shift", "health", "reports"]

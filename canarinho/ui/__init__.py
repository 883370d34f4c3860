"""Display collaborators for the tuner."""

from .console import ConsoleDisplay
from .gauge import needle_angle, render_gauge

__all__ = ["ConsoleDisplay", "needle_angle", "render_gauge"]

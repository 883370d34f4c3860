"""Core components for the Canarinho application."""

# Import interfaces for easier access
from .interfaces import (
    IFrameSource,
    IPitchDetector,
    ITuningDisplay,
    IFeedback,
)
from .config import TunerConfig, ConfigManager

__all__ = [
    "IFrameSource",
    "IPitchDetector",
    "ITuningDisplay",
    "IFeedback",
    "TunerConfig",
    "ConfigManager",
]

"""Services that run the tuner pipeline over a frame source."""

from .tuner_service import TunerPipeline, TunerSession

__all__ = ["TunerPipeline", "TunerSession"]

"""Canarinho - pitch detection and tuning feedback for stringed instruments."""

from .note_types import AudioFrame, NoteAssignment, TuningResult, TuningStatus, TuningUpdate
from .note_utils import map_to_note, get_note_name, note_frequency
from .audio.pitch_detector import PitchDetector
from .detection.tuning_state import TuningStateTracker, classify
from .services.tuner_service import TunerPipeline, TunerSession
from .core.config import TunerConfig

__version__ = "0.1.0"

__all__ = [
    "AudioFrame",
    "NoteAssignment",
    "PitchDetector",
    "TunerConfig",
    "TunerPipeline",
    "TunerSession",
    "TuningResult",
    "TuningStateTracker",
    "TuningStatus",
    "TuningUpdate",
    "classify",
    "get_note_name",
    "map_to_note",
    "note_frequency",
]

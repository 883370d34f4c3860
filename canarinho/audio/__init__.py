"""Audio side of the tuner: pitch detection, frame sources and feedback.

The live microphone source lives in ``canarinho.audio.audio_input`` and is not
imported here, so the rest of the package works without PortAudio.
"""

from .frames import ArrayFrameSource, AudioInputError, FrameMailbox, RollingWindow
from .pitch_detector import PitchDetector

__all__ = [
    "ArrayFrameSource",
    "AudioInputError",
    "FrameMailbox",
    "PitchDetector",
    "RollingWindow",
]

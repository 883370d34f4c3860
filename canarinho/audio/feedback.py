"""Audible confirmation played when a string comes into tune."""

from __future__ import annotations
import numpy as np
from typing import Callable, Optional

from ..logger import get_logger
from ..core.interfaces import IFeedback

logger = get_logger(__name__)

BELL_FREQUENCY = 1200.0  # Hz
BELL_DURATION = 0.5  # seconds
BELL_PEAK_GAIN = 0.3
BELL_ATTACK = 0.01  # seconds to reach the peak gain
BELL_FLOOR_GAIN = 0.001  # gain reached at the end of the decay


def synthesize_bell(
    sample_rate: int = 44100,
    frequency: float = BELL_FREQUENCY,
    duration: float = BELL_DURATION,
) -> np.ndarray:
    """Render a short "ding": a sine with a fast linear attack and exponential decay.

    Returns:
        float32 mono samples
    """
    n = int(round(sample_rate * duration))
    t = np.arange(n) / sample_rate

    attack = min(BELL_ATTACK, duration)
    envelope = np.empty(n)
    rising = t < attack
    envelope[rising] = BELL_PEAK_GAIN * t[rising] / attack
    # Exponential ramp from the peak at the end of the attack to the floor at the end
    decay_time = max(duration - attack, 1e-9)
    ratio = BELL_FLOOR_GAIN / BELL_PEAK_GAIN
    envelope[~rising] = BELL_PEAK_GAIN * ratio ** ((t[~rising] - attack) / decay_time)

    return (envelope * np.sin(2 * np.pi * frequency * t)).astype(np.float32)


def _play_with_sounddevice(samples: np.ndarray, sample_rate: int) -> None:
    # Imported here so the tuner core never needs PortAudio
    import sounddevice as sd

    sd.play(samples, sample_rate)


class BellFeedback(IFeedback):
    """Plays the bell once per call, without blocking the detection loop."""

    def __init__(
        self,
        sample_rate: int = 44100,
        player: Optional[Callable[[np.ndarray, int], None]] = None,
        enabled: bool = True,
    ) -> None:
        """Initialize the bell.

        Args:
            sample_rate: Output sample rate in Hz
            player: Function playing (samples, sample_rate), defaults to sounddevice
            enabled: If False, play() only logs
        """
        self._sample_rate = sample_rate
        self._player = player or _play_with_sounddevice
        self._enabled = enabled
        self._samples = synthesize_bell(sample_rate)
        self.play_count = 0

    def play(self) -> None:
        self.play_count += 1
        if not self._enabled:
            logger.debug("Bell disabled, skipping confirmation tone")
            return
        try:
            self._player(self._samples, self._sample_rate)
        except Exception as e:
            # A missing output device must not stop the tuner
            logger.error(f"Could not play confirmation tone: {e}")

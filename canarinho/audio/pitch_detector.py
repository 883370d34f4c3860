"""Fundamental frequency estimation by time-domain autocorrelation."""

from __future__ import annotations
import numpy as np
from typing import Optional, Tuple, ClassVar, TypeAlias

from ..logger import get_logger
from ..note_types import AudioFrame
from ..core.interfaces import IPitchDetector

logger = get_logger(__name__)


class PitchDetector(IPitchDetector):
    """Estimates the fundamental frequency of a single audio frame.

    The frame is gated on RMS, trimmed to the part between the first and last
    quiet samples, autocorrelated, and the period is read off the strongest
    correlation peak after the zero-lag lobe, refined by parabolic
    interpolation. The cost is quadratic in the trimmed frame length.
    """

    # Type aliases
    Frequency: TypeAlias = float
    Amplitude: TypeAlias = float

    DEFAULT_SILENCE_RMS: ClassVar[Amplitude] = 0.01  # Below this the frame is noise floor
    DEFAULT_TRIM_AMPLITUDE: ClassVar[Amplitude] = 0.2  # Amplitude that marks a trim point

    def __init__(
        self,
        silence_rms: float = DEFAULT_SILENCE_RMS,
        trim_amplitude: float = DEFAULT_TRIM_AMPLITUDE,
    ) -> None:
        """Initialize the PitchDetector.

        Args:
            silence_rms: Minimum RMS amplitude for a frame to be analysed
            trim_amplitude: Absolute amplitude below which a sample can start or end the working window
        """
        self._silence_rms = silence_rms
        self._trim_amplitude = trim_amplitude

    @property
    def silence_rms(self) -> float:
        return self._silence_rms

    @property
    def trim_amplitude(self) -> float:
        return self._trim_amplitude

    def detect(self, frame: AudioFrame) -> Optional[Frequency]:
        """Estimate the fundamental frequency of a frame.

        Args:
            frame: Frame of mono samples, at least 3 samples long when not silent

        Returns:
            Frequency in Hz, or None when there is no usable signal
        """
        return self.detect_samples(frame.samples, frame.sample_rate)

    def detect_samples(self, samples: np.ndarray, sample_rate: int) -> Optional[Frequency]:
        """Estimate the fundamental frequency of raw samples.

        Args:
            samples: 1D array of samples in [-1, 1]
            sample_rate: Sample rate in Hz

        Returns:
            Frequency in Hz, or None when there is no usable signal
        """
        buffer = np.asarray(samples, dtype=np.float64)
        if buffer.size == 0:
            return None

        rms = float(np.sqrt(np.mean(buffer**2)))
        if rms < self._silence_rms:
            logger.debug(f"Signal too weak: rms={rms:.4f} < {self._silence_rms}")
            return None

        start, end = self.trim_bounds(buffer)
        working = buffer[start:end]
        if working.size < 3:
            logger.debug(f"Working window too short after trimming: {start}-{end}")
            return None

        correlation = self.autocorrelate(working)
        period = self.find_period(correlation)
        if period <= 0:
            return None

        frequency = sample_rate / period
        logger.debug(
            f"rms={rms:.4f} window={start}-{end} period={period:.3f} -> {frequency:.2f}Hz"
        )
        return frequency

    def trim_bounds(self, buffer: np.ndarray) -> Tuple[int, int]:
        """Find the working window of a frame.

        Scans the first half forwards and the last half backwards for the first
        sample quieter than the trim amplitude. A side without such a sample
        keeps the frame bound.

        Returns:
            (start, end) with end exclusive
        """
        size = len(buffer)
        half = (size + 1) // 2
        quiet = np.abs(buffer) < self._trim_amplitude

        start = 0
        head = np.flatnonzero(quiet[:half])
        if head.size:
            start = int(head[0])

        end = size
        # Candidates size-1 down to size-half+1, nearest to the end first
        tail = np.flatnonzero(quiet[size - half + 1:][::-1])
        if tail.size:
            end = size - 1 - int(tail[0])

        return start, end

    @staticmethod
    def autocorrelate(buffer: np.ndarray) -> np.ndarray:
        """Correlation of the buffer with itself for every lag from 0 to len-1."""
        full = np.correlate(buffer, buffer, mode="full")
        return full[len(buffer) - 1:]

    @staticmethod
    def find_period(correlation: np.ndarray) -> float:
        """Read the period in samples off an autocorrelation curve.

        Skips the descending zero-lag lobe, takes the strongest remaining lag
        and refines it with a parabola through its neighbours.
        """
        size = len(correlation)

        d = 0
        while d < size - 1 and correlation[d] > correlation[d + 1]:
            d += 1

        period = d + int(np.argmax(correlation[d:]))

        if 0 < period < size - 1:
            x1, x2, x3 = correlation[period - 1 : period + 2]
            a = (x1 + x3 - 2 * x2) / 2
            b = (x3 - x1) / 2
            if a:
                return period - b / (2 * a)
            logger.debug(f"Zero curvature at lag {period}, keeping integer period")

        return float(period)

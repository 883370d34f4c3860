"""Defines the core interfaces for the Canarinho application."""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Optional

from ..note_types import AudioFrame, TuningResult


class IFrameSource(ABC):
    """Interface for anything that supplies fixed-size audio frames."""

    @abstractmethod
    def start(self) -> None:
        """Acquire the underlying resource and begin producing frames.

        Raises:
            AudioInputError: If the source cannot deliver frames
        """
        pass

    @abstractmethod
    def stop(self) -> None:
        """Release the underlying resource."""
        pass

    @abstractmethod
    def read(self, timeout: Optional[float] = None) -> Optional[AudioFrame]:
        """Return the next frame, or None if none arrived within the timeout."""
        pass

    @abstractmethod
    def is_running(self) -> bool:
        """Check if the source can still produce frames."""
        pass

    @property
    @abstractmethod
    def sample_rate(self) -> int:
        """The sample rate of the produced frames."""
        pass

    @property
    @abstractmethod
    def frame_length(self) -> int:
        """Number of samples in each produced frame."""
        pass

    def __enter__(self) -> "IFrameSource":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()


class IPitchDetector(ABC):
    """Interface for fundamental frequency estimators."""

    @abstractmethod
    def detect(self, frame: AudioFrame) -> Optional[float]:
        """Estimate the frequency of a frame in Hz, None for no signal."""
        pass


class ITuningDisplay(ABC):
    """Interface for collaborators that show tuning results."""

    @abstractmethod
    def show(self, result: TuningResult) -> None:
        """Render one cycle's result."""
        pass

    def clear(self) -> None:
        """Forget the last reading, called when monitoring stops."""
        pass


class IFeedback(ABC):
    """Interface for collaborators that confirm a string was just tuned."""

    @abstractmethod
    def play(self) -> None:
        """Give the one-shot confirmation."""
        pass

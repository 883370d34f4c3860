"""Frame plumbing shared by all audio sources."""

from __future__ import annotations
import threading
import numpy as np
from typing import Optional

from ..logger import get_logger
from ..note_types import AudioFrame
from ..core.interfaces import IFrameSource

logger = get_logger(__name__)


class AudioInputError(Exception):
    """Raised when a frame source cannot deliver frames."""


class FrameMailbox:
    """Single-slot handoff between a capture thread and the detection thread.

    A new frame replaces any frame that has not been taken yet, so the reader
    always gets the newest snapshot and the writer never blocks.
    """

    def __init__(self) -> None:
        self._frame: Optional[AudioFrame] = None
        self._condition = threading.Condition()
        self._dropped = 0

    @property
    def dropped(self) -> int:
        """Number of frames replaced before anyone read them."""
        return self._dropped

    @property
    def pending(self) -> bool:
        """True while a frame is waiting to be taken."""
        with self._condition:
            return self._frame is not None

    def put(self, frame: AudioFrame) -> None:
        with self._condition:
            if self._frame is not None:
                self._dropped += 1
            self._frame = frame
            self._condition.notify()

    def get(self, timeout: Optional[float] = None) -> Optional[AudioFrame]:
        """Take the pending frame, waiting up to timeout seconds for one."""
        with self._condition:
            if self._frame is None and timeout != 0:
                self._condition.wait_for(lambda: self._frame is not None, timeout)
            frame, self._frame = self._frame, None
            return frame

    def clear(self) -> None:
        with self._condition:
            self._frame = None
            self._dropped = 0


class RollingWindow:
    """Keeps the latest frame_length samples of a stream of blocks."""

    def __init__(self, frame_length: int) -> None:
        self._frame_length = frame_length
        self._buffer = np.zeros(frame_length, dtype=np.float64)
        self._filled = 0

    @property
    def is_full(self) -> bool:
        return self._filled >= self._frame_length

    def push(self, block: np.ndarray) -> None:
        block = np.asarray(block, dtype=np.float64)
        if block.ndim > 1:
            block = block[:, 0]
        if block.size == 0:
            return
        if block.size >= self._frame_length:
            self._buffer[:] = block[-self._frame_length:]
        else:
            self._buffer = np.roll(self._buffer, -block.size)
            self._buffer[-block.size:] = block
        self._filled = min(self._frame_length, self._filled + block.size)

    def snapshot(self, sample_rate: int) -> Optional[AudioFrame]:
        """Copy of the window as a frame, None until enough samples arrived."""
        if not self.is_full:
            return None
        return AudioFrame(self._buffer.copy(), sample_rate)

    def reset(self) -> None:
        self._buffer[:] = 0.0
        self._filled = 0


class ArrayFrameSource(IFrameSource):
    """Serves consecutive frames cut from an in-memory signal."""

    def __init__(
        self,
        samples: np.ndarray,
        sample_rate: int,
        frame_length: int = 2048,
        hop_size: Optional[int] = None,
        loop: bool = False,
    ) -> None:
        self._samples = np.asarray(samples, dtype=np.float64)
        if self._samples.ndim > 1:
            self._samples = self._samples[:, 0]
        self._sample_rate = sample_rate
        self._frame_length = frame_length
        self._hop_size = hop_size or frame_length
        self._loop = loop
        self._position = 0
        self._running = False

    @classmethod
    def from_frames(cls, frames, sample_rate: int, frame_length: int) -> "ArrayFrameSource":
        """Source that plays back a sequence of whole frames in order."""
        samples = np.concatenate([np.asarray(f, dtype=np.float64) for f in frames])
        return cls(samples, sample_rate, frame_length=frame_length)

    def start(self) -> None:
        if len(self._samples) < self._frame_length:
            raise AudioInputError(
                f"Signal of {len(self._samples)} samples is shorter than one frame"
            )
        self._position = 0
        self._running = True

    def stop(self) -> None:
        self._running = False

    def read(self, timeout: Optional[float] = None) -> Optional[AudioFrame]:
        if not self._running:
            return None
        end = self._position + self._frame_length
        if end > len(self._samples):
            if not self._loop:
                self._running = False
                return None
            self._position, end = 0, self._frame_length
        frame = AudioFrame(self._samples[self._position:end], self._sample_rate)
        self._position += self._hop_size
        return frame

    def is_running(self) -> bool:
        return self._running

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def frame_length(self) -> int:
        return self._frame_length

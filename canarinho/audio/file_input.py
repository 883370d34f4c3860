import threading
import time
from typing import Optional

import numpy as np
import soundfile as sf

from ..logger import get_logger
from ..note_types import AudioFrame
from ..core.interfaces import IFrameSource
from .frames import AudioInputError, FrameMailbox, RollingWindow

logger = get_logger(__name__)


class WavFileFrameSource(IFrameSource):
    """Provides frames by reading from a WAV file.

    In the default mode frames are read on demand, one hop apart, as fast as
    the caller asks for them. With ``realtime=True`` a thread streams the file
    at playback speed in ``chunk_size`` blocks, the way a microphone would, and
    the reader gets the newest full window.
    """

    def __init__(
        self,
        file_path: str,
        frame_length: int = 2048,
        hop_size: Optional[int] = None,
        loop: bool = False,
        gain: float = 1.0,
        realtime: bool = False,
        chunk_size: int = 512,
    ):
        self._file_path = file_path
        self._frame_length = frame_length
        self._hop_size = hop_size or frame_length
        self._loop = loop
        self._gain = gain
        self._realtime = realtime
        self._chunk_size = chunk_size

        self._file: Optional[sf.SoundFile] = None
        self._is_running = False
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._mailbox = FrameMailbox()
        self._window = RollingWindow(frame_length)

        try:
            info = sf.info(self._file_path)
        except (RuntimeError, OSError) as e:
            raise AudioInputError(f"Cannot open {self._file_path}: {e}") from e
        self._sample_rate = info.samplerate
        self._channels = info.channels

    def start(self) -> None:
        if self._is_running:
            return

        try:
            self._file = sf.SoundFile(self._file_path)
        except (RuntimeError, OSError) as e:
            raise AudioInputError(f"Cannot open {self._file_path}: {e}") from e

        self._is_running = True
        logger.info(
            f"Reading {self._file_path} ({self._sample_rate} Hz, {self._channels} ch)"
        )

        if self._realtime:
            self._stop_event.clear()
            self._mailbox.clear()
            self._window.reset()
            self._thread = threading.Thread(target=self._stream_data, daemon=True)
            self._thread.start()

    def stop(self) -> None:
        self._stop_event.set()
        if self._thread:
            self._thread.join()
            self._thread = None
        if self._file is not None:
            self._file.close()
            self._file = None
        self._is_running = False
        self._mailbox.clear()

    def is_running(self) -> bool:
        """Returns True while the file can still produce frames.

        In real-time mode a frame published just before the end of the file
        keeps the source running until it has been read.
        """
        if self._realtime:
            return self._is_running or self._mailbox.pending
        return self._is_running

    def read(self, timeout: Optional[float] = None) -> Optional[AudioFrame]:
        if self._realtime:
            if not self._is_running and not self._mailbox.pending:
                return None
            return self._mailbox.get(timeout)
        if not self._is_running:
            return None
        return self._read_frame()

    def _read_block(self, frames: int) -> np.ndarray:
        data = self._file.read(frames, dtype="float32", always_2d=True)
        if len(data) < frames and self._loop:
            self._file.seek(0)
            rest = self._file.read(frames - len(data), dtype="float32", always_2d=True)
            data = np.concatenate([data, rest])
        # Apply gain if specified
        if self._gain != 1.0:
            data = data * self._gain
        return data[:, 0]

    def _read_frame(self) -> Optional[AudioFrame]:
        position = self._file.tell()
        block = self._read_block(self._frame_length)
        if len(block) < self._frame_length:
            logger.info(f"End of {self._file_path}")
            self._is_running = False
            return None
        if self._hop_size != self._frame_length:
            target = position + self._hop_size
            if self._loop:
                target %= self._file.frames
            self._file.seek(min(target, self._file.frames))
        return AudioFrame(block, self._sample_rate)

    def _stream_data(self) -> None:
        try:
            while not self._stop_event.is_set():
                block = self._read_block(self._chunk_size)
                if len(block) == 0:
                    break
                self._window.push(block)
                frame = self._window.snapshot(self._sample_rate)
                if frame is not None:
                    self._mailbox.put(frame)

                # Simulate real-time playback speed
                time.sleep(self._chunk_size / self._sample_rate)
        except RuntimeError as e:
            logger.error(f"Error streaming WAV file: {e}")

        self._is_running = False  # Ensure flag is reset on exit

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def frame_length(self) -> int:
        return self._frame_length

    @property
    def channels(self) -> int:
        return self._channels

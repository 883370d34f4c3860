"""Live microphone input for the tuner."""

from __future__ import annotations
import numpy as np
import sounddevice as sd
from typing import Optional, Dict, Any, List, Tuple, ClassVar

from ..logger import get_logger
from ..note_types import AudioFrame
from ..core.interfaces import IFrameSource
from .frames import AudioInputError, FrameMailbox, RollingWindow

logger = get_logger(__name__)


def list_input_devices() -> List[Tuple[int, Dict[str, Any]]]:
    """Return (device_id, device_info) for every device that can record."""
    return [
        (device_id, device)
        for device_id, device in enumerate(sd.query_devices())
        if device["max_input_channels"] > 0
    ]


class SoundDeviceFrameSource(IFrameSource):
    """Frame source reading the microphone through the sounddevice library.

    The PortAudio callback runs on its own thread. It feeds a rolling window
    of the latest ``frame_length`` samples and publishes a snapshot to a
    single-slot mailbox after every block; the detection thread reads the
    newest snapshot and stale ones are dropped.
    """

    # Audio configuration
    SAMPLE_RATE: ClassVar[int] = 44100  # Hz
    FRAMES_PER_BUFFER: ClassVar[int] = 512  # Samples per callback block
    CHANNELS: ClassVar[int] = 1  # Mono audio
    FALLBACK_RATES: ClassVar[List[int]] = [44100, 48000, 22050, 16000, 8000]

    def __init__(
        self,
        device_id: Optional[int] = None,
        device_name: Optional[str] = None,
        sample_rate: Optional[int] = None,
        frame_length: int = 2048,
        frames_per_buffer: Optional[int] = None,
        channels: Optional[int] = None,
    ) -> None:
        """Initialize the audio input handler.

        Args:
            device_id: Audio input device ID, or None for the default input
            device_name: Case-insensitive part of a device name to look for when no ID is given
            sample_rate: Preferred sample rate in Hz, or None for default (44100)
            frame_length: Samples per detection frame
            frames_per_buffer: Callback block size, or None for default (512)
            channels: Number of audio channels to open, or None for default (1)
        """
        self._device_id = device_id
        self._device_name = device_name
        self._sample_rate = sample_rate or self.SAMPLE_RATE
        self._frame_length = frame_length
        self._frames_per_buffer = frames_per_buffer or self.FRAMES_PER_BUFFER
        self._channels = channels or self.CHANNELS

        self._stream: Optional[sd.InputStream] = None
        self._running = False
        self._mailbox = FrameMailbox()
        self._window = RollingWindow(frame_length)

    def _candidate_rates(self) -> List[int]:
        # Requested rate first, then the common ones
        rates = [r for r in self.FALLBACK_RATES if r != self._sample_rate]
        return [self._sample_rate] + rates

    def _find_device(self, name: str) -> Optional[int]:
        """Find an input device whose name contains the given text."""
        for device_id, device in list_input_devices():
            if name.lower() in device["name"].lower():
                logger.info(f"Found input device: {device['name']}")
                return device_id
        logger.warning(f"No input device matching '{name}', using default input device")
        return None

    def _audio_callback(
        self,
        indata: np.ndarray,
        _frames: int,
        _time_info: dict,
        status: sd.CallbackFlags,
    ) -> None:
        """Callback for processing audio data from the input stream.

        Note:
            This is called from a separate audio thread, so it only copies the
            block into the window and hands a snapshot over.
        """
        if status:
            logger.warning(f"Audio callback status: {status}")

        # Extract mono audio data (take first channel if multi-channel)
        audio_data = indata[:, 0] if indata.ndim > 1 else indata
        self._window.push(audio_data)
        frame = self._window.snapshot(self._sample_rate)
        if frame is not None:
            self._mailbox.put(frame)

    def start(self) -> None:
        """Open the input stream, trying fallback sample rates.

        Raises:
            AudioInputError: If no sample rate works with the device
        """
        if self._running:
            logger.warning("Audio input already running")
            return

        if self._device_id is None and self._device_name:
            self._device_id = self._find_device(self._device_name)

        self._mailbox.clear()
        self._window.reset()

        for rate in self._candidate_rates():
            try:
                logger.info(f"Trying to start audio input with sample rate: {rate} Hz")
                sd.check_input_settings(
                    device=self._device_id, channels=self._channels, samplerate=rate
                )
                self._stream = sd.InputStream(
                    device=self._device_id,
                    samplerate=rate,
                    blocksize=self._frames_per_buffer,
                    channels=self._channels,
                    dtype="float32",
                    callback=self._audio_callback,
                )
                self._sample_rate = rate
                self._stream.start()
                self._running = True
                logger.info(f"Audio input started with sample rate {rate} Hz")
                return
            except (sd.PortAudioError, ValueError) as e:
                logger.warning(f"Failed to start audio input with sample rate {rate} Hz: {e}")
                self._close_stream()

        error_msg = "Could not start audio input with any sample rate"
        logger.error(error_msg)
        raise AudioInputError(error_msg)

    def _close_stream(self) -> None:
        if self._stream is None:
            return
        try:
            self._stream.close()
        except sd.PortAudioError as e:
            logger.warning(f"Error closing audio stream: {e}")
        self._stream = None

    def stop(self) -> None:
        """Stop capturing audio."""
        if self._stream is not None:
            try:
                self._stream.stop()
            except sd.PortAudioError as e:
                logger.error(f"Error stopping audio input: {e}")
            self._close_stream()
        if self._running:
            logger.info("Audio input stopped")
        self._running = False
        self._mailbox.clear()

    def read(self, timeout: Optional[float] = None) -> Optional[AudioFrame]:
        if not self._running:
            return None
        return self._mailbox.get(timeout)

    def is_running(self) -> bool:
        return self._running

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def frame_length(self) -> int:
        return self._frame_length

    @property
    def dropped_frames(self) -> int:
        """Snapshots replaced before the detection thread read them."""
        return self._mailbox.dropped

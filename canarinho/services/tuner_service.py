"""Tuner pipeline and the session that drives it once per tick."""

from __future__ import annotations
import threading
import time
from typing import Optional

from ..logger import get_logger
from ..note_types import AudioFrame, TuningResult
from ..note_utils import map_to_note
from ..core.config import TunerConfig
from ..core.events import TunerEvents
from ..core.interfaces import IFrameSource, IPitchDetector, ITuningDisplay, IFeedback
from ..audio.pitch_detector import PitchDetector
from ..detection.tuning_state import TuningStateTracker, classify

logger = get_logger(__name__)


class TunerPipeline:
    """Runs detection, note mapping and state tracking for one frame at a time.

    This is the whole tuner core; it can be fed frames synchronously without
    any audio device or display.
    """

    def __init__(
        self,
        config: Optional[TunerConfig] = None,
        detector: Optional[IPitchDetector] = None,
        tracker: Optional[TuningStateTracker] = None,
    ) -> None:
        self._config = config or TunerConfig()
        self._detector = detector or PitchDetector(
            silence_rms=self._config.silence_rms,
            trim_amplitude=self._config.trim_amplitude,
        )
        self._tracker = tracker or TuningStateTracker(self._config.in_tune_cents)

    @property
    def config(self) -> TunerConfig:
        return self._config

    @property
    def tracker(self) -> TuningStateTracker:
        return self._tracker

    def accepts(self, frequency: Optional[float]) -> bool:
        """Whether a detected frequency is inside the musical window."""
        return (
            frequency is not None
            and self._config.min_frequency < frequency < self._config.max_frequency
        )

    def process(self, frame: AudioFrame) -> Optional[TuningResult]:
        """Run one cycle.

        Returns:
            The result for the frame, or None when the cycle is suppressed
            (no signal, or a frequency outside the accepted window)
        """
        frequency = self._detector.detect(frame)
        if frequency is None:
            return None
        if not self.accepts(frequency):
            logger.debug(f"Frequency out of range: {frequency:.1f}Hz")
            return None

        assignment = map_to_note(frequency, self._config.concert_pitch)
        update = self._tracker.update(assignment)
        return TuningResult(
            assignment=assignment,
            is_in_tune=update.is_in_tune,
            just_became_in_tune=update.just_became_in_tune,
            status=classify(assignment.cents, self._config.in_tune_cents),
        )

    def reset(self) -> None:
        self._tracker.reset()


class TunerSession:
    """Owns the start/stop lifecycle and the per-tick detection loop.

    Each cycle pulls one frame from the source, runs the pipeline and
    publishes the outcome through ``events``. Display and feedback
    collaborators given to the constructor are registered as listeners.
    """

    READ_TIMEOUT = 0.5  # seconds to wait for the source on each cycle

    def __init__(
        self,
        frame_source: IFrameSource,
        config: Optional[TunerConfig] = None,
        pipeline: Optional[TunerPipeline] = None,
        display: Optional[ITuningDisplay] = None,
        feedback: Optional[IFeedback] = None,
        events: Optional[TunerEvents] = None,
    ) -> None:
        """Initialize the session.

        Args:
            frame_source: Source of the frames to analyse
            config: Configuration for a new pipeline, or None for defaults
            pipeline: Ready-made pipeline; it brings its own configuration
            display: Optional collaborator shown every result
            feedback: Optional collaborator played when a string comes into tune
            events: Event hub to publish on, or None to create one

        Raises:
            ValueError: If both config and pipeline are given
        """
        if config is not None and pipeline is not None:
            raise ValueError("Pass either config or pipeline, not both")
        self._source = frame_source
        self._pipeline = pipeline or TunerPipeline(config)
        self._config = self._pipeline.config
        self.events = events or TunerEvents()

        self._running = False
        self._stop_requested = threading.Event()
        self._current_result: Optional[TuningResult] = None
        self._cycles = 0

        self.events.on_result(self._remember)
        if display is not None:
            self.events.on_result(display.show)
            self.events.on_stopped(display.clear)
        if feedback is not None:
            self.events.on_in_tune(lambda _result: feedback.play())

    @property
    def pipeline(self) -> TunerPipeline:
        return self._pipeline

    @property
    def current_result(self) -> Optional[TuningResult]:
        """Last reading that produced a note, kept through silent cycles."""
        return self._current_result

    @property
    def cycles(self) -> int:
        return self._cycles

    def is_running(self) -> bool:
        return self._running

    def _remember(self, result: TuningResult) -> None:
        self._current_result = result

    def start(self) -> None:
        """Reset the tuning state and acquire the frame source.

        Raises:
            AudioInputError: If the frame source cannot start
        """
        if self._running:
            logger.warning("Tuner already running")
            return

        self._pipeline.reset()
        self._current_result = None
        self._stop_requested.clear()
        self._cycles = 0

        self._source.start()
        self._running = True
        logger.info(
            f"Tuner started: {self._source.sample_rate} Hz, "
            f"{self._source.frame_length} samples per frame"
        )

    def stop(self) -> None:
        """Release the frame source and drop all per-cycle state."""
        self._stop_requested.set()
        if not self._running:
            return
        try:
            self._source.stop()
        finally:
            self._running = False
            self._current_result = None
            self._pipeline.reset()
            self.events.emit_stopped()
            logger.info(f"Tuner stopped after {self._cycles} cycles")

    def request_stop(self) -> None:
        """Ask the loop to stop before its next cycle; safe from any thread."""
        self._stop_requested.set()

    def run_cycle(self, timeout: Optional[float] = None) -> Optional[TuningResult]:
        """Pull one frame and process it.

        Returns:
            The cycle's result, or None if no frame arrived or the cycle was suppressed
        """
        frame = self._source.read(self.READ_TIMEOUT if timeout is None else timeout)
        if frame is None:
            return None

        self._cycles += 1
        result = self._pipeline.process(frame)
        if result is None:
            self.events.emit_silence()
            return None

        logger.debug(
            f"{result.assignment.name} {result.frequency:.1f}Hz "
            f"{result.cents:+.1f} cents {result.status.value}"
        )
        self.events.emit_result(result)
        return result

    def run(
        self,
        duration: Optional[float] = None,
        max_cycles: Optional[int] = None,
        realtime: bool = True,
    ) -> int:
        """Start, loop at the configured tick rate, and always stop on exit.

        Args:
            duration: Stop after this many seconds, or None to run until stopped
            max_cycles: Stop after this many processed frames
            realtime: If False, run cycles back to back instead of pacing them

        Returns:
            Number of frames processed
        """
        tick = 1.0 / self._config.tick_hz
        self.start()
        try:
            started = time.monotonic()
            next_tick = started
            while not self._stop_requested.is_set():
                if duration is not None and time.monotonic() - started >= duration:
                    break
                if max_cycles is not None and self._cycles >= max_cycles:
                    break

                self.run_cycle()
                if not self._source.is_running():
                    logger.info("Frame source finished")
                    break

                if realtime:
                    next_tick += tick
                    delay = next_tick - time.monotonic()
                    if delay > 0:
                        self._stop_requested.wait(delay)
                    else:
                        # Fell behind, restart the cadence from now
                        next_tick = time.monotonic()
            return self._cycles
        finally:
            self.stop()

    def __enter__(self) -> "TunerSession":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

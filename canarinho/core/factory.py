"""Factory for creating Canarinho components."""

from typing import Callable, Optional, Dict, Type

from ..logger import get_logger
from ..audio.pitch_detector import PitchDetector
from ..audio.file_input import WavFileFrameSource
from ..audio.frames import ArrayFrameSource
from ..services.tuner_service import TunerPipeline, TunerSession
from .config import ConfigManager, TunerConfig
from .interfaces import IPitchDetector, IFrameSource, ITuningDisplay, IFeedback

logger = get_logger(__name__)


def _sounddevice_source(**kwargs) -> IFrameSource:
    # PortAudio is only loaded when live input is requested
    from ..audio.audio_input import SoundDeviceFrameSource

    return SoundDeviceFrameSource(**kwargs)


class ComponentFactory:
    """Factory for creating Canarinho components."""

    def __init__(
        self,
        config_manager: Optional[ConfigManager] = None,
        config: Optional[TunerConfig] = None,
    ):
        """Initialize the component factory.

        Args:
            config_manager: Configuration manager, or None to create a default one
            config: Tuner configuration, or None to read it from the manager
        """
        self.config_manager = config_manager or ConfigManager()
        self.config = config or self.config_manager.get_tuner_config()

        # Register default component implementations
        self.pitch_detector_classes: Dict[str, Type[IPitchDetector]] = {
            "default": PitchDetector,
            "autocorrelation": PitchDetector,
        }

        self.frame_source_builders: Dict[str, Callable[..., IFrameSource]] = {
            "live": _sounddevice_source,
            "wav": WavFileFrameSource,
            "array": ArrayFrameSource,
        }

    def create_pitch_detector(
        self, implementation: str = "default", **kwargs
    ) -> IPitchDetector:
        """Create a pitch detector.

        Args:
            implementation: Name of the implementation to use
            **kwargs: Additional parameters to pass to the constructor

        Returns:
            Pitch detector instance

        Raises:
            ValueError: If the implementation is not registered
        """
        if implementation not in self.pitch_detector_classes:
            raise ValueError(f"Unknown pitch detector implementation: {implementation}")

        params = {
            "silence_rms": self.config.silence_rms,
            "trim_amplitude": self.config.trim_amplitude,
        }
        params.update(kwargs)

        instance = self.pitch_detector_classes[implementation](**params)
        logger.info(f"Created pitch detector: {implementation}")
        return instance

    def create_frame_source(self, kind: str = "live", **kwargs) -> IFrameSource:
        """Create a frame source.

        Args:
            kind: 'live', 'wav' or 'array'
            **kwargs: Parameters for the source constructor; frame_length and,
                for live input, sample_rate default to the configuration

        Returns:
            Frame source instance

        Raises:
            ValueError: If the kind is not registered
        """
        if kind not in self.frame_source_builders:
            raise ValueError(f"Unknown frame source: {kind}")

        kwargs.setdefault("frame_length", self.config.frame_length)
        if kind == "live":
            kwargs.setdefault("sample_rate", self.config.sample_rate)

        instance = self.frame_source_builders[kind](**kwargs)
        logger.info(f"Created frame source: {kind}")
        return instance

    def create_pipeline(self, implementation: str = "default") -> TunerPipeline:
        return TunerPipeline(
            config=self.config,
            detector=self.create_pitch_detector(implementation),
        )

    def create_tuner_session(
        self,
        frame_source: IFrameSource,
        display: Optional[ITuningDisplay] = None,
        feedback: Optional[IFeedback] = None,
    ) -> TunerSession:
        """Create a tuner session around a frame source."""
        session = TunerSession(
            frame_source,
            pipeline=self.create_pipeline(),
            display=display,
            feedback=feedback,
        )
        logger.info("Created tuner session")
        return session

"""Configuration management for Canarinho components."""

from dataclasses import dataclass, asdict, fields
from typing import Dict, Any, Optional
import json
import os
from pathlib import Path

from ..logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class TunerConfig:
    """Thresholds and settings for the tuner pipeline.

    The detection thresholds are empirical defaults, tune them against real
    recordings rather than treating them as physical constants.
    """

    in_tune_cents: float = 5.0  # |cents| below this counts as in tune
    silence_rms: float = 0.01  # Frames quieter than this are "no signal"
    trim_amplitude: float = 0.2  # Amplitude used to find the trim points
    frame_length: int = 2048  # Samples per detection frame
    sample_rate: int = 44100  # Hz
    concert_pitch: float = 440.0  # Hz for A4
    min_frequency: float = 20.0  # Hz, detections at or below are dropped
    max_frequency: float = 5000.0  # Hz, detections at or above are dropped
    tick_hz: float = 60.0  # Detection cycles per second
    use_flats: bool = False
    bell: bool = True

    def __post_init__(self):
        if self.frame_length < 3:
            raise ValueError(f"frame_length must be at least 3, got {self.frame_length}")
        if self.sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {self.sample_rate}")
        if self.concert_pitch <= 0:
            raise ValueError(f"concert_pitch must be positive, got {self.concert_pitch}")
        if self.in_tune_cents < 0:
            raise ValueError(f"in_tune_cents must not be negative, got {self.in_tune_cents}")
        if self.silence_rms < 0 or self.trim_amplitude < 0:
            raise ValueError("Amplitude thresholds must not be negative")
        if not 0 <= self.min_frequency < self.max_frequency:
            raise ValueError(
                f"Invalid frequency window: {self.min_frequency}-{self.max_frequency} Hz"
            )
        if self.tick_hz <= 0:
            raise ValueError(f"tick_hz must be positive, got {self.tick_hz}")

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> "TunerConfig":
        """Build a config from a dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(values) - known
        if unknown:
            logger.warning(f"Ignoring unknown configuration keys: {sorted(unknown)}")
        return cls(**{k: v for k, v in values.items() if k in known})

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def with_overrides(self, **overrides) -> "TunerConfig":
        """Copy of this config with the non-None overrides applied."""
        values = self.to_dict()
        values.update({k: v for k, v in overrides.items() if v is not None})
        return TunerConfig.from_dict(values)


class ConfigManager:
    """Configuration manager for Canarinho components."""

    def __init__(self, config_dir: Optional[str] = None):
        """Initialize the configuration manager.

        Args:
            config_dir: Directory to store configuration files, or None to use default
        """
        if config_dir is None:
            # Use ~/.config/canarinho by default
            home = os.path.expanduser("~")
            config_dir = os.path.join(home, ".config", "canarinho")

        self.config_dir = Path(config_dir)

        # Default configurations
        self.default_configs = {
            "tuner": TunerConfig().to_dict(),
        }

        # Load existing configurations, defaults stay in memory until saved
        self.configs = {}
        for config_name, default_config in self.default_configs.items():
            self.configs[config_name] = self.load_config(config_name, default_config)

    def load_config(self, name: str, default_config: Dict[str, Any]) -> Dict[str, Any]:
        """Load configuration from file or fall back to the default.

        Args:
            name: Configuration name
            default_config: Default configuration to use if file doesn't exist

        Returns:
            Configuration dictionary
        """
        config_file = self.config_dir / f"{name}.json"

        if not config_file.exists():
            return default_config.copy()

        try:
            with open(config_file, "r") as f:
                config = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Error loading configuration from {config_file}: {e}")
            return default_config.copy()

        logger.info(f"Loaded configuration from {config_file}")

        # Ensure all default keys are present
        for key, value in default_config.items():
            if key not in config:
                config[key] = value

        return config

    def save_config(self, name: str, config: Dict[str, Any]) -> bool:
        """Save configuration to file.

        Args:
            name: Configuration name
            config: Configuration dictionary

        Returns:
            True if saved successfully, False otherwise
        """
        config_file = self.config_dir / f"{name}.json"

        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(config_file, "w") as f:
                json.dump(config, f, indent=2)
            logger.info(f"Saved configuration to {config_file}")
            return True
        except OSError as e:
            logger.error(f"Error saving configuration to {config_file}: {e}")
            return False

    def get_config(self, name: str) -> Dict[str, Any]:
        """Get configuration by name.

        Args:
            name: Configuration name

        Returns:
            Configuration dictionary
        """
        return self.configs.get(name, {}).copy()

    def get_tuner_config(self) -> TunerConfig:
        """Get the tuner configuration as a validated TunerConfig."""
        return TunerConfig.from_dict(self.get_config("tuner"))

    def update_config(self, name: str, updates: Dict[str, Any]) -> bool:
        """Update configuration and save to file.

        Args:
            name: Configuration name
            updates: Dictionary of updates to apply

        Returns:
            True if updated and saved successfully, False otherwise
        """
        if name not in self.configs:
            logger.error(f"Unknown configuration: {name}")
            return False

        # Update configuration
        self.configs[name].update(updates)

        # Save to file
        return self.save_config(name, self.configs[name])

    def reset_config(self, name: str) -> bool:
        """Reset configuration to default.

        Args:
            name: Configuration name

        Returns:
            True if reset successfully, False otherwise
        """
        if name not in self.default_configs:
            logger.error(f"Unknown configuration: {name}")
            return False

        # Reset to default
        self.configs[name] = self.default_configs[name].copy()

        # Save to file
        return self.save_config(name, self.configs[name])

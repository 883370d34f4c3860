"""Type definitions for the Canarinho project."""

from dataclasses import dataclass
from enum import Enum

import numpy as np

# Flat spellings for the accidentals of the chromatic alphabet
SHARP_TO_FLAT = {
    "C#": "Db",
    "D#": "Eb",
    "F#": "Gb",
    "G#": "Ab",
    "A#": "Bb",
}


@dataclass(frozen=True, eq=False)
class AudioFrame:
    """One fixed-length block of mono samples and the rate it was captured at."""

    samples: np.ndarray  # float samples in [-1, 1], read-only
    sample_rate: int  # Hz

    def __post_init__(self):
        samples = np.array(self.samples, dtype=np.float64)
        if samples.ndim > 1:
            # Keep the first channel of multi-channel input
            samples = samples[:, 0]
        samples.setflags(write=False)
        object.__setattr__(self, "samples", samples)
        if self.sample_rate <= 0:
            raise ValueError(f"Sample rate must be positive, got {self.sample_rate}")

    def __len__(self) -> int:
        return len(self.samples)

    @property
    def duration(self) -> float:
        """Length of the frame in seconds."""
        return len(self.samples) / self.sample_rate


@dataclass(frozen=True)
class NoteAssignment:
    """The nearest equal-tempered note for a measured frequency."""

    note: str  # Chromatic note name with sharps (e.g., 'A#')
    octave: int  # Scientific pitch notation octave, A4 is concert pitch
    cents: float  # Signed deviation, positive means sharp
    frequency: float  # Measured frequency in Hz
    reference_frequency: float  # Standard frequency of the assigned note in Hz

    @property
    def name(self) -> str:
        return f"{self.note}{self.octave}"

    def display_name(self, use_flats: bool = False) -> str:
        """Note name with octave, optionally spelled with flats (e.g., 'Bb4')."""
        note = SHARP_TO_FLAT.get(self.note, self.note) if use_flats else self.note
        return f"{note}{self.octave}"


class TuningStatus(Enum):
    """What the player should do with the string."""

    TUNED = "TUNED"
    TIGHTEN = "TIGHTEN"  # Below target, raise the tension
    LOOSEN = "LOOSEN"  # Above target, lower the tension


@dataclass(frozen=True)
class TuningUpdate:
    """Flags produced by the tuning state tracker for one assignment."""

    is_in_tune: bool
    just_became_in_tune: bool


@dataclass(frozen=True)
class TuningResult:
    """Everything a display or feedback collaborator needs for one cycle."""

    assignment: NoteAssignment
    is_in_tune: bool
    just_became_in_tune: bool
    status: TuningStatus

    @property
    def cents(self) -> float:
        return self.assignment.cents

    @property
    def frequency(self) -> float:
        return self.assignment.frequency

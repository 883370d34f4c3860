"""Utility functions for working with musical notes and frequencies."""

import math
from typing import List

from .note_types import NoteAssignment

NOTES: List[str] = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

CONCERT_PITCH = 440.0  # A4
A4_INDEX = 69  # Semitone index of A4, C-1 is 0


def _round_half_up(value: float) -> int:
    # Half-semitone boundaries always go to the upper note
    return math.floor(value + 0.5)


def map_to_note(frequency: float, concert_pitch: float = CONCERT_PITCH) -> NoteAssignment:
    """Find the nearest equal-tempered note for a frequency.

    Args:
        frequency: Measured frequency in Hz, must be positive
        concert_pitch: Reference frequency of A4 in Hz

    Returns:
        NoteAssignment with the note, its octave, the signed cents deviation
        and the reference frequency of the note

    Raises:
        ValueError: If frequency is not a positive finite number

    Note:
        Exact half-semitone boundaries round up, so 12*log2(f/440)+69 == 69.5
        maps to A#4 at -50 cents.
    """
    if not math.isfinite(frequency) or frequency <= 0:
        raise ValueError(f"Frequency must be a positive number, got {frequency}")

    n = 12 * math.log2(frequency / concert_pitch) + A4_INDEX
    rounded_n = _round_half_up(n)

    note = NOTES[rounded_n % 12]
    octave = rounded_n // 12 - 1

    reference = concert_pitch * 2 ** ((rounded_n - A4_INDEX) / 12)
    cents = 1200 * math.log2(frequency / reference)

    return NoteAssignment(
        note=note,
        octave=octave,
        cents=cents,
        frequency=frequency,
        reference_frequency=reference,
    )


def get_note_name(freq: float, use_flats: bool = False) -> str:
    """Convert frequency to note name using Scientific Pitch Notation (SPN).

    Args:
        freq: Frequency in Hz
        use_flats: If True, use flat notes (e.g., 'Bb') instead of sharps (e.g., 'A#')

    Returns:
        Note name with octave in SPN (e.g., 'A4', 'C#4', 'Bb3'), '---' for
        frequencies that have no note
    """
    if not math.isfinite(freq) or freq <= 0:
        return "---"
    return map_to_note(freq).display_name(use_flats)


def note_frequency(note: str, octave: int, concert_pitch: float = CONCERT_PITCH) -> float:
    """Reference frequency of a named note.

    Args:
        note: Chromatic note name with sharps (e.g., 'E', 'F#')
        octave: SPN octave

    Raises:
        ValueError: If the note is not in the chromatic alphabet
    """
    if note not in NOTES:
        raise ValueError(f"Unknown note name: {note}")
    index = (octave + 1) * 12 + NOTES.index(note)
    return concert_pitch * 2 ** ((index - A4_INDEX) / 12)

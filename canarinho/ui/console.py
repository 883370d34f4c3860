import sys
from typing import Optional, TextIO

import pyfiglet

from ..logger import get_logger
from ..note_types import TuningResult, TuningStatus
from ..core.interfaces import ITuningDisplay
from .gauge import render_gauge

# Get logger for this module
logger = get_logger(__name__)

STATUS_LABELS = {
    TuningStatus.TUNED: "TUNED!",
    TuningStatus.TIGHTEN: "TIGHTEN",
    TuningStatus.LOOSEN: "LOOSEN",
}

IDLE_MESSAGE = "Play a string"


class ConsoleDisplay(ITuningDisplay):
    """Text display for the tuner: note, frequency, cents, gauge and status.

    Each reading is printed as a block of lines. With ``big_note`` the note
    name is drawn with pyfiglet.
    """

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        use_flats: bool = False,
        big_note: bool = False,
        gauge_width: int = 41,
    ):
        self._stream = stream or sys.stdout
        self._use_flats = use_flats
        self._big_note = big_note
        self._gauge_width = gauge_width
        self._last_result: Optional[TuningResult] = None
        self.frames_shown = 0

    @property
    def last_result(self) -> Optional[TuningResult]:
        return self._last_result

    def format_result(self, result: Optional[TuningResult]) -> str:
        """Build the text block for a reading, or the idle screen for None."""
        if result is None:
            lines = [IDLE_MESSAGE]
            lines.extend(render_gauge(0.0, active=False, width=self._gauge_width))
            return "\n".join(lines)

        assignment = result.assignment
        name = assignment.display_name(self._use_flats)
        if self._big_note:
            lines = pyfiglet.figlet_format(name).rstrip("\n").splitlines()
        else:
            lines = [name]
        lines.append(f"{result.frequency:.1f} Hz  {result.cents:+.1f} cents")
        lines.extend(render_gauge(result.cents, active=True, width=self._gauge_width))
        lines.append(STATUS_LABELS[result.status])
        return "\n".join(lines)

    def show(self, result: TuningResult) -> None:
        self._last_result = result
        self.frames_shown += 1
        self._stream.write(self.format_result(result) + "\n\n")
        self._stream.flush()

    def clear(self) -> None:
        self._last_result = None
        self._stream.write(self.format_result(None) + "\n")
        self._stream.flush()
        logger.debug("Display cleared")

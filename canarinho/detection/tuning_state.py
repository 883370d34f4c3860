from ..logger import get_logger
from ..note_types import NoteAssignment, TuningStatus, TuningUpdate

logger = get_logger(__name__)

DEFAULT_IN_TUNE_CENTS = 5.0


def is_in_tune(cents: float, in_tune_cents: float = DEFAULT_IN_TUNE_CENTS) -> bool:
    return abs(cents) < in_tune_cents


def classify(cents: float, in_tune_cents: float = DEFAULT_IN_TUNE_CENTS) -> TuningStatus:
    """Display classification for a cents deviation.

    Anything out of tune and not flat reads as LOOSEN.
    """
    if is_in_tune(cents, in_tune_cents):
        return TuningStatus.TUNED
    if cents < 0:
        return TuningStatus.TIGHTEN
    return TuningStatus.LOOSEN


class TuningStateTracker:
    """
    Follows successive note assignments and reports the moment a string
    becomes in tune, once per crossing into the in-tune band.
    """

    def __init__(self, in_tune_cents: float = DEFAULT_IN_TUNE_CENTS):
        self._in_tune_cents = in_tune_cents
        self._was_in_tune = False

    @property
    def in_tune_cents(self) -> float:
        return self._in_tune_cents

    @property
    def was_in_tune(self) -> bool:
        return self._was_in_tune

    def update(self, assignment: NoteAssignment) -> TuningUpdate:
        """Feed the next assignment and get the in-tune flags for it."""
        in_tune = is_in_tune(assignment.cents, self._in_tune_cents)
        just_became_in_tune = in_tune and not self._was_in_tune
        if just_became_in_tune:
            logger.info(f"{assignment.name} is in tune ({assignment.cents:+.1f} cents)")
        elif self._was_in_tune and not in_tune:
            logger.debug(f"{assignment.name} drifted out of tune ({assignment.cents:+.1f} cents)")
        self._was_in_tune = in_tune
        return TuningUpdate(is_in_tune=in_tune, just_became_in_tune=just_became_in_tune)

    def reset(self) -> None:
        """Forget the last state, used whenever monitoring (re)starts."""
        self._was_in_tune = False

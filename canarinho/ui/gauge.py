"""Needle gauge geometry and its text rendering."""

from typing import List

GAUGE_RANGE_CENTS = 50.0  # Cents at full deflection
MAX_ANGLE = 60.0  # Degrees at full deflection
TICK_STEP = 12.0  # Degrees between ticks, 11 ticks from -60 to 60


def needle_angle(cents: float, active: bool = True) -> float:
    """Needle rotation in degrees for a cents deviation, 0 when idle."""
    if not active:
        return 0.0
    return max(-MAX_ANGLE, min(MAX_ANGLE, cents / GAUGE_RANGE_CENTS * MAX_ANGLE))


def tick_angles() -> List[float]:
    count = int(2 * MAX_ANGLE / TICK_STEP) + 1
    return [-MAX_ANGLE + i * TICK_STEP for i in range(count)]


def render_gauge(cents: float, active: bool = True, width: int = 41) -> List[str]:
    """Draw the gauge as text lines.

    The first line is the scale with the needle, the second the -50/0/+50
    labels. The angle maps linearly onto the columns.
    """
    width = max(width, 11)
    if width % 2 == 0:
        width += 1
    centre = width // 2

    def column(angle: float) -> int:
        return centre + int(round(angle / MAX_ANGLE * centre))

    scale = ["-"] * width
    for angle in tick_angles():
        scale[column(angle)] = "+"
    scale[centre] = "|"
    scale[column(needle_angle(cents, active))] = "^" if active else "."

    labels = [" "] * width
    for text, position in (("-50", 0), ("0", centre), ("+50", width - 3)):
        labels[position:position + len(text)] = text

    return ["".join(scale), "".join(labels)[:width]]

from enum import StrEnum

from ._errors import PriorityOutOfRangeError


class Palette(StrEnum):
    RED = "red"
    BLUE = "blue"
    PASTEL = "pastel"


# Indexed by priority; priority 0 has no background.
PALETTES: dict[Palette, tuple[str, ...]] = {
    Palette.RED: ("", "#FF5733", "#FF6F61", "#FF9999", "#FFCCCC"),
    Palette.BLUE: ("", "#1a53ff", "#3366FF", "#99CCFF", "#E6F7FF"),
    Palette.PASTEL: ("", "#FF8080", "#FFD080", "#A8E9FF", "#ECFEEC"),
}

MIN_PRIORITY = 0
MAX_PRIORITY = 4


def style_for_priority(priority: int, palette: Palette = Palette.RED) -> str:
    """Look up the background colour of a requirement node."""
    if not MIN_PRIORITY <= priority <= MAX_PRIORITY:
        msg = f"Priority {priority} is outside the range {MIN_PRIORITY}..{MAX_PRIORITY}."
        raise PriorityOutOfRangeError(msg)
    return PALETTES[palette][priority]

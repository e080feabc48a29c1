# Tagcomplete — (c) 2025 rtj.dev LLC — MIT Licensed
"""Rich theme and style names used by the Tagcomplete console output."""
from rich.theme import Theme

MATCH_STYLE = "bold red"


class Styles:
    """Named rich styles for console output."""

    TRIGGER = "bold #88C0D0"
    CANDIDATE = "#D8DEE9"
    SELECTED = "bold #A3BE8C"
    MUTED = "#4C566A"
    ERROR = "bold #BF616A"


def get_theme() -> Theme:
    return Theme(
        {
            "trigger": Styles.TRIGGER,
            "candidate": Styles.CANDIDATE,
            "selected": Styles.SELECTED,
            "muted": Styles.MUTED,
            "error": Styles.ERROR,
            "match": MATCH_STYLE,
        }
    )

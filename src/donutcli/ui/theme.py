"""
Terminal theme - box drawing characters, icons and rich styles.

Retro palette with an orange brand colour.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from rich.style import Style
from rich.theme import Theme


@dataclass(frozen=True)
class BoxChars:
    """One set of box-drawing characters."""
    top_left: str
    top_right: str
    bottom_left: str
    bottom_right: str
    horizontal: str
    vertical: str
    tee_left: str
    tee_right: str


BOX: Dict[str, BoxChars] = {
    "single": BoxChars("┌", "┐", "└", "┘", "─", "│", "├", "┤"),
    "double": BoxChars("╔", "╗", "╚", "╝", "═", "║", "╠", "╣"),
    "rounded": BoxChars("╭", "╮", "╰", "╯", "─", "│", "├", "┤"),
    "heavy": BoxChars("┏", "┓", "┗", "┛", "━", "┃", "┣", "┫"),
}


def box_chars(border: str) -> Optional[BoxChars]:
    """Characters for ``border``; None means draw no border."""
    if border == "none":
        return None
    try:
        return BOX[border]
    except KeyError:
        raise ValueError(f"Unknown border style: {border!r}") from None


class Icons:
    SUCCESS = "✓"
    ERROR = "✗"
    WARNING = "⚠"
    INFO = "ℹ"
    POINTER = "▸"
    CHEVRON = "❯"
    MORE_ABOVE = "↑"
    MORE_BELOW = "↓"
    BULLET = "•"


# Style names used across the UI; rich resolves them through DONUT_THEME.
STYLES: Dict[str, Style] = {
    "primary": Style(color="#FF6B35"),
    "success": Style(color="#00AA00"),
    "error": Style(color="#FF5555"),
    "warning": Style(color="#FFAA00"),
    "info": Style(color="#00AAAA"),
    "text": Style(color="#AAAAAA"),
    "text.bright": Style(color="#FFFFFF", bold=True),
    "text.muted": Style(color="#555555"),
    "text.dim": Style(color="#333333"),
    "highlight": Style(color="white", bgcolor="#0000AA"),
}

DONUT_THEME = Theme({name: style for name, style in STYLES.items()})

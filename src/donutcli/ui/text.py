"""Terminal text measurement helpers.

Widths are measured in terminal cells (wide glyphs count double) after ANSI
escape sequences are removed.
"""

import math
from typing import Optional

from rich.cells import cell_len
from rich.text import Text


def strip_ansi(text: str) -> str:
    return Text.from_ansi(text).plain


def visual_length(text: str) -> int:
    """Number of terminal cells ``text`` occupies on one line."""
    return cell_len(strip_ansi(text))


def pad_end(text: str, width: int) -> str:
    """Right-pad with spaces to ``width`` cells; never truncates."""
    return text + " " * max(0, width - visual_length(text))


def count_rows(block: str, width: Optional[int] = None) -> int:
    """
    Number of screen rows ``block`` occupies once printed.

    Without a width every logical line is one row. With a width, lines longer
    than the terminal wrap onto extra rows.
    """
    rows = 0
    for line in block.split("\n"):
        if width and width > 0:
            rows += max(1, math.ceil(visual_length(line) / width))
        else:
            rows += 1
    return rows

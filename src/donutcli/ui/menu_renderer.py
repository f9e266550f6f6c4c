"""
Menu rendering - turns MenuOptions plus a selected index into a text block.

render_menu() is pure: same options and index, same output. The selection
menu prints the block and uses its row count to erase it on the next redraw.
"""

import io
from typing import List, Tuple

from rich.console import Console
from rich.text import Text

from .menu_model import MenuItem, MenuOptions
from .text import pad_end, visual_length
from .theme import DONUT_THEME, Icons, box_chars

MIN_WIDTH = 40


def _content_width(options: MenuOptions) -> int:
    width = options.width or MIN_WIDTH
    for item in options.items:
        if item.separator:
            continue
        item_width = visual_length(item.label) + 4  # padding + pointer
        if item.shortcut:
            item_width += visual_length(item.shortcut) + 2
        if item.icon:
            item_width += 2
        width = max(width, item_width)
        if options.show_descriptions and item.description:
            width = max(width, visual_length(item.description) + 3)
    return width + 4  # border padding


def visible_window(options: MenuOptions, selected_index: int) -> Tuple[int, int]:
    """Half-open range of item indices drawn for this selection."""
    total = len(options.items)
    limit = options.max_visible
    if not limit or total <= limit:
        return 0, total
    start = selected_index - limit // 2
    start = max(0, min(start, total - limit))
    return start, start + limit


def _item_line(item: MenuItem, selected: bool, inner_width: int) -> Text:
    pointer = Icons.POINTER if selected else " "
    icon = f"{item.icon} " if item.icon else ""
    body = f" {pointer} {icon}{item.label}"

    if selected:
        style = "highlight"
    elif item.disabled:
        style = "text.dim"
    else:
        style = ""

    line = Text(style=style)
    if item.shortcut:
        hint = f"[{item.shortcut}]"
        spacer = inner_width - visual_length(body) - visual_length(hint) - 1
        line.append(body + " " * max(1, spacer))
        line.append(hint, style="" if selected else "text.muted")
        line.append(" ")
    else:
        line.append(pad_end(body, inner_width))
    return line


def _framed(content: Text, chars, style: str = "primary") -> Text:
    if chars is None:
        return content
    line = Text()
    line.append(chars.vertical, style=style)
    line.append_text(content)
    line.append(chars.vertical, style=style)
    return line


def _build_lines(options: MenuOptions, selected_index: int) -> List[Text]:
    chars = box_chars(options.border)
    width = _content_width(options)
    inner_width = width - (2 if chars else 0)
    lines: List[Text] = []

    if chars:
        if options.title:
            title = f" {options.title} "
            title_len = visual_length(title)
            left = max(0, (inner_width - title_len) // 2)
            right = max(0, inner_width - left - title_len)
            top = chars.top_left + chars.horizontal * left + title + chars.horizontal * right + chars.top_right
        else:
            top = chars.top_left + chars.horizontal * inner_width + chars.top_right
        lines.append(Text(top, style="primary"))

    start, end = visible_window(options, selected_index)
    windowed = (start, end) != (0, len(options.items))

    if windowed:
        above = f"   {Icons.MORE_ABOVE} {start} more" if start > 0 else ""
        lines.append(_framed(Text(pad_end(above, inner_width), style="text.muted"), chars))

    for idx in range(start, end):
        item = options.items[idx]
        if item.separator:
            if chars:
                lines.append(Text(chars.tee_left + chars.horizontal * inner_width + chars.tee_right, style="text.muted"))
            else:
                lines.append(Text("─" * inner_width, style="text.muted"))
            continue

        selected = idx == selected_index
        lines.append(_framed(_item_line(item, selected, inner_width), chars))

        if options.show_descriptions and item.description and selected:
            desc = Text(pad_end(f"     {item.description}", inner_width), style="text.muted")
            lines.append(_framed(desc, chars))

    if windowed:
        remaining = len(options.items) - end
        below = f"   {Icons.MORE_BELOW} {remaining} more" if remaining > 0 else ""
        lines.append(_framed(Text(pad_end(below, inner_width), style="text.muted"), chars))

    if chars:
        lines.append(Text(chars.bottom_left + chars.horizontal * inner_width + chars.bottom_right, style="primary"))

    return lines


def render_menu(options: MenuOptions, selected_index: int = 0, color: bool = True) -> str:
    """Render the menu as one string of newline-separated rows (ANSI-styled when ``color``)."""
    lines = _build_lines(options, selected_index)
    console = Console(
        file=io.StringIO(),
        force_terminal=color,
        color_system="truecolor" if color else None,
        theme=DONUT_THEME,
        highlight=False,
        legacy_windows=False,
        width=max(visual_length(line.plain) for line in lines) + 1 if lines else 80,
    )
    with console.capture() as capture:
        console.print(Text("\n").join(lines), end="", soft_wrap=True)
    return capture.get()

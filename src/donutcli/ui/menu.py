"""
Interactive selection menu with keyboard navigation.

The menu is a small state machine driven by awaiting one key event at a
time:

    Idle -> Listening -> Confirmed | Cancelled -> Closed

Up/k and Down/j move between selectable rows (no wraparound), Return
confirms, a shortcut character confirms its item directly, and Escape or
Ctrl+C cancels. Whatever the exit path, the key source is closed exactly once
before run() returns or raises.
"""

import logging
import shutil
import sys
from typing import Optional, TextIO

from .keys import KeyEvent, KeySource
from .menu_model import MenuItem, MenuOptions, MenuResult, MenuState
from .menu_renderer import render_menu
from .terminal import TerminalKeySource
from .text import count_rows

logger = logging.getLogger(__name__)

HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"


def erase_rows(rows: int) -> str:
    """Escape sequence moving up ``rows`` rows and clearing to end of screen."""
    if rows <= 0:
        return "\x1b[J"
    return f"\x1b[{rows}A\x1b[J"


class SelectionMenu:
    """
    One invocation of an arrow-key menu.

    Args:
        options: items and appearance
        keys: exclusive key source; opened after the first render
        out: text stream the menu is drawn on (stdout by default)
        color: emit ANSI styling
        width: terminal width used for row accounting; detected when None
    """

    def __init__(self, options: MenuOptions, keys: KeySource,
                 out: Optional[TextIO] = None, color: bool = True,
                 width: Optional[int] = None):
        self.options = options
        self.keys = keys
        self.out = out or sys.stdout
        self.color = color
        self.width = width
        self.state: Optional[MenuState] = None
        self.rendered_rows = 0

    def _terminal_width(self) -> Optional[int]:
        if self.width is not None:
            return self.width
        return shutil.get_terminal_size(fallback=(0, 0)).columns or None

    def _draw(self, redraw: bool) -> None:
        block = render_menu(self.options, self.state.selected_index, color=self.color)
        if redraw:
            self.out.write(erase_rows(self.rendered_rows))
        self.out.write(block + "\n")
        self.out.flush()
        self.rendered_rows = count_rows(block, self._terminal_width())

    def _shortcut_match(self, char: str) -> Optional[int]:
        wanted = char.lower()
        for idx in self.state.selectable:
            item: MenuItem = self.options.items[idx]
            if item.shortcut and item.shortcut.lower() == wanted:
                return idx
        return None

    def handle_key(self, key: KeyEvent) -> Optional[MenuResult]:
        """
        Apply one key to the state.

        Returns the final result when the key ends the menu, None while the
        menu keeps listening. Cancelling a menu with ``allow_cancel=False``
        raises SystemExit(0).
        """
        state = self.state

        if key.name in ("up", "k") and not key.ctrl and not key.meta:
            if state.move_up():
                self._draw(redraw=True)
            return None

        if key.name in ("down", "j") and not key.ctrl and not key.meta:
            if state.move_down():
                self._draw(redraw=True)
            return None

        if key.name == "return":
            item = self.options.items[state.selected_index]
            return MenuResult(key=item.key, index=state.selected_index, cancelled=False)

        if key.is_cancel:
            if self.options.allow_cancel:
                return MenuResult.cancelled_result()
            logger.debug("Menu cancelled without allow_cancel, exiting process")
            raise SystemExit(0)

        char = key.printable
        if char:
            idx = self._shortcut_match(char)
            if idx is not None:
                return MenuResult(key=self.options.items[idx].key, index=idx, cancelled=False)

        return None

    async def run(self) -> MenuResult:
        selectable = self.options.selectable_indices()
        if not selectable:
            return MenuResult.cancelled_result()

        requested = self.options.selected_index
        initial = requested if requested in selectable else selectable[0]
        self.state = MenuState(selected_index=initial, selectable=selectable)

        self.out.write(HIDE_CURSOR)
        try:
            self._draw(redraw=False)
            self.keys.open()
        except BaseException:
            self.out.write(SHOW_CURSOR)
            self.out.flush()
            raise
        self.state.raw_mode_acquired = True
        try:
            while True:
                key = await self.keys.next_key()
                result = self.handle_key(key)
                if result is not None:
                    logger.debug(f"Menu resolved: {result}")
                    return result
        finally:
            self.keys.close()
            self.state.raw_mode_acquired = False
            self.out.write(SHOW_CURSOR)
            self.out.flush()


async def select(options: MenuOptions, keys: Optional[KeySource] = None,
                 out: Optional[TextIO] = None, color: bool = True) -> MenuResult:
    """Show a menu on the terminal and wait for the user's choice."""
    if keys is None:
        keys = TerminalKeySource()
    return await SelectionMenu(options, keys, out=out, color=color).run()

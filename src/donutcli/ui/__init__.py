"""
Terminal UI: selection menus, key handling and shell output.
"""

from .display import Display, create_console
from .keys import KeyDecoder, KeyEvent, KeySource
from .menu import SelectionMenu, select
from .menu_model import MenuItem, MenuOptions, MenuResult, MenuState
from .menu_renderer import render_menu
from .terminal import TerminalKeySource, is_interactive

__all__ = [
    'Display', 'KeyDecoder', 'KeyEvent', 'KeySource', 'MenuItem', 'MenuOptions',
    'MenuResult', 'MenuState', 'SelectionMenu', 'TerminalKeySource',
    'create_console', 'is_interactive', 'render_menu', 'select',
]

"""
donut-cli - interactive trading terminal shell with slash commands and
keyboard-driven selection menus.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]

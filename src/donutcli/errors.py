"""Error types for donut-cli with friendly, actionable messages."""

from __future__ import annotations
from typing import Optional, Sequence

import click


class DonutCLIError(click.ClickException):
    """Base class for all CLI-visible errors with enhanced formatting."""

    #: Emoji shown at the beginning of every error line
    emoji: str = "❌"

    #: Short, actionable suggestion shown after the main message.
    hint: Optional[str] = None

    def __init__(self, message: str, hint: Optional[str] = None) -> None:
        super().__init__(message)
        if hint is not None:
            self.hint = hint

    @property
    def formatted_message(self) -> str:
        """
        Returns the final string that Click writes to stderr.
        Includes:
        * emoji + main message (bold)
        * optional hint on a new line (dim colour)
        """
        lines = [f"{self.emoji}  {click.style(self.message, fg='red', bold=True)}"]
        if self.hint:
            lines.append(click.style(f"💡 {self.hint}", fg='yellow'))
        return "\n".join(lines)

    def show(self, file=None) -> None:
        click.echo(self.formatted_message, err=True, file=file)


class UnknownCommandError(DonutCLIError):
    """Raised when a slash command name is not registered."""
    emoji = "🚫"

    def __init__(self, name: str, suggestions: Sequence[str] = ()) -> None:
        self.name = name
        self.suggestions = list(suggestions)
        if self.suggestions:
            hint = "Did you mean: " + ", ".join(f"/{s}" for s in self.suggestions) + "?"
        else:
            hint = f"Type {click.style('/help', fg='cyan')} to see available commands."
        super().__init__(f"Unknown command: /{name}", hint)


class TerminalModeError(DonutCLIError):
    """Raised when the terminal cannot be switched into raw mode."""
    emoji = "🖥️"

    def __init__(self, details: str) -> None:
        hint = "Run donut-cli from an interactive terminal, or use line-based input."
        super().__init__(f"Terminal mode problem – {details}", hint)


class InputStreamBusyError(DonutCLIError):
    """Raised when another menu already owns the input stream."""
    emoji = "⛔"

    def __init__(self, fd: int) -> None:
        self.fd = fd
        hint = "Wait for the open menu to finish before starting another one."
        super().__init__(f"Input stream (fd {fd}) is already claimed by another menu.", hint)


class ConfigError(DonutCLIError):
    """Raised when there's a configuration problem."""
    emoji = "🔧"

    def __init__(self, details: str) -> None:
        hint = "Check ~/.donut/donut.yaml or the DONUT_* environment variables."
        super().__init__(f"Configuration problem – {details}", hint)

"""
Shell output - banner, help, status views and message lines.

Everything is printed through one rich Console so tests can capture it by
passing ``Console(file=io.StringIO())``.
"""

from typing import List, Optional, Sequence

from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..collaborators import SessionInfo
from ..commands.types import CommandDescriptor
from .theme import DONUT_THEME, BoxChars, Icons, box_chars

SEPARATOR_WIDTH = 50


def create_console(color: bool = True, **kwargs) -> Console:
    return Console(theme=DONUT_THEME, highlight=False, no_color=not color, **kwargs)


class Display:
    """Formatting helpers bound to a console."""

    def __init__(self, console: Optional[Console] = None, border: str = "rounded"):
        self.console = console or create_console()
        self.chars: Optional[BoxChars] = box_chars(border) or box_chars("single")

    def separator(self) -> None:
        self.console.print(self.chars.horizontal * SEPARATOR_WIDTH, style="text.muted")

    def banner(self, commands: Sequence[CommandDescriptor] = ()) -> None:
        width = 63
        c = self.chars
        title = Text.assemble("  🍩 ", ("DONUT CLI", "text.bright"), " - ", ("Interactive Mode", "text.muted"))
        names = [f"/{d.name}" for d in commands][:6]
        listing = Text.assemble("  ", ("Commands:", "text.muted"), " ", ("  ".join(names), "info"))

        self.console.print(c.top_left + c.horizontal * width + c.top_right, style="primary")
        for body in (title, Text(""), listing):
            line = Text()
            line.append(c.vertical, style="primary")
            line.append_text(body)
            line.pad_right(max(0, width - body.cell_len))
            line.append(c.vertical, style="primary")
            self.console.print(line)
        self.console.print(c.bottom_left + c.horizontal * width + c.bottom_right, style="primary")

    def help(self, commands: Sequence[CommandDescriptor]) -> None:
        table = Table(title="Commands", title_style="text.bright", show_edge=False, box=None, pad_edge=False)
        table.add_column("Command", style="info", no_wrap=True)
        table.add_column("Aliases", style="text.muted")
        table.add_column("Description")
        for descriptor in commands:
            aliases = ", ".join(f"/{a}" for a in descriptor.aliases)
            table.add_row(f"/{descriptor.name}", aliases, descriptor.description)
        self.console.print()
        self.console.print(table)
        self.console.print()
        self.console.print("Anything that does not start with / is sent to the strategy agent.", style="text.muted")

    def user_message(self, message: str) -> None:
        self.console.print()
        self.console.print(Text.assemble(("You: ", "text.bright"), message))

    def agent_start(self, agent_type: str) -> None:
        label = agent_type.replace("_", " ").title()
        self.console.print()
        self.console.print(Text.assemble((f"{Icons.CHEVRON} {label}", "primary")))

    def agent_end(self) -> None:
        self.separator()

    def info(self, message: str) -> None:
        self.console.print(message, style="text.muted", markup=False)

    def success(self, message: str) -> None:
        self.console.print(Text.assemble((Icons.SUCCESS, "success"), " ", message))

    def warning(self, message: str) -> None:
        self.console.print(Text.assemble(("Warning:", "warning"), " ", message))

    def error(self, message: str) -> None:
        self.console.print()
        self.console.print(Text.assemble(("Error:", "error"), " ", message))

    def goodbye(self, message: str = "Goodbye!") -> None:
        self.console.print()
        self.console.print(f"👋 {message}", style="primary", markup=False)

    def clear(self) -> None:
        self.console.clear()

    def session_status(self, status: SessionInfo) -> None:
        rows: List[tuple] = [
            ("Session ID:", status.session_id, "cyan"),
            ("Current Stage:", status.stage, "yellow"),
            ("Created:", status.created_at.isoformat(timespec="seconds"), ""),
            ("Updated:", status.updated_at.isoformat(timespec="seconds"), ""),
        ]
        if status.strategy_name:
            rows.append(("Strategy:", status.strategy_name, "green"))
        if status.backtest_run_id:
            rows.append(("Backtest Run:", status.backtest_run_id, "magenta"))
        if status.pending_trades > 0:
            rows.append(("Pending Trades:", str(status.pending_trades), "red"))

        self.console.print()
        self.console.print("Session Status", style="bold")
        self.separator()
        for label, value, style in rows:
            self.console.print(Text.assemble(f"{label:<16}", (value, style)))

    def sessions_list(self, sessions: Sequence[SessionInfo]) -> None:
        if not sessions:
            self.console.print()
            self.console.print("No sessions found.", style="warning")
            self.info("Start a new session with: donut start")
            return

        self.console.print()
        self.console.print("Sessions", style="bold")
        self.separator()
        for session in sessions:
            self.console.print(Text.assemble(
                (f"{session.session_id[:8]}... ", "cyan"),
                (f"{session.stage:<15} ", "yellow"),
                (session.created_at.date().isoformat(), "text.muted"),
            ))

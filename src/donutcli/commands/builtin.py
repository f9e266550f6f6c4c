"""
Built-in slash commands.

Each command is a small CommandHandler. Agent commands route a prompt to one
of the trading agents; direct commands name a UI behaviour the shell performs
itself (see ``DIRECT_MESSAGES``).
"""

import re

from .registry import CommandRegistry
from .types import AgentType, CommandDescriptor, CommandHandler, CommandResult

#: Values of ``CommandResult.message`` the shell understands for direct actions.
DIRECT_MESSAGES = ("help", "status", "clear", "sessions", "resume:")

_RUN_ID = re.compile(r"^[a-f0-9-]+$", re.IGNORECASE)

PAPER_TRADING_HELP = """
Paper Trading Commands:
  donut paper start --strategy <name> --balance <amount>
  donut paper status [sessionId]
  donut paper trades [sessionId]
  donut paper stop <sessionId>
  donut paper list

Use these commands in a separate terminal, or type /quit to exit.
"""


def looks_like_run_id(text: str) -> bool:
    return bool(_RUN_ID.match(text)) or text.startswith("bt_")


class StrategyCommand(CommandHandler):
    DEFAULT_PROMPT = "Help me build a trading strategy. Ask me about my goals and preferences."

    async def execute(self, args: str) -> CommandResult:
        return CommandResult.agent(AgentType.STRATEGY_BUILDER, args or self.DEFAULT_PROMPT)


class BacktestCommand(CommandHandler):
    DEFAULT_PROMPT = "Run a new backtest. Ask me about the parameters I want to use."

    async def execute(self, args: str) -> CommandResult:
        if not args:
            prompt = self.DEFAULT_PROMPT
        elif looks_like_run_id(args):
            prompt = f"Analyze the backtest results for run ID: {args}"
        else:
            prompt = args
        return CommandResult.agent(AgentType.BACKTEST_ANALYST, prompt)


class AnalyzeCommand(CommandHandler):
    async def execute(self, args: str) -> CommandResult:
        if not args:
            return CommandResult.info("Usage: /analyze <runId>\nProvide a backtest run ID to analyze.")
        return CommandResult.agent(
            AgentType.BACKTEST_ANALYST,
            f"Provide a detailed analysis of backtest run: {args}",
        )


class PaperCommand(CommandHandler):
    async def execute(self, args: str) -> CommandResult:
        return CommandResult.info(PAPER_TRADING_HELP)


class DirectCommand(CommandHandler):
    """Hands a fixed direct-action name back to the shell."""

    def __init__(self, message: str):
        self.message = message

    async def execute(self, args: str) -> CommandResult:
        return CommandResult.direct(self.message)


class ResumeCommand(CommandHandler):
    async def execute(self, args: str) -> CommandResult:
        if not args:
            return CommandResult.info("Usage: /resume <sessionId>")
        return CommandResult.direct(f"resume:{args}")


class QuitCommand(CommandHandler):
    async def execute(self, args: str) -> CommandResult:
        return CommandResult.exit("Goodbye!")


def builtin_commands():
    return [
        CommandDescriptor("strategy", "Build or modify a trading strategy", StrategyCommand(), ("s", "strat")),
        CommandDescriptor("backtest", "Run a new backtest or check status", BacktestCommand(), ("bt", "back")),
        CommandDescriptor("analyze", "Analyze backtest results", AnalyzeCommand(), ("a", "an")),
        CommandDescriptor("paper", "Paper trading commands", PaperCommand(), ("p",)),
        CommandDescriptor("status", "Show current session status", DirectCommand("status")),
        CommandDescriptor("sessions", "List all sessions", DirectCommand("sessions"), ("list",)),
        CommandDescriptor("resume", "Resume a previous session", ResumeCommand(), ("r",)),
        CommandDescriptor("help", "Show help message", DirectCommand("help"), ("h", "?")),
        CommandDescriptor("clear", "Clear the screen", DirectCommand("clear"), ("cls",)),
        CommandDescriptor("quit", "Exit interactive mode", QuitCommand(), ("exit", "q")),
    ]


def create_default_registry() -> CommandRegistry:
    """A fresh registry holding every built-in command."""
    registry = CommandRegistry()
    for descriptor in builtin_commands():
        registry.register(descriptor)
    return registry

"""Value types shared by the slash-command parser, registry and dispatcher."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional, Tuple


class CommandAction(str, Enum):
    """What the outer loop should do with a CommandResult."""
    AGENT = "agent"      # hand prompt/agent_type to the agent runner
    DIRECT = "direct"    # built-in UI behaviour named by message
    EXIT = "exit"        # terminate the session
    NONE = "none"        # show message, nothing else


class AgentType(str, Enum):
    STRATEGY_BUILDER = "STRATEGY_BUILDER"
    BACKTEST_ANALYST = "BACKTEST_ANALYST"
    CHART_ANALYST = "CHART_ANALYST"
    EXECUTION_ASSISTANT = "EXECUTION_ASSISTANT"


@dataclass(frozen=True)
class ParsedInput:
    """Syntax of one line of input."""
    is_command: bool
    command: str
    args: str


@dataclass(frozen=True)
class CommandResult:
    """Outcome of running a slash command."""
    continue_loop: bool
    action: CommandAction
    agent_type: Optional[str] = None
    prompt: Optional[str] = None
    message: Optional[str] = None

    @classmethod
    def agent(cls, agent_type: AgentType, prompt: str) -> "CommandResult":
        return cls(True, CommandAction.AGENT, agent_type=agent_type.value, prompt=prompt)

    @classmethod
    def direct(cls, message: str) -> "CommandResult":
        return cls(True, CommandAction.DIRECT, message=message)

    @classmethod
    def info(cls, message: str) -> "CommandResult":
        return cls(True, CommandAction.NONE, message=message)

    @classmethod
    def exit(cls, message: str = "Goodbye!") -> "CommandResult":
        return cls(False, CommandAction.EXIT, message=message)


class CommandHandler(ABC):
    """Behaviour bound to a slash command.

    Implementations map an argument string to a CommandResult. They may call
    out to collaborators but must never mutate the registry they live in.
    """

    @abstractmethod
    async def execute(self, args: str) -> CommandResult:
        ...


@dataclass(frozen=True)
class CommandDescriptor:
    """A registrable slash command."""
    name: str
    description: str
    handler: CommandHandler = field(compare=False)
    aliases: Tuple[str, ...] = ()

    def keys(self) -> Iterator[str]:
        """Lower-cased lookup keys: the canonical name first, then aliases."""
        yield self.name.lower()
        for alias in self.aliases:
            yield alias.lower()

"""Resolve a line of input to a registered command and run it."""

import logging
from typing import Optional

from ..errors import UnknownCommandError
from .parser import parse_input
from .registry import CommandRegistry
from .types import CommandResult

logger = logging.getLogger(__name__)


class CommandDispatcher:
    """
    Parser + registry front end.

    Calls are not serialized here: the read loop awaits one dispatch before
    issuing the next. Handler exceptions propagate unchanged.
    """

    def __init__(self, registry: CommandRegistry):
        self.registry = registry

    async def dispatch(self, line: str) -> Optional[CommandResult]:
        """
        Run the slash command on ``line``.

        Returns None when no handler matches, either because the line is free
        text or because the command is not registered. Callers must not
        confuse this with a handler returning ``CommandAction.NONE``.
        """
        parsed = parse_input(line)
        if not parsed.is_command:
            return None

        descriptor = self.registry.lookup(parsed.command)
        if descriptor is None:
            logger.debug(f"No handler for /{parsed.command}")
            return None

        return await descriptor.handler.execute(parsed.args)

    async def execute(self, name: str, args: str = "") -> CommandResult:
        """Run a command by name, raising UnknownCommandError on a miss."""
        descriptor = self.registry.lookup(name.lstrip("/"))
        if descriptor is None:
            raise UnknownCommandError(name.lstrip("/").lower(), self.registry.suggest(name.lstrip("/")))
        return await descriptor.handler.execute(args.strip())

"""
Slash commands: parsing, registration and dispatch.
"""

from .builtin import create_default_registry
from .dispatcher import CommandDispatcher
from .parser import parse_input
from .registry import CommandRegistry
from .types import (
    AgentType,
    CommandAction,
    CommandDescriptor,
    CommandHandler,
    CommandResult,
    ParsedInput,
)

__all__ = [
    'AgentType', 'CommandAction', 'CommandDescriptor', 'CommandDispatcher',
    'CommandHandler', 'CommandRegistry', 'CommandResult', 'ParsedInput',
    'create_default_registry', 'parse_input',
]

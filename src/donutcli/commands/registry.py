"""
Slash-command registry.

One registry is built at startup and handed to the dispatcher (and to tests)
by reference. Registration is append-only: nothing is ever removed, and a
later registration for the same key silently replaces the earlier one.
"""

import difflib
import logging
from typing import Dict, Iterator, List, Optional

from .types import CommandDescriptor

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Case-insensitive mapping from command names and aliases to descriptors."""

    def __init__(self):
        self._entries: Dict[str, CommandDescriptor] = {}

    def register(self, descriptor: CommandDescriptor) -> None:
        """Register a descriptor under its name and every alias."""
        for key in descriptor.keys():
            previous = self._entries.get(key)
            if previous is not None and previous is not descriptor:
                logger.debug(f"Command key '{key}' rebound from /{previous.name} to /{descriptor.name}")
            self._entries[key] = descriptor

        logger.debug(f"Registered command: /{descriptor.name} (aliases: {', '.join(descriptor.aliases) or '-'})")

    def lookup(self, name: str) -> Optional[CommandDescriptor]:
        return self._entries.get(name.lower())

    def list_unique(self) -> List[CommandDescriptor]:
        """All descriptors once each, in first-registration order."""
        seen = set()
        unique = []
        for descriptor in self._entries.values():
            if id(descriptor) in seen:
                continue
            seen.add(id(descriptor))
            unique.append(descriptor)
        return unique

    def complete(self, prefix: str) -> List[str]:
        """Sorted ``/key`` completions for a partially typed command."""
        text = prefix[1:] if prefix.startswith("/") else prefix
        text = text.lower()
        return sorted(f"/{key}" for key in self._entries if key.startswith(text))

    def suggest(self, name: str, limit: int = 3) -> List[str]:
        """Canonical names close to an unknown command, best match first."""
        matches = difflib.get_close_matches(name.lower(), list(self._entries), n=limit * 2, cutoff=0.6)
        suggestions: List[str] = []
        for key in matches:
            canonical = self._entries[key].name
            if canonical not in suggestions:
                suggestions.append(canonical)
        return suggestions[:limit]

    def __contains__(self, name: str) -> bool:
        return name.lower() in self._entries

    def __len__(self) -> int:
        return len(self.list_unique())

    def __iter__(self) -> Iterator[CommandDescriptor]:
        return iter(self.list_unique())

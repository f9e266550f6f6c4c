"""Slash-command line parser."""

from .types import ParsedInput


def parse_input(raw: str) -> ParsedInput:
    """
    Split one line of input into its slash-command syntax.

    ``/name rest of line`` yields the lower-cased name and the trimmed rest.
    Anything else is free text: ``is_command`` is False and ``args`` holds the
    trimmed line. Never raises; empty input is free text with empty args.
    """
    trimmed = raw.strip()

    if not trimmed.startswith("/"):
        return ParsedInput(is_command=False, command="", args=trimmed)

    head, _, rest = trimmed.partition(" ")
    return ParsedInput(
        is_command=True,
        command=head[1:].lower(),
        args=rest.strip(),
    )

'''
Keyboard events and decoding of raw terminal input.

Raw-mode terminals deliver bytes: printable characters, control characters
and ANSI escape sequences for arrows and friends. KeyDecoder turns each chunk
read from the terminal into KeyEvent objects named after the keys
("up", "down", "return", "escape", "c" with ctrl, ...).
'''

import codecs
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

ESC = "\x1b"

# CSI / SS3 final characters
_ARROWS = {
    "A": "up",
    "B": "down",
    "C": "right",
    "D": "left",
    "H": "home",
    "F": "end",
}

# CSI <n>~ sequences
_TILDE_KEYS = {
    "1": "home",
    "2": "insert",
    "3": "delete",
    "4": "end",
    "5": "pageup",
    "6": "pagedown",
}


@dataclass(frozen=True)
class KeyEvent:
    """A single keypress."""
    name: str
    char: Optional[str] = None
    ctrl: bool = False
    meta: bool = False
    shift: bool = False

    @property
    def is_cancel(self) -> bool:
        """Escape or Ctrl+C."""
        return self.name == "escape" or (self.ctrl and self.name == "c")

    @property
    def printable(self) -> Optional[str]:
        """The typed character for plain printable keys, else None."""
        if self.ctrl or self.meta or not self.char or not self.char.isprintable():
            return None
        return self.char


def char_event(ch: str, meta: bool = False) -> KeyEvent:
    if ch in ("\r", "\n"):
        return KeyEvent("return", ch)
    if ch == "\t":
        return KeyEvent("tab", ch)
    if ch in ("\x7f", "\x08"):
        return KeyEvent("backspace")
    if ch == " ":
        return KeyEvent("space", " ", meta=meta)
    code = ord(ch)
    if 1 <= code <= 26:
        return KeyEvent(chr(code + 96), ctrl=True, meta=meta)
    if ch.isalpha():
        return KeyEvent(ch.lower(), ch, meta=meta, shift=ch.isupper())
    return KeyEvent(ch, ch, meta=meta)


class KeyDecoder:
    """Incremental bytes -> KeyEvent decoder.

    A chunk ending in a bare ESC is reported as the Escape key: terminals
    write a whole escape sequence in one go, so a trailing ESC is never the
    start of a sequence still in flight.
    """

    def __init__(self, encoding: str = "utf-8"):
        self._utf8 = codecs.getincrementaldecoder(encoding)(errors="replace")

    def feed(self, data: bytes) -> List[KeyEvent]:
        return self.decode(self._utf8.decode(data))

    def decode(self, text: str) -> List[KeyEvent]:
        events: List[KeyEvent] = []
        i = 0
        n = len(text)
        while i < n:
            ch = text[i]
            if ch != ESC:
                events.append(char_event(ch))
                i += 1
                continue

            # ESC [ ... or ESC O ...
            if i + 1 < n and text[i + 1] in "[O":
                j = i + 2
                params = ""
                while j < n and (text[j].isdigit() or text[j] == ";"):
                    params += text[j]
                    j += 1
                if j >= n:
                    # Truncated sequence
                    events.append(KeyEvent("unknown"))
                    i = n
                    continue
                final = text[j]
                if final == "~":
                    name = _TILDE_KEYS.get(params.split(";")[0], "unknown")
                else:
                    name = _ARROWS.get(final, "unknown")
                events.append(KeyEvent(name, shift=params.endswith(";2")))
                i = j + 1
                continue

            if i + 1 < n and text[i + 1] != ESC:
                # Alt/Meta + key
                events.append(char_event(text[i + 1], meta=True))
                i += 2
                continue

            events.append(KeyEvent("escape"))
            i += 1
        return events


class KeySource(ABC):
    """
    Exclusive supplier of key events for one menu invocation.

    ``open()`` takes ownership of the input stream (raw mode plus the only
    listener) and ``close()`` gives it back. ``next_key()`` suspends until the
    next keypress arrives; there is no timeout.
    """

    @abstractmethod
    def open(self) -> None:
        ...

    @abstractmethod
    def close(self) -> None:
        ...

    @abstractmethod
    async def next_key(self) -> KeyEvent:
        ...

"""
Terminal ownership for interactive menus.

TerminalKeySource puts the controlling terminal into raw mode, attaches the
only reader for its file descriptor to the running asyncio loop, and hands
decoded keypresses to the menu through a queue. close() restores the saved
terminal attributes and detaches the reader.

A process-wide claim table makes ownership exclusive per file descriptor: a
second open() against a claimed descriptor fails before touching the
terminal.
"""

import asyncio
import io
import logging
import os
import sys
import termios
import threading
from typing import ClassVar, List, Optional, Set, TextIO

from ..errors import InputStreamBusyError, TerminalModeError
from .keys import KeyDecoder, KeyEvent, KeySource

logger = logging.getLogger(__name__)

_EOF = object()


def is_interactive(stream: Optional[TextIO] = None) -> bool:
    """True when ``stream`` (stdin by default) is attached to a terminal."""
    stream = stream or sys.stdin
    try:
        return os.isatty(stream.fileno())
    except (AttributeError, ValueError, io.UnsupportedOperation):
        return False


def raw_attributes(attrs: List) -> List:
    """
    Raw-input copy of termios ``attrs``.

    Input is delivered byte by byte with no echo and no signal keys, while
    output post-processing stays on so "\\n" still returns the carriage.
    """
    mode = list(attrs)
    mode[6] = list(attrs[6])
    mode[0] &= ~(termios.BRKINT | termios.ICRNL | termios.INPCK | termios.ISTRIP | termios.IXON)
    mode[2] |= termios.CS8
    mode[3] &= ~(termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG)
    mode[6][termios.VMIN] = 1
    mode[6][termios.VTIME] = 0
    return mode


class TerminalKeySource(KeySource):
    """
    Key events from a terminal file descriptor.

    Args:
        stream: input stream, stdin by default
        degraded: when the stream is not a TTY, read it without raw mode
            instead of raising TerminalModeError
    """

    _claims: ClassVar[Set[int]] = set()
    _claims_lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self, stream: Optional[TextIO] = None, degraded: bool = False):
        self.stream = stream or sys.stdin
        self.degraded = degraded
        self._fd: Optional[int] = None
        self._saved_attrs: Optional[List] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._queue: Optional[asyncio.Queue] = None
        self._decoder = KeyDecoder()
        self._open = False

    @property
    def raw_mode(self) -> bool:
        return self._saved_attrs is not None

    @classmethod
    def claimed(cls, fd: int) -> bool:
        with cls._claims_lock:
            return fd in cls._claims

    @classmethod
    def _claim(cls, fd: int) -> None:
        with cls._claims_lock:
            if fd in cls._claims:
                raise InputStreamBusyError(fd)
            cls._claims.add(fd)
        logger.debug(f"Claimed input fd {fd}")

    @classmethod
    def _unclaim(cls, fd: int) -> None:
        with cls._claims_lock:
            cls._claims.discard(fd)
        logger.debug(f"Released input fd {fd}")

    def open(self) -> None:
        if self._open:
            raise RuntimeError("TerminalKeySource is already open")

        try:
            fd = self.stream.fileno()
        except (AttributeError, ValueError, io.UnsupportedOperation) as e:
            raise TerminalModeError("input stream has no file descriptor") from e

        tty_attached = os.isatty(fd)
        if not tty_attached and not self.degraded:
            raise TerminalModeError("input is not an interactive terminal, raw mode unavailable")

        loop = asyncio.get_running_loop()
        self._claim(fd)
        try:
            if tty_attached:
                saved = termios.tcgetattr(fd)
                termios.tcsetattr(fd, termios.TCSADRAIN, raw_attributes(saved))
                self._saved_attrs = saved
                logger.debug("Entered raw terminal mode")
            else:
                logger.debug("Input is not a TTY, reading keys without raw mode")

            self._queue = asyncio.Queue()
            loop.add_reader(fd, self._on_readable)
        except termios.error as e:
            self._restore(fd)
            self._unclaim(fd)
            raise TerminalModeError(f"cannot enable raw mode ({e})") from e
        except BaseException:
            self._restore(fd)
            self._unclaim(fd)
            raise

        self._fd = fd
        self._loop = loop
        self._open = True

    def _on_readable(self) -> None:
        try:
            data = os.read(self._fd, 1024)
        except BlockingIOError:
            return
        except OSError as e:
            logger.warning(f"Reading from terminal failed: {e}")
            data = b""

        if not data:
            # EOF: stop listening, wake the consumer
            self._loop.remove_reader(self._fd)
            self._queue.put_nowait(_EOF)
            return

        for event in self._decoder.feed(data):
            self._queue.put_nowait(event)

    async def next_key(self) -> KeyEvent:
        if not self._open:
            raise RuntimeError("TerminalKeySource is not open")
        item = await self._queue.get()
        if item is _EOF:
            # Keep reporting EOF to any later caller
            self._queue.put_nowait(_EOF)
            raise EOFError("input stream closed")
        return item

    def _restore(self, fd: int) -> None:
        if self._saved_attrs is None:
            return
        try:
            termios.tcsetattr(fd, termios.TCSADRAIN, self._saved_attrs)
            logger.debug("Restored terminal mode")
        except (termios.error, OSError) as e:
            logger.warning(f"Failed to restore terminal attributes: {e}")
        finally:
            self._saved_attrs = None

    def close(self) -> None:
        if not self._open:
            return
        self._open = False
        fd = self._fd
        try:
            self._loop.remove_reader(fd)
        finally:
            self._restore(fd)
            self._unclaim(fd)
            self._fd = None
            self._loop = None
            self._queue = None

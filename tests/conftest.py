import io
import logging
from typing import Iterable, List

import pytest

from donutcli.commands import CommandDispatcher, create_default_registry
from donutcli.ui.display import Display, create_console
from donutcli.ui.keys import KeyEvent, KeySource


# ----------------------------------------------------------------------
# Fakes
# ----------------------------------------------------------------------
class ScriptedKeys(KeySource):
    """Key source replaying a fixed list of events and counting open/close."""

    def __init__(self, keys: Iterable[KeyEvent] = (), fail_open: Exception = None):
        self.keys: List[KeyEvent] = list(keys)
        self.fail_open = fail_open
        self.open_calls = 0
        self.close_calls = 0
        self.output_at_open = None
        self.out = None

    def open(self) -> None:
        self.open_calls += 1
        if self.out is not None:
            self.output_at_open = self.out.getvalue()
        if self.fail_open is not None:
            raise self.fail_open

    def close(self) -> None:
        self.close_calls += 1

    async def next_key(self) -> KeyEvent:
        if not self.keys:
            raise EOFError("script exhausted")
        return self.keys.pop(0)


def key(name, char=None, **mods) -> KeyEvent:
    return KeyEvent(name, char, **mods)


# ----------------------------------------------------------------------
# Fixtures
# ----------------------------------------------------------------------
@pytest.fixture
def registry():
    return create_default_registry()


@pytest.fixture
def dispatcher(registry):
    return CommandDispatcher(registry)


@pytest.fixture
def output():
    return io.StringIO()


@pytest.fixture
def display(output):
    return Display(create_console(color=False, file=output, width=100))


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep tests away from the real ~/.donut and DONUT_* variables."""
    monkeypatch.setenv("DONUT_HOME", str(tmp_path / "donut-home"))
    monkeypatch.delenv("DONUT_CONFIG", raising=False)
    for name in ("LOG_LEVEL", "LOG_FORMAT", "LOG_FILE", "PROMPT", "SHOW_BANNER",
                 "DEFAULT_AGENT", "HISTORY_SIZE", "MENU_BORDER", "MENU_MAX_VISIBLE", "COLOR"):
        monkeypatch.delenv(f"DONUT_{name}", raising=False)
    monkeypatch.chdir(tmp_path)
    yield


@pytest.fixture(autouse=True)
def restore_root_logging():
    """configure_logging() replaces root handlers; put the originals back."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for h in list(root.handlers):
        if h not in handlers:
            root.removeHandler(h)
            h.close()
    for h in handlers:
        if h not in root.handlers:
            root.addHandler(h)
    root.setLevel(level)

"""Tests for terminal ownership and raw-mode key reading."""

import asyncio
import io
import os
import pty
import termios

import pytest

from donutcli.errors import InputStreamBusyError, TerminalModeError
from donutcli.ui.menu import select
from donutcli.ui.menu_model import MenuItem, MenuOptions
from donutcli.ui.terminal import TerminalKeySource, is_interactive, raw_attributes


@pytest.fixture
def pipe():
    r, w = os.pipe()
    reader = os.fdopen(r, "rb", buffering=0)
    yield reader, w
    reader.close()
    os.close(w)


@pytest.fixture
def terminal():
    master, slave = pty.openpty()
    slave_stream = os.fdopen(slave, "rb", buffering=0)
    yield master, slave_stream
    slave_stream.close()
    os.close(master)


class TestRawAttributes:

    def test_input_flags_cleared_output_kept(self):
        cc = [b"\x00"] * 32
        attrs = [
            termios.ICRNL | termios.IXON,
            termios.OPOST,
            0,
            termios.ECHO | termios.ICANON | termios.ISIG,
            38400,
            38400,
            cc,
        ]

        mode = raw_attributes(attrs)

        assert not mode[0] & termios.ICRNL
        assert not mode[0] & termios.IXON
        assert mode[1] & termios.OPOST
        assert mode[2] & termios.CS8
        assert not mode[3] & (termios.ECHO | termios.ICANON | termios.ISIG)
        assert mode[6][termios.VMIN] == 1
        assert mode[6][termios.VTIME] == 0

    def test_original_attributes_untouched(self):
        cc = [b"\x00"] * 32
        attrs = [0, 0, 0, termios.ECHO, 0, 0, cc]

        raw_attributes(attrs)

        assert attrs[3] == termios.ECHO
        assert cc[termios.VMIN] == b"\x00"


class TestTerminalKeySource:

    def test_stream_without_descriptor(self):
        source = TerminalKeySource(stream=io.StringIO())
        with pytest.raises(TerminalModeError, match="no file descriptor"):
            source.open()

    def test_pipe_is_not_interactive(self, pipe):
        reader, _ = pipe
        assert not is_interactive(reader)
        with pytest.raises(TerminalModeError, match="not an interactive terminal"):
            TerminalKeySource(stream=reader).open()
        assert not TerminalKeySource.claimed(reader.fileno())

    @pytest.mark.asyncio
    async def test_degraded_mode_reads_keys(self, pipe):
        reader, w = pipe
        source = TerminalKeySource(stream=reader, degraded=True)
        source.open()
        try:
            assert not source.raw_mode
            os.write(w, b"\x1b[Bj\r")
            first = await asyncio.wait_for(source.next_key(), 1)
            second = await asyncio.wait_for(source.next_key(), 1)
            third = await asyncio.wait_for(source.next_key(), 1)
        finally:
            source.close()

        assert [first.name, second.name, third.name] == ["down", "j", "return"]
        assert not TerminalKeySource.claimed(reader.fileno())

    @pytest.mark.asyncio
    async def test_second_owner_is_refused(self, pipe):
        reader, _ = pipe
        first = TerminalKeySource(stream=reader, degraded=True)
        second = TerminalKeySource(stream=reader, degraded=True)

        first.open()
        try:
            with pytest.raises(InputStreamBusyError) as exc_info:
                second.open()
            assert exc_info.value.fd == reader.fileno()
        finally:
            first.close()

        second.open()
        second.close()

    @pytest.mark.asyncio
    async def test_end_of_input(self):
        r, w = os.pipe()
        reader = os.fdopen(r, "rb", buffering=0)
        source = TerminalKeySource(stream=reader, degraded=True)
        source.open()
        os.close(w)
        try:
            with pytest.raises(EOFError):
                await asyncio.wait_for(source.next_key(), 1)
            # later calls keep reporting EOF
            with pytest.raises(EOFError):
                await asyncio.wait_for(source.next_key(), 1)
        finally:
            source.close()
            reader.close()

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self, pipe):
        reader, _ = pipe
        source = TerminalKeySource(stream=reader, degraded=True)
        source.open()
        source.close()
        source.close()
        assert not TerminalKeySource.claimed(reader.fileno())

    @pytest.mark.asyncio
    async def test_next_key_requires_open(self, pipe):
        reader, _ = pipe
        with pytest.raises(RuntimeError):
            await TerminalKeySource(stream=reader).next_key()


class TestPseudoTerminal:
    """Menus against a real pty: raw mode in, the original mode back out."""

    @pytest.fixture
    def options(self):
        return MenuOptions(items=[
            MenuItem("a", "A"),
            MenuItem.separator_line(),
            MenuItem("b", "B"),
        ])

    @pytest.mark.asyncio
    async def test_raw_mode_entered_and_restored(self, terminal):
        _, slave = terminal
        fd = slave.fileno()
        before = termios.tcgetattr(fd)

        source = TerminalKeySource(stream=slave)
        source.open()
        try:
            during = termios.tcgetattr(fd)
            assert source.raw_mode
            assert TerminalKeySource.claimed(fd)
            assert not during[3] & (termios.ICANON | termios.ECHO | termios.ISIG)
            assert during[1] & termios.OPOST
        finally:
            source.close()

        assert termios.tcgetattr(fd) == before
        assert not source.raw_mode
        assert not TerminalKeySource.claimed(fd)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("keys,expected", [
        (b"\x1b[B\r", "b"),
        (b"\x1b", None),
    ])
    async def test_menu_on_terminal(self, terminal, options, keys, expected):
        master, slave = terminal
        fd = slave.fileno()
        before = termios.tcgetattr(fd)
        loop = asyncio.get_running_loop()
        # typed once the menu owns the terminal
        loop.call_later(0.05, os.write, master, keys)

        result = await asyncio.wait_for(
            select(options, keys=TerminalKeySource(stream=slave), out=io.StringIO(), color=False), 2)

        assert result.key == expected
        assert result.cancelled is (expected is None)
        assert termios.tcgetattr(fd) == before
        assert not TerminalKeySource.claimed(fd)

    @pytest.mark.asyncio
    async def test_redraw_failure_restores_terminal(self, terminal, options, monkeypatch):
        calls = []

        def flaky_render(options, selected_index=0, color=True):
            calls.append(selected_index)
            if len(calls) > 1:
                raise RuntimeError("render failed")
            return "menu"

        monkeypatch.setattr("donutcli.ui.menu.render_menu", flaky_render)
        master, slave = terminal
        fd = slave.fileno()
        before = termios.tcgetattr(fd)
        asyncio.get_running_loop().call_later(0.05, os.write, master, b"\x1b[B")

        with pytest.raises(RuntimeError, match="render failed"):
            await asyncio.wait_for(
                select(options, keys=TerminalKeySource(stream=slave), out=io.StringIO(), color=False), 2)

        assert termios.tcgetattr(fd) == before
        assert not TerminalKeySource.claimed(fd)

    @pytest.mark.asyncio
    async def test_busy_terminal_left_alone(self, terminal, options):
        _, slave = terminal
        fd = slave.fileno()
        owner = TerminalKeySource(stream=slave)
        owner.open()
        try:
            held = termios.tcgetattr(fd)
            with pytest.raises(InputStreamBusyError):
                await select(options, keys=TerminalKeySource(stream=slave),
                             out=io.StringIO(), color=False)
            assert termios.tcgetattr(fd) == held
        finally:
            owner.close()
        assert not TerminalKeySource.claimed(fd)

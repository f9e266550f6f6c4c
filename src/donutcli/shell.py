"""
Interactive shell - the read / dispatch / route loop.

Each line typed at the prompt is either a slash command, run through the
CommandDispatcher, or free text for the agent of the last agent command
(the configured default agent until one has run). The CommandResult a
command returns decides what happens next:

* ``continue_loop=False``  ends the session
* ``agent``   runs the prompt through the AgentRunner
* ``direct``  one of the built-in views (help, status, clear, sessions, resume:<id>)
* ``none``    prints the message
"""

import asyncio
import logging
import signal
import threading
from typing import Callable, List, Optional

from .collaborators import (
    AgentRunner,
    MemorySessionStore,
    SessionInfo,
    SessionStore,
    UnconfiguredAgentRunner,
)
from .commands import (
    CommandAction,
    CommandDispatcher,
    CommandRegistry,
    CommandResult,
    create_default_registry,
    parse_input,
)
from .settings import ShellSettings
from .ui.display import Display, create_console

logger = logging.getLogger(__name__)

LineReader = Callable[[str], str]


class InteractiveShell:
    """
    Read-eval loop over slash commands.

    Args:
        settings: shell settings (prompt, default agent, appearance)
        registry: command registry; the built-in commands when None
        display: output helpers; a themed console when None
        agent_runner: receives agent prompts
        sessions: session store behind /status, /sessions and /resume
        read_line: blocking ``prompt -> line`` function, run on a daemon thread;
            defaults to ``input`` with readline completion of /commands
    """

    def __init__(self,
                 settings: Optional[ShellSettings] = None,
                 registry: Optional[CommandRegistry] = None,
                 display: Optional[Display] = None,
                 agent_runner: Optional[AgentRunner] = None,
                 sessions: Optional[SessionStore] = None,
                 read_line: Optional[LineReader] = None):
        self.settings = settings or ShellSettings()
        self.registry = registry or create_default_registry()
        self.dispatcher = CommandDispatcher(self.registry)
        self.display = display or Display(create_console(color=self.settings.color),
                                          border=self.settings.menu_border)
        self.agent_runner = agent_runner or UnconfiguredAgentRunner(self.display)
        self.sessions = sessions or MemorySessionStore()
        self.read_line = read_line or self._default_reader()
        self.is_running = False
        self.current_agent: Optional[str] = None
        self.agent_session_id: Optional[str] = None

    def _default_reader(self) -> LineReader:
        try:
            import readline
        except ImportError:
            return input

        registry = self.registry

        def complete_command(text, state):
            """Tab completion for /commands"""
            if not text.startswith('/'):
                return None
            matches = registry.complete(text)
            if state < len(matches):
                return matches[state]
            return None

        readline.set_completer(complete_command)
        readline.set_completer_delims(" \t\n")
        readline.parse_and_bind("tab: complete")
        readline.set_history_length(self.settings.history_size)
        return input

    def _start_read(self, loop: asyncio.AbstractEventLoop) -> "asyncio.Future[str]":
        """
        Call ``read_line`` on a daemon thread and return a future for its line.

        The thread is a daemon: a prompt still blocked in ``input()`` does not
        hold up event loop or interpreter shutdown.
        """
        future = loop.create_future()

        def deliver(outcome, is_error):
            if future.done():
                return
            if is_error:
                future.set_exception(outcome)
            else:
                future.set_result(outcome)

        def worker():
            try:
                line = self.read_line(self.settings.prompt)
            except BaseException as e:
                outcome, is_error = e, True
            else:
                outcome, is_error = line, False
            try:
                loop.call_soon_threadsafe(deliver, outcome, is_error)
            except RuntimeError:
                # Loop already closed; nobody is waiting for this line
                logger.debug("Prompt finished after the event loop closed")

        threading.Thread(target=worker, name="donut-prompt", daemon=True).start()
        return future

    def _on_interrupt(self) -> None:
        self.display.info("\nUse /quit to exit.")

    def _catch_interrupts(self, loop: asyncio.AbstractEventLoop) -> bool:
        try:
            loop.add_signal_handler(signal.SIGINT, self._on_interrupt)
        except (NotImplementedError, RuntimeError) as e:
            logger.debug(f"Ctrl+C at the prompt not handled by the shell: {e}")
            return False
        return True

    async def read_next_line(self) -> str:
        """
        Wait for the next line at the prompt.

        Ctrl+C while waiting prints a hint and keeps waiting for the same line.
        Raises EOFError when input ends.
        """
        loop = asyncio.get_running_loop()
        pending = self._start_read(loop)
        catching = self._catch_interrupts(loop)
        try:
            while True:
                try:
                    return await pending
                except KeyboardInterrupt:
                    # raised by the reader itself, e.g. no signal handler support
                    self._on_interrupt()
                    pending = self._start_read(loop)
        finally:
            if catching:
                loop.remove_signal_handler(signal.SIGINT)

    async def run(self) -> None:
        """Run until /quit, EOF, or an exit result."""
        logger.info("Starting interactive shell")
        self.is_running = True

        if self.settings.show_banner:
            self.display.banner(self.registry.list_unique())

        while self.is_running:
            try:
                line = await self.read_next_line()
            except EOFError:
                self.display.goodbye()
                break

            self.is_running = await self.process_line(line)

        self.is_running = False
        logger.info("Interactive shell session ended")

    async def process_line(self, line: str) -> bool:
        """Handle one line of input. Returns False when the session should end."""
        parsed = parse_input(line)

        if not parsed.is_command:
            if not parsed.args:
                return True
            self.display.user_message(parsed.args)
            await self.run_agent(self.current_agent or self.settings.default_agent, parsed.args)
            return True

        result = await self.dispatcher.dispatch(line)
        if result is None:
            self._unknown_command(parsed.command)
            return True

        return await self.route(result, line.strip())

    def _unknown_command(self, name: str) -> None:
        self.display.error(f"Unknown command: /{name}")
        suggestions = self.registry.suggest(name)
        if suggestions:
            self.display.info("Did you mean: " + ", ".join(f"/{s}" for s in suggestions) + "?")
        self.display.info("Type /help to see available commands.")

    async def route(self, result: CommandResult, line: str = "") -> bool:
        if not result.continue_loop:
            self.display.goodbye(result.message or "Goodbye!")
            return False

        if result.action == CommandAction.AGENT:
            if result.agent_type and result.prompt:
                self.current_agent = result.agent_type
                if line:
                    self.display.user_message(line)
                await self.run_agent(result.agent_type, result.prompt)
        elif result.action == CommandAction.DIRECT:
            await self.handle_direct(result.message or "")
        elif result.action == CommandAction.EXIT:
            self.display.goodbye(result.message or "Goodbye!")
            return False
        elif result.message:
            self.display.info(result.message)
        return True

    async def run_agent(self, agent_type: str, prompt: str) -> None:
        """Run one agent turn, continuing the previous agent conversation if any."""
        self.display.agent_start(agent_type)
        outcome = await self.agent_runner.run(agent_type, prompt, resume=self.agent_session_id)
        if outcome.session_id:
            self.agent_session_id = outcome.session_id
        self.display.agent_end()

    async def handle_direct(self, command: str) -> None:
        if command == "help":
            self.display.help(self.registry.list_unique())
        elif command == "clear":
            self.display.clear()
            if self.settings.show_banner:
                self.display.banner(self.registry.list_unique())
        elif command == "status":
            current = self.sessions.current()
            if current is None:
                self.display.info("No active session. Start one with: donut start")
            else:
                self.display.session_status(current)
        elif command == "sessions":
            ids: List[str] = await self.sessions.list_sessions()
            self.display.sessions_list([SessionInfo(session_id=i, stage="Unknown") for i in ids])
        elif command.startswith("resume:"):
            session_id = command[len("resume:"):]
            try:
                await self.sessions.load(session_id)
            except KeyError:
                self.display.error(f"Failed to resume session: {session_id}")
            else:
                self.display.info(f"Resumed session: {session_id}")
        else:
            self.display.info(f"Unknown command: {command}")

"""
Interfaces to the subsystems the shell drives but does not implement.

Agent invocation and session persistence live outside this package. The shell
only talks to them through these protocols; the defaults below keep the shell
usable when nothing is plugged in.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@dataclass
class AgentOutcome:
    success: bool
    session_id: Optional[str] = None


@dataclass
class SessionInfo:
    """What the status view shows about a session."""
    session_id: str
    stage: str
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)
    strategy_name: Optional[str] = None
    backtest_run_id: Optional[str] = None
    pending_trades: int = 0


@runtime_checkable
class AgentRunner(Protocol):
    async def run(self, agent_type: str, prompt: str,
                  resume: Optional[str] = None) -> AgentOutcome:
        """Run one agent turn. ``resume`` continues the conversation with that session id."""
        ...


@runtime_checkable
class SessionStore(Protocol):
    def current(self) -> Optional[SessionInfo]:
        ...

    async def list_sessions(self) -> List[str]:
        ...

    async def load(self, session_id: str) -> SessionInfo:
        """Make ``session_id`` current; raises KeyError when it does not exist."""
        ...


class UnconfiguredAgentRunner:
    """Agent runner used when no agent backend is wired in."""

    def __init__(self, display=None):
        self.display = display

    async def run(self, agent_type: str, prompt: str,
                  resume: Optional[str] = None) -> AgentOutcome:
        logger.info(f"Agent request for {agent_type} dropped: no agent backend configured")
        if self.display is not None:
            self.display.warning(f"No agent backend configured; {agent_type} cannot run.")
        return AgentOutcome(success=False)


class MemorySessionStore:
    """Process-local session store; nothing survives the process."""

    def __init__(self, sessions: Optional[Dict[str, SessionInfo]] = None):
        self._sessions: Dict[str, SessionInfo] = dict(sessions or {})
        self._current: Optional[str] = None

    def add(self, info: SessionInfo) -> None:
        self._sessions[info.session_id] = info

    def current(self) -> Optional[SessionInfo]:
        if self._current is None:
            return None
        return self._sessions.get(self._current)

    async def list_sessions(self) -> List[str]:
        return list(self._sessions)

    async def load(self, session_id: str) -> SessionInfo:
        if session_id not in self._sessions:
            raise KeyError(session_id)
        self._current = session_id
        return self._sessions[session_id]

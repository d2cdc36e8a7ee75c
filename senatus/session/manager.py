"""
Session Manager - Creates and manages game sessions.

LIFECYCLE:
1. Client creates a session -> a fresh Game (seeded) is built
2. Each request locks the session's game, applies one call, unlocks
3. Reset replaces the Game with a fresh instance under the same id
4. Ending the session drops it; nothing is persisted

CONCURRENCY:
- A Game is not safe to interleave; every session carries its own lock
- The manager's registry has its own lock for create/end/list
"""

from __future__ import annotations
import logging
import threading
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..engine_core.game import Game

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a game session."""
    ACTIVE = "active"
    ENDED = "ended"


@dataclass
class Session:
    """
    An in-memory game session.

    Contains the current Game, the lock guarding it and metadata.
    """
    session_id: str
    game: Game
    created_at: float
    seed: int | None = None
    state: SessionState = SessionState.ACTIVE
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    metadata: dict[str, Any] = field(default_factory=dict)

    def is_active(self) -> bool:
        return self.state == SessionState.ACTIVE


class SessionManager:
    """
    Manages game sessions.

    Usage:
        manager = SessionManager(default_seed=42)
        session = manager.create_session()
        with session.lock:
            session.game.skip_to_vote(...)
    """

    def __init__(self, default_seed: int | None = None):
        self.default_seed = default_seed
        self._sessions: dict[str, Session] = {}
        self._registry_lock = threading.Lock()

    def create_session(self, seed: int | None = None) -> Session:
        """Create a session with a freshly dealt Game."""
        if seed is None:
            seed = self.default_seed
        session = Session(
            session_id=str(uuid.uuid4()),
            game=Game(seed=seed),
            created_at=time.time(),
            seed=seed,
        )
        with self._registry_lock:
            self._sessions[session.session_id] = session
        logger.info("Created session %s (seed=%s)", session.session_id, seed)
        return session

    def get_session(self, session_id: str) -> Session | None:
        with self._registry_lock:
            session = self._sessions.get(session_id)
        if session and session.is_active():
            return session
        return None

    def reset_session(self, session_id: str, seed: int | None = None) -> Session | None:
        """Replace the session's Game with a fresh one, keeping the id."""
        session = self.get_session(session_id)
        if not session:
            return None
        if seed is None:
            seed = session.seed
        with session.lock:
            session.game = Game(seed=seed)
            session.seed = seed
        logger.info("Reset session %s (seed=%s)", session_id, seed)
        return session

    def end_session(self, session_id: str) -> bool:
        with self._registry_lock:
            session = self._sessions.pop(session_id, None)
        if not session:
            return False
        session.state = SessionState.ENDED
        logger.info("Ended session %s", session_id)
        return True

    def list_sessions(self) -> list[str]:
        with self._registry_lock:
            return [sid for sid, s in self._sessions.items() if s.is_active()]

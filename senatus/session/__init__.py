"""
Session - In-memory game sessions.

Each session holds one Game and the lock that serializes calls on it.
Sessions are never persisted.
"""

from .manager import Session, SessionManager, SessionState

__all__ = [
    "Session",
    "SessionManager",
    "SessionState",
]

"""
Engine Errors - Failure taxonomy for rejected engine calls.

Every rejected call leaves the game untouched. The error code travels
with the exception so the move dispatcher and the API can report it
without inspecting messages.
"""

from __future__ import annotations


class GameError(Exception):
    """Base class for rejected engine operations."""

    error_code = "GAME_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class IllegalStateError(GameError):
    """Call not valid for the current mode, phase, turn or per-turn limits."""

    error_code = "ILLEGAL_STATE"


class CardNotFoundError(GameError):
    """Referenced card is not in hand, or a played-card index is out of range."""

    error_code = "NOT_FOUND"


class MalformedInputError(GameError, ValueError):
    """Unresolvable group, player or card name, or missing action context."""

    error_code = "MALFORMED_INPUT"

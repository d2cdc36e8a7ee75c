"""
API Module - REST interface to the engine.

Exposes games over HTTP. A client:
1. Creates a game
2. Places initial influence for both players
3. Plays cards, votes and draws turn by turn
4. Reads the state from either player's point of view

All state is session-scoped and held in memory.
"""

from .schemas import (
    # Requests
    CreateGameRequest,
    InitialPlacementRequest,
    PlayCardRequest,
    ActionContextModel,
    VoteRequest,
    DrawRequest,
    VetoRequest,
    # Responses
    GameStateResponse,
    MoveResponse,
    ErrorResponse,
    ErrorCode,
    # Shared
    CardInfo,
    PlayedCardInfo,
    PatricianBoardInfo,
    DeckCountInfo,
)
from .service import GameService, SessionNotFoundError, MoveRejectedError
from .app import create_app

__all__ = [
    # Requests
    "CreateGameRequest",
    "InitialPlacementRequest",
    "PlayCardRequest",
    "ActionContextModel",
    "VoteRequest",
    "DrawRequest",
    "VetoRequest",
    # Responses
    "GameStateResponse",
    "MoveResponse",
    "ErrorResponse",
    "ErrorCode",
    # Shared
    "CardInfo",
    "PlayedCardInfo",
    "PatricianBoardInfo",
    "DeckCountInfo",
    # Service
    "GameService",
    "SessionNotFoundError",
    "MoveRejectedError",
    "create_app",
]

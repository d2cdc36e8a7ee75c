"""
Engine Core - Deterministic rules engine for the Patrician influence contest.

The engine is the runtime that:
1. Builds the card catalog, decks and hands
2. Tracks played Influence per Patrician group (the ledger)
3. Runs the game-mode / turn-phase state machine
4. Resolves Votes of Confidence and Action card effects
5. Applies moves and generates legal ones
"""

from .cards import (
    ActionCard,
    ActionType,
    Card,
    InfluenceCard,
    InfluenceType,
    PatricianCard,
    PatricianType,
    Player,
    card_from_id,
    parse_patrician,
    parse_player,
)
from .errors import GameError, IllegalStateError, CardNotFoundError, MalformedInputError
from .decks import DeckManager, BustBag, BustPiece, MAX_HAND_SIZE
from .ledger import PatricianState, PlayedInfluence, VoteResult
from .effects import ActionContext, ActionRecord, ACTION_EFFECTS
from .game import Game, GameMode, TurnPhase
from .move import Move, MoveType, MovePayload, MoveResult
from .reducer import Reducer, apply_move
from .move_generator import MoveGenerator, legal_moves

__all__ = [
    "ActionCard",
    "ActionType",
    "Card",
    "InfluenceCard",
    "InfluenceType",
    "PatricianCard",
    "PatricianType",
    "Player",
    "card_from_id",
    "parse_patrician",
    "parse_player",
    "GameError",
    "IllegalStateError",
    "CardNotFoundError",
    "MalformedInputError",
    "DeckManager",
    "BustBag",
    "BustPiece",
    "MAX_HAND_SIZE",
    "PatricianState",
    "PlayedInfluence",
    "VoteResult",
    "ActionContext",
    "ActionRecord",
    "ACTION_EFFECTS",
    "Game",
    "GameMode",
    "TurnPhase",
    "Move",
    "MoveType",
    "MovePayload",
    "MoveResult",
    "Reducer",
    "apply_move",
    "MoveGenerator",
    "legal_moves",
]

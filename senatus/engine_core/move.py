"""
Moves - Requests to change a game, their payloads and results.

Moves are the 1:1 counterpart of the Game's mutating calls:
1. Initial influence placement
2. Playing a card in turn
3. Skipping to the vote, voting, drawing
4. Out-of-turn Veto

Payloads carry raw names (as they arrive from a client or a bot); the
reducer resolves them before touching the game.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .effects import ActionContext


class MoveType(Enum):
    """Types of moves."""
    PLACE_INITIAL_INFLUENCE = "place_initial_influence"
    PLAY_CARD = "play_card"
    SKIP_TO_VOTE = "skip_to_vote"
    VOTE_OF_CONFIDENCE = "vote_of_confidence"
    DRAW_TO_HAND_LIMIT = "draw_to_hand_limit"
    VETO = "veto"


@dataclass
class MovePayload:
    """
    Parameters of a move.

    Different move types use different fields; the reducer validates.
    """
    player_id: str | None = None
    card_id: str | None = None
    patrician_type: str | None = None

    # Initial placement: group name -> influence card id
    placements: dict[str, str] | None = None

    # Action cards
    action_context: ActionContext | None = None

    # Draw phase and Veto replacement
    from_influence: bool = True


@dataclass
class Move:
    """A complete move, logged to the game's history once applied."""
    move_type: MoveType
    payload: MovePayload
    timestamp: float | None = None

    @classmethod
    def place_initial_influence(cls, player_id: str, placements: dict[str, str]) -> Move:
        return cls(
            move_type=MoveType.PLACE_INITIAL_INFLUENCE,
            payload=MovePayload(player_id=player_id, placements=placements),
        )

    @classmethod
    def play_card(
        cls,
        player_id: str,
        card_id: str,
        patrician_type: str | None = None,
        action_context: ActionContext | None = None,
    ) -> Move:
        return cls(
            move_type=MoveType.PLAY_CARD,
            payload=MovePayload(
                player_id=player_id,
                card_id=card_id,
                patrician_type=patrician_type,
                action_context=action_context,
            ),
        )

    @classmethod
    def skip_to_vote(cls, player_id: str) -> Move:
        return cls(move_type=MoveType.SKIP_TO_VOTE, payload=MovePayload(player_id=player_id))

    @classmethod
    def vote(cls, player_id: str, patrician_type: str) -> Move:
        return cls(
            move_type=MoveType.VOTE_OF_CONFIDENCE,
            payload=MovePayload(player_id=player_id, patrician_type=patrician_type),
        )

    @classmethod
    def draw(cls, player_id: str, from_influence: bool = True) -> Move:
        return cls(
            move_type=MoveType.DRAW_TO_HAND_LIMIT,
            payload=MovePayload(player_id=player_id, from_influence=from_influence),
        )

    @classmethod
    def veto(cls, player_id: str, from_influence: bool = True) -> Move:
        return cls(
            move_type=MoveType.VETO,
            payload=MovePayload(player_id=player_id, from_influence=from_influence),
        )


@dataclass
class MoveResult:
    """
    Result of applying a move.

    Contains:
    - Whether the move succeeded
    - Error and error code (if rejected)
    - Human-readable changes
    - Vote outcome, when the move was a vote
    """
    success: bool
    error: str | None = None
    error_code: str | None = None
    changes: list[str] = field(default_factory=list)
    vote: Any | None = None  # VoteResult

    @classmethod
    def failure(cls, error: str, error_code: str | None = None) -> MoveResult:
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def ok(cls, changes: list[str] | None = None, vote: Any | None = None) -> MoveResult:
        return cls(success=True, changes=changes or [], vote=vote)

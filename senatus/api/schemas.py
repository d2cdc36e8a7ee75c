"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between a client and the engine.

Error Codes:
- ILLEGAL_STATE: Call not valid for the current mode, phase or turn (409)
- NOT_FOUND: Card not in hand or played-card index out of range (404)
- MALFORMED_INPUT: Unknown player, group or card name (400)
- SESSION_NOT_FOUND: Game session does not exist (404)
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class ErrorCode(str, Enum):
    """Structured error codes."""
    ILLEGAL_STATE = "ILLEGAL_STATE"
    NOT_FOUND = "NOT_FOUND"
    MALFORMED_INPUT = "MALFORMED_INPUT"
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class DeckChoice(str, Enum):
    """Which deck to draw from."""
    INFLUENCE = "influence"
    ACTION = "action"


# =============================================================================
# Shared Models
# =============================================================================

class CardInfo(BaseModel):
    """A card in a hand or on the discard pile."""
    card_id: str
    family: str = Field(description="influence, action or patrician")

    model_config = {"from_attributes": True}


class PlayedCardInfo(BaseModel):
    """
    A played Influence card on the board.

    card_id is null when the card is hidden from the viewer.
    """
    face_up: bool
    card_id: Optional[str] = None
    hidden: bool = False


class PatricianBoardInfo(BaseModel):
    """Board state of one Patrician group."""
    patrician_type: str
    color: str
    remaining: int = Field(ge=0, description="Claimable Patrician cards left")
    influence: dict[str, list[PlayedCardInfo]] = Field(
        default_factory=dict, description="player -> played cards in play order"
    )


class DeckCountInfo(BaseModel):
    """Remaining cards in a player's two decks."""
    influence: int = 0
    action: int = 0


class VoteInfo(BaseModel):
    """Outcome of a Vote of Confidence."""
    patrician_type: str
    winner: Optional[str] = None
    sum_winner: Optional[str] = None
    tie: bool = False
    inverted: bool = False
    claimed: bool = False
    sums: dict[str, int] = Field(default_factory=dict)
    discarded: list[CardInfo] = Field(default_factory=list)


class MoveInfo(BaseModel):
    """A legal move, ready to be sent back to the matching endpoint."""
    move_type: str
    player_id: Optional[str] = None
    card_id: Optional[str] = None
    patrician_type: Optional[str] = None
    placements: Optional[dict[str, str]] = None
    action_context: Optional[dict[str, Any]] = None
    from_influence: Optional[bool] = None


# =============================================================================
# Request Models
# =============================================================================

class CreateGameRequest(BaseModel):
    """Request to create a new game."""
    seed: Optional[int] = Field(None, description="Deck shuffle seed for reproducible games")


class InitialPlacementRequest(BaseModel):
    """Initial face-down placement: patrician group -> numbered Influence card id."""
    player_id: str = Field(..., description="caesar or cleopatra")
    placements: dict[str, str] = Field(..., min_length=1)


class ActionContextModel(BaseModel):
    """Parameters for an Action card."""
    patrician_type_1: Optional[str] = None
    patrician_type_2: Optional[str] = None
    card_index: Optional[int] = Field(None, description="Index into the opponent's played list")
    redistributed_cards_for_type_1: Optional[list[str]] = None
    redistributed_cards_for_type_2: Optional[list[str]] = None
    draw_from_influence: bool = True


class PlayCardRequest(BaseModel):
    """Play one card from hand."""
    player_id: str
    card_id: str
    patrician_type: Optional[str] = Field(None, description="Target group for Influence cards")
    action_context: Optional[ActionContextModel] = None


class PlayerRequest(BaseModel):
    """A request that only names the acting player."""
    player_id: str


class VoteRequest(BaseModel):
    """Call a Vote of Confidence on one group."""
    player_id: str
    patrician_type: str


class DrawRequest(BaseModel):
    """Draw to the hand limit from one deck; ends the turn."""
    player_id: str
    deck: DeckChoice = DeckChoice.INFLUENCE


class VetoRequest(BaseModel):
    """Out-of-turn Veto of the active player's Action card."""
    player_id: str
    deck: DeckChoice = DeckChoice.INFLUENCE


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class GameStateResponse(BaseModel):
    """
    Full game state as seen by one player.

    The viewer's hand is listed in full; the opponent's only by size.
    """
    game_id: str
    viewer: str
    current_player: str
    game_mode: str
    turn_phase: str
    turn_number: int = 0
    cards_played_this_turn: int = 0
    action_card_played_this_turn: bool = False
    can_play_more_cards: bool = False
    initial_influence_placed: dict[str, bool] = Field(default_factory=dict)
    hand: list[CardInfo] = Field(default_factory=list)
    opponent_hand_count: int = 0
    claimed_patricians: dict[str, dict[str, int]] = Field(default_factory=dict)
    discard_pile: list[CardInfo] = Field(default_factory=list)
    deck_counts: dict[str, DeckCountInfo] = Field(default_factory=dict)
    bust_bag: list[str] = Field(default_factory=list)
    patrician_board: list[PatricianBoardInfo] = Field(default_factory=list)
    pending_action: Optional[str] = None


class MoveResponse(BaseModel):
    """Result of a mutating call: the changes and the resulting state."""
    success: bool = True
    changes: list[str] = Field(default_factory=list)
    vote: Optional[VoteInfo] = None
    state: GameStateResponse


class LegalMovesResponse(BaseModel):
    """Legal moves for the active player."""
    game_id: str
    current_player: str
    moves: list[MoveInfo] = Field(default_factory=list)
    count: int = 0


class GameCreatedResponse(BaseModel):
    """A newly created or reset game."""
    game_id: str
    seed: Optional[int] = None
    state: GameStateResponse


class GameListResponse(BaseModel):
    """List of active games."""
    games: list[str] = Field(default_factory=list)
    count: int = 0


class EndGameResponse(BaseModel):
    """Response when a game is deleted."""
    success: bool
    game_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "healthy"
    service: str = "senatus"
    version: str = "0.1.0"

"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to moves and applies them through the reducer
2. Manages sessions, one lock per game
3. Builds the per-viewer game state

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any

from .schemas import (
    # Requests
    ActionContextModel,
    DeckChoice,
    InitialPlacementRequest,
    PlayCardRequest,
    VoteRequest,
    DrawRequest,
    VetoRequest,
    # Responses
    GameCreatedResponse,
    GameStateResponse,
    LegalMovesResponse,
    MoveResponse,
    # Shared
    CardInfo,
    DeckCountInfo,
    MoveInfo,
    PatricianBoardInfo,
    PlayedCardInfo,
    VoteInfo,
)
from ..engine_core.cards import (
    Card,
    InfluenceCard,
    PatricianType,
    Player,
    card_from_id,
    parse_patrician,
    parse_player,
)
from ..engine_core.effects import ActionContext
from ..engine_core.errors import GameError, MalformedInputError
from ..engine_core.game import Game, GameMode
from ..engine_core.ledger import VoteResult
from ..engine_core.move import Move
from ..engine_core.move_generator import legal_moves
from ..engine_core.reducer import apply_move
from ..session import Session, SessionManager

logger = logging.getLogger(__name__)


class SessionNotFoundError(GameError):
    """No active game under the requested id."""

    error_code = "SESSION_NOT_FOUND"


class MoveRejectedError(GameError):
    """A move the reducer refused, carrying the reducer's error code."""

    def __init__(self, message: str, error_code: str | None):
        super().__init__(message)
        self.error_code = error_code or GameError.error_code


@dataclass
class GameService:
    """
    Main API service.

    Usage:
        service = GameService()
        created = service.create_game(seed=7)
        service.place_initial_influence(created.game_id, request)
        state = service.get_state(created.game_id, viewer="caesar")
    """
    session_manager: SessionManager = field(default_factory=SessionManager)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def create_game(self, seed: int | None = None) -> GameCreatedResponse:
        session = self.session_manager.create_session(seed=seed)
        with session.lock:
            state = self._build_state(session, session.game.current_player)
        return GameCreatedResponse(game_id=session.session_id, seed=session.seed, state=state)

    def reset_game(self, game_id: str, seed: int | None = None) -> GameCreatedResponse:
        session = self.session_manager.reset_session(game_id, seed=seed)
        if not session:
            raise SessionNotFoundError(f"Game {game_id} not found")
        with session.lock:
            state = self._build_state(session, session.game.current_player)
        return GameCreatedResponse(game_id=game_id, seed=session.seed, state=state)

    def end_game(self, game_id: str) -> bool:
        return self.session_manager.end_session(game_id)

    def list_games(self) -> list[str]:
        return self.session_manager.list_sessions()

    # =========================================================================
    # Queries
    # =========================================================================

    def get_state(self, game_id: str, viewer: str | None = None) -> GameStateResponse:
        """
        Get the game state as seen by one player.

        Defaults to the active player's view.
        """
        session = self._get_session(game_id)
        with session.lock:
            player = parse_player(viewer) if viewer else session.game.current_player
            return self._build_state(session, player)

    def get_legal_moves(self, game_id: str) -> LegalMovesResponse:
        session = self._get_session(game_id)
        with session.lock:
            moves = [self._move_to_info(m) for m in legal_moves(session.game)]
            return LegalMovesResponse(
                game_id=game_id,
                current_player=session.game.current_player.value,
                moves=moves,
                count=len(moves),
            )

    # =========================================================================
    # Moves
    # =========================================================================

    def place_initial_influence(
        self, game_id: str, request: InitialPlacementRequest
    ) -> MoveResponse:
        return self._apply(
            game_id,
            request.player_id,
            Move.place_initial_influence(request.player_id, dict(request.placements)),
        )

    def play_card(self, game_id: str, request: PlayCardRequest) -> MoveResponse:
        context = None
        if request.action_context is not None:
            context = self._build_context(request.action_context)
        return self._apply(
            game_id,
            request.player_id,
            Move.play_card(request.player_id, request.card_id, request.patrician_type, context),
        )

    def skip_to_vote(self, game_id: str, player_id: str) -> MoveResponse:
        return self._apply(game_id, player_id, Move.skip_to_vote(player_id))

    def vote(self, game_id: str, request: VoteRequest) -> MoveResponse:
        return self._apply(
            game_id, request.player_id, Move.vote(request.player_id, request.patrician_type)
        )

    def draw(self, game_id: str, request: DrawRequest) -> MoveResponse:
        return self._apply(
            game_id,
            request.player_id,
            Move.draw(request.player_id, from_influence=request.deck == DeckChoice.INFLUENCE),
        )

    def veto(self, game_id: str, request: VetoRequest) -> MoveResponse:
        return self._apply(
            game_id,
            request.player_id,
            Move.veto(request.player_id, from_influence=request.deck == DeckChoice.INFLUENCE),
        )

    # =========================================================================
    # Helper methods
    # =========================================================================

    def _get_session(self, game_id: str) -> Session:
        session = self.session_manager.get_session(game_id)
        if not session:
            raise SessionNotFoundError(f"Game {game_id} not found")
        return session

    def _apply(self, game_id: str, player_id: str, move: Move) -> MoveResponse:
        """Apply one move under the session lock; a rejected move raises MoveRejectedError."""
        session = self._get_session(game_id)
        with session.lock:
            result = apply_move(session.game, move)
            if not result.success:
                raise MoveRejectedError(result.error or "Move rejected", result.error_code)
            viewer = parse_player(player_id)
            return MoveResponse(
                success=True,
                changes=result.changes,
                vote=self._vote_to_info(result.vote) if result.vote else None,
                state=self._build_state(session, viewer),
            )

    def _build_context(self, model: ActionContextModel) -> ActionContext:
        """Resolve the raw names of an action context."""
        def group(name: str | None) -> PatricianType | None:
            return parse_patrician(name) if name is not None else None

        def cards(ids: list[str] | None) -> list[InfluenceCard] | None:
            if ids is None:
                return None
            resolved = []
            for card_id in ids:
                card = card_from_id(card_id)
                if not isinstance(card, InfluenceCard):
                    raise MalformedInputError(f"{card_id} is not an Influence card")
                resolved.append(card)
            return resolved

        return ActionContext(
            patrician_type_1=group(model.patrician_type_1),
            patrician_type_2=group(model.patrician_type_2),
            card_index=model.card_index,
            redistributed_cards_for_type_1=cards(model.redistributed_cards_for_type_1),
            redistributed_cards_for_type_2=cards(model.redistributed_cards_for_type_2),
            draw_from_influence=model.draw_from_influence,
        )

    def _build_state(self, session: Session, viewer: Player) -> GameStateResponse:
        """
        Build the game state for one viewer.

        The viewer's hand is listed in full and the opponent's by size.
        During initial placement the opponent's face-down cards are
        reported without their identity.
        """
        game = session.game
        opponent = viewer.opponent
        hide_opponent = game.mode == GameMode.INITIAL_INFLUENCE_PLACEMENT

        board = []
        for patrician_type in PatricianType:
            influence = {}
            for player in Player:
                cards = []
                for played in game.ledger.played_influence(patrician_type, player):
                    hidden = hide_opponent and player == opponent and not played.face_up
                    cards.append(
                        PlayedCardInfo(
                            face_up=played.face_up,
                            card_id=None if hidden else played.card.card_id,
                            hidden=hidden,
                        )
                    )
                influence[player.value] = cards
            board.append(
                PatricianBoardInfo(
                    patrician_type=patrician_type.value,
                    color=patrician_type.color,
                    remaining=game.ledger.remaining(patrician_type),
                    influence=influence,
                )
            )

        return GameStateResponse(
            game_id=session.session_id,
            viewer=viewer.value,
            current_player=game.current_player.value,
            game_mode=game.mode.value,
            turn_phase=game.turn_phase.value,
            turn_number=game.turn_number,
            cards_played_this_turn=game.cards_played_this_turn,
            action_card_played_this_turn=game.action_card_played_this_turn,
            can_play_more_cards=game.can_play_more_cards(),
            initial_influence_placed={
                player.value: game.has_placed_initial_influence(player) for player in Player
            },
            hand=[self._card_to_info(card) for card in game.hand(viewer)],
            opponent_hand_count=game.decks.hand_size(opponent),
            claimed_patricians={
                player.value: {t.value: n for t, n in game.claimed_counts(player).items()}
                for player in Player
            },
            discard_pile=[self._card_to_info(card) for card in game.discard_pile],
            deck_counts={
                player.value: DeckCountInfo(**game.decks.deck_counts(player)) for player in Player
            },
            bust_bag=[piece.value for piece in game.bust_bag.contents],
            patrician_board=board,
            pending_action=(
                game.pending_action.action_type.value if game.pending_action else None
            ),
        )

    def _card_to_info(self, card: Card) -> CardInfo:
        return CardInfo(card_id=card.card_id, family=card.family)

    def _vote_to_info(self, result: VoteResult) -> VoteInfo:
        return VoteInfo(
            patrician_type=result.patrician_type.value,
            winner=result.winner.value if result.winner else None,
            sum_winner=result.sum_winner.value if result.sum_winner else None,
            tie=result.is_tie,
            inverted=result.inverted,
            claimed=result.claimed,
            sums={player.value: total for player, total in result.sums.items()},
            discarded=[self._card_to_info(card) for card in result.discarded],
        )

    def _move_to_info(self, move: Move) -> MoveInfo:
        payload = move.payload
        context: dict[str, Any] | None = None
        if payload.action_context is not None:
            ctx = payload.action_context
            context = {
                "patrician_type_1": ctx.patrician_type_1.value if ctx.patrician_type_1 else None,
                "patrician_type_2": ctx.patrician_type_2.value if ctx.patrician_type_2 else None,
                "card_index": ctx.card_index,
                "redistributed_cards_for_type_1": (
                    [c.card_id for c in ctx.redistributed_cards_for_type_1]
                    if ctx.redistributed_cards_for_type_1 is not None else None
                ),
                "redistributed_cards_for_type_2": (
                    [c.card_id for c in ctx.redistributed_cards_for_type_2]
                    if ctx.redistributed_cards_for_type_2 is not None else None
                ),
                "draw_from_influence": ctx.draw_from_influence,
            }
        return MoveInfo(
            move_type=move.move_type.value,
            player_id=payload.player_id,
            card_id=payload.card_id,
            patrician_type=payload.patrician_type,
            placements=payload.placements,
            action_context=context,
            from_influence=payload.from_influence,
        )

"""
Reducer - Applies moves to a game.

The reducer is the single dispatch point between callers (API, bots,
CLI) and the Game's mutating calls.

Design principles:
- Resolves raw names before any lookup (malformed input fails first)
- Delegates every rule check to Game
- Converts GameError into a failed MoveResult carrying its error code
- Logs successful moves to game.move_history
"""

from __future__ import annotations
import logging
import time
from dataclasses import dataclass, replace

from .cards import InfluenceCard, card_from_id, parse_patrician, parse_player
from .effects import ActionContext
from .errors import GameError, MalformedInputError
from .game import Game
from .move import Move, MoveResult, MoveType

logger = logging.getLogger(__name__)


@dataclass
class Reducer:
    """
    Reducer applies moves to a game.

    Stateless - all state is in the Game.
    """
    game: Game

    def apply(self, move: Move) -> MoveResult:
        """
        Apply a move to the game.

        Returns MoveResult; a failed result means the game is unchanged.
        """
        handler = self._get_handler(move.move_type)
        if not handler:
            return MoveResult.failure(
                f"No handler for move type: {move.move_type}",
                error_code=MalformedInputError.error_code,
            )

        try:
            result = handler(move)
        except GameError as e:
            logger.info("Rejected %s: %s", move.move_type.value, e.message)
            return MoveResult.failure(e.message, error_code=e.error_code)

        if move.timestamp is None:
            move.timestamp = time.time()
        self.game.move_history.append(move)
        return result

    def _get_handler(self, move_type: MoveType):
        """Get the handler function for a move type."""
        handlers = {
            MoveType.PLACE_INITIAL_INFLUENCE: self._handle_place_initial_influence,
            MoveType.PLAY_CARD: self._handle_play_card,
            MoveType.SKIP_TO_VOTE: self._handle_skip_to_vote,
            MoveType.VOTE_OF_CONFIDENCE: self._handle_vote,
            MoveType.DRAW_TO_HAND_LIMIT: self._handle_draw,
            MoveType.VETO: self._handle_veto,
        }
        return handlers.get(move_type)

    def _handle_place_initial_influence(self, move: Move) -> MoveResult:
        player = parse_player(move.payload.player_id)
        if not move.payload.placements:
            raise MalformedInputError("No placements provided")

        placements = {}
        for group_name, card_id in move.payload.placements.items():
            card = card_from_id(card_id)
            if not isinstance(card, InfluenceCard):
                raise MalformedInputError(f"{card_id} is not an Influence card")
            placements[parse_patrician(group_name)] = card

        self.game.place_initial_influence(player, placements)
        return MoveResult.ok(
            changes=[f"{player.value} placed {len(placements)} card(s) face down"],
        )

    def _handle_play_card(self, move: Move) -> MoveResult:
        player = parse_player(move.payload.player_id)
        if not move.payload.card_id:
            raise MalformedInputError("No card id provided")
        card_from_id(move.payload.card_id)
        patrician_type = None
        if move.payload.patrician_type is not None:
            patrician_type = parse_patrician(move.payload.patrician_type)

        card = self.game.play_card(
            player,
            move.payload.card_id,
            patrician_type,
            self._resolve_context(move.payload.action_context),
        )
        target = f" on {patrician_type.value}" if patrician_type and card.family == "influence" else ""
        return MoveResult.ok(changes=[f"{player.value} played {card.card_id}{target}"])

    def _resolve_context(self, context: ActionContext | None) -> ActionContext | None:
        """Swap raw group names in an action context for PatricianType."""
        if context is None:
            return None
        groups = {}
        for name in ("patrician_type_1", "patrician_type_2"):
            value = getattr(context, name)
            if value is not None:
                groups[name] = parse_patrician(value)
        return replace(context, **groups)

    def _handle_skip_to_vote(self, move: Move) -> MoveResult:
        player = parse_player(move.payload.player_id)
        self.game.skip_to_vote(player)
        return MoveResult.ok(changes=[f"{player.value} proceeds to the vote"])

    def _handle_vote(self, move: Move) -> MoveResult:
        player = parse_player(move.payload.player_id)
        patrician_type = parse_patrician(move.payload.patrician_type)
        result = self.game.execute_vote_of_confidence(player, patrician_type)
        if result.is_tie:
            change = f"Vote on {patrician_type.value} tied"
        else:
            change = f"{result.winner.value} won the vote on {patrician_type.value}"
        return MoveResult.ok(changes=[change], vote=result)

    def _handle_draw(self, move: Move) -> MoveResult:
        player = parse_player(move.payload.player_id)
        drawn = self.game.draw_to_hand_limit(player, move.payload.from_influence)
        deck = "influence" if move.payload.from_influence else "action"
        return MoveResult.ok(
            changes=[
                f"{player.value} drew {len(drawn)} card(s) from the {deck} deck",
                f"Turn passes to {self.game.current_player.value}",
            ],
        )

    def _handle_veto(self, move: Move) -> MoveResult:
        player = parse_player(move.payload.player_id)
        record = self.game.veto_pending_action(player, move.payload.from_influence)
        return MoveResult.ok(
            changes=[f"{player.value} vetoed {record.player.value}'s {record.action_type.value}"],
        )


def apply_move(game: Game, move: Move) -> MoveResult:
    """
    Convenience function to apply a move.

    Creates a Reducer and applies the move.
    """
    return Reducer(game=game).apply(move)

"""
Move Generator - Enumerates the legal moves of the active player.

The generator is used by:
1. Bots to pick a move
2. The API to show available moves
3. Tests (every generated move must apply cleanly)

Design: generates fully specified Move objects, action contexts
included, so every move can be applied without further input.
"""

from __future__ import annotations
from dataclasses import dataclass
from itertools import combinations

from .cards import ActionCard, ActionType, InfluenceCard, InfluenceType, PatricianType
from .effects import ActionContext
from .game import MAX_CARDS_PER_TURN, Game, GameMode, TurnPhase
from .move import Move


@dataclass
class MoveGenerator:
    """Generates legal moves for the game's active player."""
    game: Game

    def generate(self) -> list[Move]:
        game = self.game
        if game.mode == GameMode.INITIAL_INFLUENCE_PLACEMENT:
            return self._generate_initial_placements()

        if game.turn_phase in (TurnPhase.FIRST_CARD_SELECTION, TurnPhase.SECOND_CARD_SELECTION):
            moves = []
            if game.cards_played_this_turn < MAX_CARDS_PER_TURN:
                moves.extend(self._generate_card_plays())
            if game.turn_phase == TurnPhase.SECOND_CARD_SELECTION:
                moves.append(Move.skip_to_vote(game.current_player.value))
            return moves

        if game.turn_phase == TurnPhase.VOTE_OF_CONFIDENCE:
            return [
                Move.vote(game.current_player.value, patrician_type.value)
                for patrician_type in PatricianType
            ]

        return [
            Move.draw(game.current_player.value, from_influence=True),
            Move.draw(game.current_player.value, from_influence=False),
        ]

    def _generate_initial_placements(self) -> list[Move]:
        """One placement per rotation of the numbered cards over the groups."""
        game = self.game
        player = game.current_player
        if game.has_placed_initial_influence(player):
            return []
        held = [
            t for t in InfluenceType.numbered()
            if InfluenceCard(t) in game.hand(player)
        ]
        if not held:
            return []
        groups = list(PatricianType)
        moves = []
        for shift in range(len(held)):
            rotated = held[shift:] + held[:shift]
            placements = {
                group.value: influence_type.value
                for group, influence_type in zip(groups, rotated)
            }
            moves.append(Move.place_initial_influence(player.value, placements))
        return moves

    def _generate_card_plays(self) -> list[Move]:
        game = self.game
        player = game.current_player
        moves = []
        seen = set()
        for card in game.hand(player):
            if card.card_id in seen:
                continue
            seen.add(card.card_id)
            if isinstance(card, InfluenceCard):
                for patrician_type in PatricianType:
                    moves.append(Move.play_card(player.value, card.card_id, patrician_type.value))
            elif isinstance(card, ActionCard) and not game.action_card_played_this_turn:
                for context in self._action_contexts(card.action_type):
                    moves.append(Move.play_card(player.value, card.card_id, action_context=context))
        return moves

    def _action_contexts(self, action_type: ActionType) -> list[ActionContext]:
        game = self.game
        player = game.current_player
        opponent = player.opponent
        ledger = game.ledger

        if action_type == ActionType.ASSASSINATION:
            return [
                ActionContext(patrician_type_1=patrician_type, card_index=index)
                for patrician_type in PatricianType
                for index in range(len(ledger.played_influence(patrician_type, opponent)))
            ]
        if action_type in (ActionType.SCOUT, ActionType.WRATH_OF_THE_GODS):
            return [ActionContext(patrician_type_1=patrician_type) for patrician_type in PatricianType]
        if action_type == ActionType.CASTLING:
            # Swapping two of the player's own lists keeps every card accounted for
            return [
                ActionContext(
                    patrician_type_1=first,
                    patrician_type_2=second,
                    redistributed_cards_for_type_1=ledger.played_cards(second, player),
                    redistributed_cards_for_type_2=ledger.played_cards(first, player),
                )
                for first, second in combinations(PatricianType, 2)
            ]
        if action_type == ActionType.VETO and game.last_action_of(opponent) is not None:
            return [ActionContext(draw_from_influence=True)]
        return []


def legal_moves(game: Game) -> list[Move]:
    """Convenience function to generate legal moves."""
    return MoveGenerator(game=game).generate()

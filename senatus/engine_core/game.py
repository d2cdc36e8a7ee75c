"""
Game - The single entry point for driving a Patrician influence contest.

Game owns the ledger, decks and hands, discard pile, bust bag and the
claimed-Patrician tally, and runs the mode / turn-phase state machine:

    INITIAL_INFLUENCE_PLACEMENT -> STANDARD_PLAY

    FIRST_CARD_SELECTION -> SECOND_CARD_SELECTION -> VOTE_OF_CONFIDENCE
        -> DRAW_PHASE -> (opponent) FIRST_CARD_SELECTION

Every public mutator validates mode, phase, active player and per-turn
limits first, and raises a GameError without touching state when the
call is not legal. The instance stays usable after any rejection.

A Game is not thread-safe; callers serialize access per instance.
"""

from __future__ import annotations
import logging
import random
from enum import Enum
from typing import TYPE_CHECKING, Callable, Mapping

from .cards import (
    ActionCard,
    ActionType,
    Card,
    FIRST_PLAYER,
    InfluenceCard,
    PatricianType,
    Player,
)
from .decks import BustBag, BustPiece, DeckManager
from .effects import ActionContext, ActionRecord, apply_effect
from .errors import CardNotFoundError, IllegalStateError, MalformedInputError
from .ledger import PatricianState, VoteResult

if TYPE_CHECKING:
    from .move import Move

logger = logging.getLogger(__name__)

MAX_CARDS_PER_TURN = 2


class GameMode(Enum):
    """High-level game modes."""
    INITIAL_INFLUENCE_PLACEMENT = "initial_influence_placement"
    STANDARD_PLAY = "standard_play"


class TurnPhase(Enum):
    """Sub-phases of a standard-play turn."""
    FIRST_CARD_SELECTION = "first_card_selection"
    SECOND_CARD_SELECTION = "second_card_selection"
    VOTE_OF_CONFIDENCE = "vote_of_confidence"
    DRAW_PHASE = "draw_phase"


VetoHook = Callable[["Game", Player, ActionRecord], None]


class Game:
    """
    Complete, mutable state of one game.

    Usage:
        game = Game(seed=7)
        game.place_initial_influence(Player.CAESAR, {...})
        game.place_initial_influence(Player.CLEOPATRA, {...})
        game.play_card(Player.CAESAR, "three", PatricianType.PRAETOR)
        game.skip_to_vote(Player.CAESAR)
        game.execute_vote_of_confidence(Player.CAESAR, PatricianType.PRAETOR)
        game.draw_to_hand_limit(Player.CAESAR, from_influence=True)
    """

    def __init__(self, seed: int | None = None, on_veto: VetoHook | None = None):
        self.seed = seed
        self._rng = random.Random(seed)

        self.mode = GameMode.INITIAL_INFLUENCE_PLACEMENT
        self.turn_phase = TurnPhase.FIRST_CARD_SELECTION
        self.current_player = FIRST_PLAYER
        self.turn_number = 0

        self.cards_played_this_turn = 0
        self.action_card_played_this_turn = False
        self.pending_action: ActionRecord | None = None
        self._last_actions: dict[Player, ActionRecord | None] = {player: None for player in Player}
        self.vetoed_actions: list[ActionRecord] = []
        self.on_veto = on_veto

        self._initial_placement_done: dict[Player, bool] = {player: False for player in Player}

        self.ledger = PatricianState()
        self.decks = DeckManager(self._rng)
        self.discard_pile: list[Card] = []
        self.bust_bag = BustBag(self._rng)
        self.claimed: dict[Player, dict[PatricianType, int]] = {
            player: {patrician_type: 0 for patrician_type in PatricianType}
            for player in Player
        }
        self.move_history: list[Move] = []

    # =========================================================================
    # Queries
    # =========================================================================

    def hand(self, player: Player) -> tuple[Card, ...]:
        return self.decks.hand(player)

    def has_placed_initial_influence(self, player: Player) -> bool:
        return self._initial_placement_done[player]

    def is_waiting_for_initial_influence(self) -> bool:
        return (
            self.mode == GameMode.INITIAL_INFLUENCE_PLACEMENT
            and not self._initial_placement_done[self.current_player]
        )

    def can_play_more_cards(self) -> bool:
        return (
            self.mode == GameMode.STANDARD_PLAY
            and self.turn_phase in (TurnPhase.FIRST_CARD_SELECTION, TurnPhase.SECOND_CARD_SELECTION)
            and self.cards_played_this_turn < MAX_CARDS_PER_TURN
        )

    def claimed_counts(self, player: Player) -> dict[PatricianType, int]:
        return dict(self.claimed[player])

    def last_action_of(self, player: Player) -> ActionRecord | None:
        """The Action card a player played on their latest turn, if any."""
        return self._last_actions[player]

    # =========================================================================
    # Shared bookkeeping
    # =========================================================================

    def discard(self, card: Card | None) -> None:
        """Append a card to the discard pile; None is ignored."""
        if card is None:
            return
        self.discard_pile.append(card)

    def draw(self, player: Player, from_influence: bool) -> Card | None:
        return self.decks.draw(player, from_influence)

    def draw_bust(self) -> BustPiece | None:
        return self.bust_bag.draw()

    def record_veto(self, player: Player, record: ActionRecord) -> None:
        """Mark an Action as vetoed and hand it to the negation hook."""
        self.vetoed_actions.append(record)
        if self._last_actions[record.player] is record:
            self._last_actions[record.player] = None
        if self.pending_action is record:
            self.pending_action = None
        logger.info(
            "%s vetoed %s's %s",
            player.value, record.player.value, record.action_type.value,
        )
        if self.on_veto is not None:
            self.on_veto(self, player, record)

    def resolve_vote_of_confidence(self, patrician_type: PatricianType) -> VoteResult:
        """
        Resolve a vote on the ledger and settle discards and claims.

        No mode or phase checks; execute_vote_of_confidence is the
        turn-checked entry point.
        """
        result = self.ledger.resolve_vote_of_confidence(patrician_type)
        for card in result.discarded:
            self.discard(card)
        if result.winner is not None and result.claimed:
            self.claimed[result.winner][patrician_type] += 1
        return result

    # =========================================================================
    # Validation helpers
    # =========================================================================

    def _require_mode(self, mode: GameMode) -> None:
        if self.mode != mode:
            raise IllegalStateError(f"Not allowed in {self.mode.value} mode")

    def _require_active(self, player: Player) -> None:
        if player != self.current_player:
            raise IllegalStateError(f"Not {player.value}'s turn")

    def _require_phase(self, *phases: TurnPhase) -> None:
        if self.turn_phase not in phases:
            raise IllegalStateError(f"Not allowed during {self.turn_phase.value} phase")

    # =========================================================================
    # Initial influence placement
    # =========================================================================

    def place_initial_influence(
        self,
        player: Player,
        placements: Mapping[PatricianType, InfluenceCard],
    ) -> None:
        """
        Place one numbered Influence card face down on each named group.

        The whole mapping is validated before any card leaves the hand.
        Once both players have placed, standard play starts with the
        first player and fresh starting hands.
        """
        self._require_mode(GameMode.INITIAL_INFLUENCE_PLACEMENT)
        self._require_active(player)
        if self._initial_placement_done[player]:
            raise IllegalStateError(f"{player.value} has already placed initial influence")
        if not placements:
            raise MalformedInputError("Initial placement needs at least one card")

        cards = []
        for patrician_type, card in placements.items():
            if not isinstance(patrician_type, PatricianType):
                raise MalformedInputError(f"Unknown patrician group: {patrician_type}")
            if not isinstance(card, InfluenceCard) or card.is_philosopher:
                raise MalformedInputError("Initial placement only takes numbered Influence cards")
            cards.append(card)
        if not self.decks.has_cards(player, cards):
            raise CardNotFoundError(f"{player.value} does not hold every card in the placement")

        for patrician_type, card in placements.items():
            self.decks.take_from_hand(player, card)
            self.ledger.add_influence(patrician_type, player, card, face_up=False)
        self._initial_placement_done[player] = True
        logger.info("%s placed initial influence on %d group(s)", player.value, len(placements))

        if all(self._initial_placement_done.values()):
            self._start_standard_play()
        else:
            self.current_player = player.opponent

    def _start_standard_play(self) -> None:
        self.mode = GameMode.STANDARD_PLAY
        self.current_player = FIRST_PLAYER
        self.turn_phase = TurnPhase.FIRST_CARD_SELECTION
        self.turn_number = 1
        self._reset_turn_state()
        self.decks.reset_hands()
        logger.info("Standard play begins; %s moves first", self.current_player.value)

    # =========================================================================
    # Standard play
    # =========================================================================

    def play_card(
        self,
        player: Player,
        card_id: str,
        patrician_type: PatricianType | None = None,
        context: ActionContext | None = None,
    ) -> Card:
        """
        Play one card from hand in the first or second card slot.

        Influence cards go face down in the first slot, face up in the
        second. Action cards resolve immediately and are discarded.
        Returns the played card.
        """
        self._require_mode(GameMode.STANDARD_PLAY)
        self._require_active(player)
        self._require_phase(TurnPhase.FIRST_CARD_SELECTION, TurnPhase.SECOND_CARD_SELECTION)
        if self.cards_played_this_turn >= MAX_CARDS_PER_TURN:
            raise IllegalStateError(f"Already played {MAX_CARDS_PER_TURN} cards this turn")

        card = self.decks.find_in_hand(player, card_id)
        if card is None:
            raise CardNotFoundError(f"Card {card_id} not in {player.value}'s hand")

        if isinstance(card, InfluenceCard):
            self._play_influence(player, card, patrician_type)
        elif isinstance(card, ActionCard):
            self._play_action(player, card, context or ActionContext())
        else:
            raise MalformedInputError(f"Card {card_id} cannot be played")

        self.cards_played_this_turn += 1
        if self.turn_phase == TurnPhase.FIRST_CARD_SELECTION:
            self.turn_phase = TurnPhase.SECOND_CARD_SELECTION
        return card

    def _play_influence(
        self, player: Player, card: InfluenceCard, patrician_type: PatricianType | None
    ) -> None:
        if not isinstance(patrician_type, PatricianType):
            raise MalformedInputError("Influence cards need a target patrician group")
        face_up = self.turn_phase == TurnPhase.SECOND_CARD_SELECTION
        self.decks.take_from_hand(player, card)
        self.ledger.add_influence(patrician_type, player, card, face_up=face_up)
        logger.debug(
            "%s played %s on %s face %s",
            player.value, card.card_id, patrician_type.value, "up" if face_up else "down",
        )

    def _play_action(self, player: Player, card: ActionCard, context: ActionContext) -> None:
        if self.action_card_played_this_turn:
            raise IllegalStateError("Only one Action card may be played per turn")

        index = self.decks.take_from_hand(player, card)
        try:
            apply_effect(self, player, card.action_type, context)
        except Exception:
            self.decks.return_to_hand(player, card, index)
            raise

        self.discard(card)
        record = ActionRecord(action_type=card.action_type, player=player, context=context)
        self.pending_action = record
        self._last_actions[player] = record
        self.action_card_played_this_turn = True
        logger.info("%s played %s", player.value, card.action_type.value)

    def skip_to_vote(self, player: Player) -> None:
        """Skip the optional second card and move to the Vote of Confidence."""
        self._require_mode(GameMode.STANDARD_PLAY)
        self._require_active(player)
        self._require_phase(TurnPhase.SECOND_CARD_SELECTION)
        self.turn_phase = TurnPhase.VOTE_OF_CONFIDENCE

    def execute_vote_of_confidence(self, player: Player, patrician_type: PatricianType) -> VoteResult:
        """Run the turn's Vote of Confidence; the turn moves to the draw phase even on a tie."""
        self._require_mode(GameMode.STANDARD_PLAY)
        self._require_active(player)
        self._require_phase(TurnPhase.VOTE_OF_CONFIDENCE)
        if not isinstance(patrician_type, PatricianType):
            raise MalformedInputError(f"Unknown patrician group: {patrician_type}")

        result = self.resolve_vote_of_confidence(patrician_type)
        self.turn_phase = TurnPhase.DRAW_PHASE
        logger.info(
            "%s called a vote on %s: %s",
            player.value,
            patrician_type.value,
            "tie" if result.is_tie else f"{result.winner.value} wins",
        )
        return result

    def draw_to_hand_limit(self, player: Player, from_influence: bool) -> list[Card]:
        """Refill the hand from one deck, then end the turn."""
        self._require_mode(GameMode.STANDARD_PLAY)
        self._require_active(player)
        self._require_phase(TurnPhase.DRAW_PHASE)
        drawn = self.decks.draw_to_hand_limit(player, from_influence)
        self._end_turn()
        return drawn

    def veto_pending_action(self, player: Player, from_influence: bool = True) -> ActionRecord:
        """
        Veto the Action card the active player played this turn.

        Called by the opponent out of turn: their Veto is discarded, the
        pending Action is marked vetoed and they draw one replacement.
        """
        self._require_mode(GameMode.STANDARD_PLAY)
        if player == self.current_player:
            raise IllegalStateError("The active player cannot veto their own action")
        record = self.pending_action
        if record is None:
            raise IllegalStateError("No action to veto")
        veto_card = ActionCard(ActionType.VETO)
        if self.decks.find_in_hand(player, veto_card.card_id) is None:
            raise CardNotFoundError(f"{player.value} holds no Veto card")

        self.decks.take_from_hand(player, veto_card)
        self.discard(veto_card)
        self.record_veto(player, record)
        self.decks.draw(player, from_influence)
        return record

    def _reset_turn_state(self) -> None:
        self.cards_played_this_turn = 0
        self.action_card_played_this_turn = False
        self.pending_action = None

    def _end_turn(self) -> None:
        self._reset_turn_state()
        self.current_player = self.current_player.opponent
        self._last_actions[self.current_player] = None
        self.turn_phase = TurnPhase.FIRST_CARD_SELECTION
        self.turn_number += 1
        logger.debug("Turn %d: %s to play", self.turn_number, self.current_player.value)

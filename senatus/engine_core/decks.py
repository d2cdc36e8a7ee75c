"""
Decks and Hands - Per-player shuffled decks, hands and the bust bag.

This module handles:
- Building one Action and one Influence deck per player from catalog counts
- Shuffling with a seeded random.Random for determinism
- The fixed starting hand (Influence 1-5 plus one Veto)
- Hand-size-limited drawing from the tail of a deck
- The bust-piece bag (draw without replacement)

Decks are built once and never reshuffled. An exhausted deck simply
yields no card.
"""

from __future__ import annotations
import logging
import random
from enum import Enum

from .cards import (
    ActionCard,
    ActionType,
    Card,
    InfluenceCard,
    InfluenceType,
    PatricianType,
    Player,
)

logger = logging.getLogger(__name__)

MAX_HAND_SIZE = 6


def starting_hand() -> list[Card]:
    """Influence cards 1-5 and one Veto."""
    hand: list[Card] = [InfluenceCard(t) for t in InfluenceType.numbered()]
    hand.append(ActionCard(ActionType.VETO))
    return hand


def _build_action_deck(rng: random.Random) -> list[ActionCard]:
    deck = []
    for action_type in ActionType:
        deck.extend(ActionCard(action_type) for _ in range(action_type.count))
    rng.shuffle(deck)
    return deck


def _build_influence_deck(rng: random.Random) -> list[InfluenceCard]:
    deck = []
    for influence_type in InfluenceType:
        deck.extend(InfluenceCard(influence_type) for _ in range(influence_type.count))
    rng.shuffle(deck)
    return deck


class DeckManager:
    """
    Owns every player's decks and hand.

    Hands are plain lists: order is kept for display and so that a
    rejected play can put a card back where it was.
    """

    def __init__(self, rng: random.Random, hand_limit: int = MAX_HAND_SIZE):
        self.hand_limit = hand_limit
        self._action_decks: dict[Player, list[ActionCard]] = {}
        self._influence_decks: dict[Player, list[InfluenceCard]] = {}
        for player in Player:
            self._action_decks[player] = _build_action_deck(rng)
            self._influence_decks[player] = _build_influence_deck(rng)
        self._hands: dict[Player, list[Card]] = {}
        self.reset_hands()

    # =========================================================================
    # Hands
    # =========================================================================

    def reset_hands(self) -> None:
        """Give both players a fresh starting hand."""
        for player in Player:
            self._hands[player] = starting_hand()

    def set_hand(self, player: Player, cards: list[Card]) -> None:
        if len(cards) > self.hand_limit:
            raise ValueError(f"Hand cannot exceed {self.hand_limit} cards")
        self._hands[player] = list(cards)

    def hand(self, player: Player) -> tuple[Card, ...]:
        return tuple(self._hands[player])

    def hand_size(self, player: Player) -> int:
        return len(self._hands[player])

    def is_hand_full(self, player: Player) -> bool:
        return len(self._hands[player]) >= self.hand_limit

    def find_in_hand(self, player: Player, card_id: str) -> Card | None:
        """First card in hand with the given id, or None."""
        key = card_id.strip().lower() if isinstance(card_id, str) else card_id
        for card in self._hands[player]:
            if card.card_id == key:
                return card
        return None

    def take_from_hand(self, player: Player, card: Card) -> int:
        """Remove one copy of card from the hand and return its former index."""
        hand = self._hands[player]
        index = hand.index(card)
        del hand[index]
        return index

    def return_to_hand(self, player: Player, card: Card, index: int) -> None:
        """Undo take_from_hand."""
        self._hands[player].insert(index, card)

    def has_cards(self, player: Player, cards: list[Card]) -> bool:
        """Whether the hand holds every card in cards, counted as a multiset."""
        remaining = list(self._hands[player])
        for card in cards:
            if card not in remaining:
                return False
            remaining.remove(card)
        return True

    # =========================================================================
    # Decks
    # =========================================================================

    def draw(self, player: Player, from_influence: bool) -> Card | None:
        """
        Draw one card from the tail of the chosen deck into the hand.

        Returns None when the hand is full or the deck is empty.
        """
        if self.is_hand_full(player):
            return None
        deck = self._influence_decks[player] if from_influence else self._action_decks[player]
        if not deck:
            return None
        card = deck.pop()
        self._hands[player].append(card)
        return card

    def draw_to_hand_limit(self, player: Player, from_influence: bool) -> list[Card]:
        """Draw from one deck until the hand is full or the deck runs out."""
        drawn = []
        while True:
            card = self.draw(player, from_influence)
            if card is None:
                break
            drawn.append(card)
        logger.debug(
            "%s drew %d card(s) from the %s deck",
            player.value, len(drawn), "influence" if from_influence else "action",
        )
        return drawn

    def influence_deck_count(self, player: Player) -> int:
        return len(self._influence_decks[player])

    def action_deck_count(self, player: Player) -> int:
        return len(self._action_decks[player])

    def deck_counts(self, player: Player) -> dict[str, int]:
        return {
            "influence": self.influence_deck_count(player),
            "action": self.action_deck_count(player),
        }


# =============================================================================
# Bust bag
# =============================================================================

class BustPiece(Enum):
    """Bust tokens: one per Patrician group plus black and grey."""
    PRAETOR = "praetor"
    AEDILE = "aedile"
    CONSUL = "consul"
    CENSOR = "censor"
    QUAESTOR = "quaestor"
    BLACK = "black"
    GREY = "grey"

    @property
    def patrician_type(self) -> PatricianType | None:
        """The matching group for colored busts, None for black and grey."""
        for patrician_type in PatricianType:
            if patrician_type.value == self.value:
                return patrician_type
        return None

    @classmethod
    def for_patrician(cls, patrician_type: PatricianType) -> BustPiece:
        return cls(patrician_type.value)


class BustBag:
    """
    Bag of bust pieces, drawn at random without replacement.

    Completed groups stay out of the bag across resets.
    """

    def __init__(self, rng: random.Random):
        self._rng = rng
        self._completed: set[BustPiece] = set()
        self._contents: list[BustPiece] = []
        self.reset()

    @property
    def contents(self) -> tuple[BustPiece, ...]:
        return tuple(self._contents)

    def draw(self) -> BustPiece | None:
        """Remove and return a random piece, or None if the bag is empty."""
        if not self._contents:
            return None
        index = self._rng.randrange(len(self._contents))
        return self._contents.pop(index)

    def return_piece(self, piece: BustPiece) -> None:
        self._contents.append(piece)

    def complete(self, patrician_type: PatricianType) -> None:
        """Mark a group finished; its bust is no longer refilled."""
        self._completed.add(BustPiece.for_patrician(patrician_type))

    def reset(self) -> None:
        self._contents = [piece for piece in BustPiece if piece not in self._completed]

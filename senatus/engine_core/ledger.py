"""
Patrician Ledger - Board supply and played Influence per Patrician group.

The ledger is the only owner of played-card lists and remaining board
counts. Game, the action effects and Vote-of-Confidence resolution all
go through its methods.

Played lists keep insertion order (the play order), so Assassination
can address a card by index.

Vote of Confidence:
1. Reveal every played card on the group for both players
2. Sum numbered values per player, count Philosophers
3. Equal sums: tie, nothing moves
4. Otherwise the higher sum is the sum winner; differing Philosopher
   counts hand the vote to the sum loser instead
5. One board card is claimed for the effective winner
6. Sum winner discards its highest numbered card, sum loser its lowest
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field

from .cards import InfluenceCard, PatricianType, Player
from .errors import CardNotFoundError

logger = logging.getLogger(__name__)


@dataclass
class PlayedInfluence:
    """An Influence card on the board with its visibility."""
    card: InfluenceCard
    face_up: bool = False

    @property
    def value(self) -> int:
        return self.card.value


@dataclass
class VoteResult:
    """
    Outcome of one Vote of Confidence.

    winner is the effective winner (possibly inverted by Philosophers);
    sum_winner drove the discards. Both are None on a tie.
    """
    patrician_type: PatricianType
    winner: Player | None = None
    sum_winner: Player | None = None
    inverted: bool = False
    claimed: bool = False
    sums: dict[Player, int] = field(default_factory=dict)
    philosophers: dict[Player, int] = field(default_factory=dict)
    discarded: list[InfluenceCard] = field(default_factory=list)

    @property
    def is_tie(self) -> bool:
        return self.winner is None


class PatricianState:
    """Board supply and played Influence for every Patrician group."""

    def __init__(self):
        self._remaining: dict[PatricianType, int] = {
            patrician_type: patrician_type.count for patrician_type in PatricianType
        }
        self._played: dict[PatricianType, dict[Player, list[PlayedInfluence]]] = {
            patrician_type: {player: [] for player in Player}
            for patrician_type in PatricianType
        }

    # =========================================================================
    # Queries
    # =========================================================================

    def remaining(self, patrician_type: PatricianType) -> int:
        return self._remaining[patrician_type]

    def board_state(self) -> dict[PatricianType, int]:
        return dict(self._remaining)

    def played_influence(
        self, patrician_type: PatricianType, player: Player
    ) -> tuple[PlayedInfluence, ...]:
        return tuple(self._played[patrician_type][player])

    def played_cards(self, patrician_type: PatricianType, player: Player) -> list[InfluenceCard]:
        return [p.card for p in self._played[patrician_type][player]]

    def influence_sum(self, patrician_type: PatricianType, player: Player) -> int:
        return sum(p.value for p in self._played[patrician_type][player])

    def philosopher_count(self, patrician_type: PatricianType, player: Player) -> int:
        return sum(1 for p in self._played[patrician_type][player] if p.card.is_philosopher)

    # =========================================================================
    # Mutations
    # =========================================================================

    def add_influence(
        self,
        patrician_type: PatricianType,
        player: Player,
        card: InfluenceCard,
        face_up: bool,
    ) -> None:
        self._played[patrician_type][player].append(PlayedInfluence(card=card, face_up=face_up))

    def remove_influence(
        self, patrician_type: PatricianType, player: Player, index: int
    ) -> InfluenceCard:
        """
        Remove the card at index from a player's played list.

        Raises CardNotFoundError when index is out of range.
        """
        played = self._played[patrician_type][player]
        if not isinstance(index, int) or index < 0 or index >= len(played):
            raise CardNotFoundError(
                f"No played card at index {index} for {player.value} on {patrician_type.value}"
            )
        return played.pop(index).card

    def reveal_influence(self, patrician_type: PatricianType, player: Player) -> None:
        for played in self._played[patrician_type][player]:
            played.face_up = True

    def clear_influence(self, patrician_type: PatricianType) -> list[InfluenceCard]:
        """Remove every played card on a group, both players, and return them."""
        removed = []
        for player in Player:
            removed.extend(p.card for p in self._played[patrician_type][player])
            self._played[patrician_type][player] = []
        return removed

    def replace_influence(
        self,
        player: Player,
        patrician_type: PatricianType,
        cards: list[InfluenceCard],
    ) -> None:
        """Replace a player's whole played list on a group, face down."""
        self._played[patrician_type][player] = [
            PlayedInfluence(card=card, face_up=False) for card in cards
        ]

    def _take_extreme(
        self, patrician_type: PatricianType, player: Player, highest: bool
    ) -> InfluenceCard | None:
        """Remove the highest (or lowest) numbered card; Philosophers are never picked."""
        played = self._played[patrician_type][player]
        candidates = [i for i, p in enumerate(played) if not p.card.is_philosopher]
        if not candidates:
            return None
        if highest:
            index = max(candidates, key=lambda i: played[i].value)
        else:
            index = min(candidates, key=lambda i: played[i].value)
        return played.pop(index).card

    # =========================================================================
    # Vote of Confidence
    # =========================================================================

    def resolve_vote_of_confidence(self, patrician_type: PatricianType) -> VoteResult:
        """
        Resolve a Vote of Confidence on one group.

        Board supply never drops below zero: on an exhausted group the
        discards still happen but nothing is claimed.
        """
        for player in Player:
            self.reveal_influence(patrician_type, player)

        sums = {player: self.influence_sum(patrician_type, player) for player in Player}
        philosophers = {player: self.philosopher_count(patrician_type, player) for player in Player}
        result = VoteResult(patrician_type=patrician_type, sums=sums, philosophers=philosophers)

        caesar_sum = sums[Player.CAESAR]
        cleopatra_sum = sums[Player.CLEOPATRA]
        if caesar_sum == cleopatra_sum:
            logger.debug("Vote on %s tied at %d", patrician_type.value, caesar_sum)
            return result

        sum_winner = Player.CAESAR if caesar_sum > cleopatra_sum else Player.CLEOPATRA
        sum_loser = sum_winner.opponent
        inverted = philosophers[Player.CAESAR] != philosophers[Player.CLEOPATRA]

        result.sum_winner = sum_winner
        result.inverted = inverted
        result.winner = sum_loser if inverted else sum_winner

        if self._remaining[patrician_type] > 0:
            self._remaining[patrician_type] -= 1
            result.claimed = True

        for card in (
            self._take_extreme(patrician_type, sum_winner, highest=True),
            self._take_extreme(patrician_type, sum_loser, highest=False),
        ):
            if card is not None:
                result.discarded.append(card)

        logger.debug(
            "Vote on %s: sums %s, winner %s%s",
            patrician_type.value,
            {p.value: s for p, s in sums.items()},
            result.winner.value,
            " (inverted)" if inverted else "",
        )
        return result

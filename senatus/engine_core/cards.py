"""
Card Catalog - Players, Patrician groups and the three card families.

Card structure:
- Patrician cards: five groups with a fixed board supply each
- Influence cards: numbered 1-5 (five copies each) plus the Philosopher (0, two copies)
- Action cards: five special cards with an immediate effect

Cards are values: two copies of the same type compare equal, so a hand
behaves as a multiset keyed by card_id.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from .errors import MalformedInputError


class Player(Enum):
    """The two fixed player identities."""
    CAESAR = "caesar"
    CLEOPATRA = "cleopatra"

    @property
    def opponent(self) -> Player:
        return Player.CLEOPATRA if self is Player.CAESAR else Player.CAESAR


FIRST_PLAYER = Player.CAESAR


class PatricianType(Enum):
    """Patrician groups on the board."""
    PRAETOR = "praetor"
    AEDILE = "aedile"
    CONSUL = "consul"
    CENSOR = "censor"
    QUAESTOR = "quaestor"

    @property
    def count(self) -> int:
        """Board supply of claimable cards for this group."""
        return PATRICIAN_SUPPLY[self]

    @property
    def color(self) -> str:
        return PATRICIAN_COLORS[self]


class InfluenceType(Enum):
    """Influence card types."""
    ONE = "one"
    TWO = "two"
    THREE = "three"
    FOUR = "four"
    FIVE = "five"
    PHILOSOPHER = "philosopher"

    @property
    def value_points(self) -> int:
        return INFLUENCE_VALUES[self]

    @property
    def count(self) -> int:
        return INFLUENCE_SUPPLY[self]

    @property
    def is_philosopher(self) -> bool:
        return self is InfluenceType.PHILOSOPHER

    @classmethod
    def numbered(cls) -> list[InfluenceType]:
        """Numbered types in ascending value order."""
        return [t for t in cls if not t.is_philosopher]


class ActionType(Enum):
    """Action card types."""
    ASSASSINATION = "assassination"
    SCOUT = "scout"
    WRATH_OF_THE_GODS = "wrath_of_the_gods"
    CASTLING = "castling"
    VETO = "veto"

    @property
    def count(self) -> int:
        return ACTION_SUPPLY[self]


PATRICIAN_SUPPLY = {
    PatricianType.PRAETOR: 5,
    PatricianType.AEDILE: 5,
    PatricianType.CONSUL: 3,
    PatricianType.CENSOR: 3,
    PatricianType.QUAESTOR: 5,
}

PATRICIAN_COLORS = {
    PatricianType.PRAETOR: "blue",
    PatricianType.AEDILE: "green",
    PatricianType.CONSUL: "white",
    PatricianType.CENSOR: "pink",
    PatricianType.QUAESTOR: "yellow",
}

INFLUENCE_VALUES = {
    InfluenceType.ONE: 1,
    InfluenceType.TWO: 2,
    InfluenceType.THREE: 3,
    InfluenceType.FOUR: 4,
    InfluenceType.FIVE: 5,
    InfluenceType.PHILOSOPHER: 0,
}

INFLUENCE_SUPPLY = {
    InfluenceType.ONE: 5,
    InfluenceType.TWO: 5,
    InfluenceType.THREE: 5,
    InfluenceType.FOUR: 5,
    InfluenceType.FIVE: 5,
    InfluenceType.PHILOSOPHER: 2,
}

ACTION_SUPPLY = {
    ActionType.ASSASSINATION: 3,
    ActionType.SCOUT: 3,
    ActionType.WRATH_OF_THE_GODS: 1,
    ActionType.CASTLING: 1,
    ActionType.VETO: 1,
}


@dataclass(frozen=True)
class PatricianCard:
    """A claimable Patrician card."""
    patrician_type: PatricianType
    card_id: str = field(default="")
    family: str = field(default="patrician", init=False)

    def __post_init__(self):
        if not self.card_id:
            object.__setattr__(self, "card_id", self.patrician_type.value)

    @property
    def name(self) -> str:
        return self.patrician_type.name.capitalize()


@dataclass(frozen=True)
class InfluenceCard:
    """An Influence card, numbered or Philosopher."""
    influence_type: InfluenceType
    card_id: str = field(default="")
    family: str = field(default="influence", init=False)

    def __post_init__(self):
        if not self.card_id:
            object.__setattr__(self, "card_id", self.influence_type.value)

    @property
    def value(self) -> int:
        return self.influence_type.value_points

    @property
    def is_philosopher(self) -> bool:
        return self.influence_type.is_philosopher


@dataclass(frozen=True)
class ActionCard:
    """An Action card; its effect lives in effects.ACTION_EFFECTS."""
    action_type: ActionType
    card_id: str = field(default="")
    family: str = field(default="action", init=False)

    def __post_init__(self):
        if not self.card_id:
            object.__setattr__(self, "card_id", self.action_type.value)


Card = Union[PatricianCard, InfluenceCard, ActionCard]


def influence_cards(*types: InfluenceType) -> list[InfluenceCard]:
    """Build a list of Influence cards, e.g. influence_cards(THREE, TWO)."""
    return [InfluenceCard(t) for t in types]


# =============================================================================
# Name parsing
# =============================================================================

def _parse_enum(enum_cls, name, label: str):
    if isinstance(name, enum_cls):
        return name
    if not isinstance(name, str) or not name.strip():
        raise MalformedInputError(f"Missing {label}")
    key = name.strip().lower()
    for member in enum_cls:
        if member.value == key:
            return member
    raise MalformedInputError(f"Unknown {label}: {name}")


def parse_player(name: str | Player) -> Player:
    return _parse_enum(Player, name, "player")


def parse_patrician(name: str | PatricianType) -> PatricianType:
    return _parse_enum(PatricianType, name, "patrician group")


def parse_influence(name: str | InfluenceType) -> InfluenceType:
    return _parse_enum(InfluenceType, name, "influence card")


def parse_action(name: str | ActionType) -> ActionType:
    return _parse_enum(ActionType, name, "action card")


def card_from_id(card_id: str) -> InfluenceCard | ActionCard:
    """
    Resolve a card id to a fresh Influence or Action card.

    Raises MalformedInputError if the id names no known type.
    """
    if not isinstance(card_id, str) or not card_id.strip():
        raise MalformedInputError("Missing card id")
    key = card_id.strip().lower()
    if key in {t.value for t in InfluenceType}:
        return InfluenceCard(parse_influence(key))
    if key in {t.value for t in ActionType}:
        return ActionCard(parse_action(key))
    raise MalformedInputError(f"Unknown card id: {card_id}")

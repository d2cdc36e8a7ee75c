"""
Pytest fixtures for Senatus tests.
"""

import pytest

from ..engine_core.cards import ActionCard, ActionType, InfluenceCard, InfluenceType, PatricianType, Player
from ..engine_core.game import Game


@pytest.fixture
def game() -> Game:
    """A seeded game in initial placement mode."""
    return Game(seed=7)


@pytest.fixture
def standard_game(game: Game) -> Game:
    """
    A game in standard play, Caesar to move.

    Caesar placed a Three on the Praetors, Cleopatra a Two.
    """
    game.place_initial_influence(Player.CAESAR, {PatricianType.PRAETOR: InfluenceCard(InfluenceType.THREE)})
    game.place_initial_influence(Player.CLEOPATRA, {PatricianType.PRAETOR: InfluenceCard(InfluenceType.TWO)})
    return game


@pytest.fixture
def give_action():
    """Put an Action card at the front of a player's hand in place of its last card."""
    def _give(game: Game, player: Player, action_type: ActionType) -> None:
        hand = list(game.hand(player))
        game.decks.set_hand(player, [ActionCard(action_type)] + hand[:-1])
    return _give

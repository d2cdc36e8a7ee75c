"""
Bot Policy - Interface for bot decision-making.

A BotPolicy takes a game and its legal moves and returns a decision.
Policies never mutate the game themselves; run_bots applies the chosen
move through the reducer.
"""

from __future__ import annotations
import logging
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..engine_core.cards import Player
from ..engine_core.move_generator import legal_moves
from ..engine_core.reducer import apply_move

if TYPE_CHECKING:
    from ..engine_core.game import Game
    from ..engine_core.move import Move

logger = logging.getLogger(__name__)


@dataclass
class BotDecision:
    """
    A decision made by a bot.

    Contains the move to make and an explanation for logs.
    """
    move: Move
    explanation: str = ""
    evaluated_moves: int = 0


class BotPolicy(ABC):
    """
    Abstract base class for bot policies.

    A policy defines how a bot selects moves.
    """

    @abstractmethod
    def select_move(self, game: Game, moves: list[Move]) -> BotDecision:
        """
        Select a move from the legal moves.

        Args:
            game: Current game
            moves: Legal moves for the active player

        Returns:
            BotDecision with the selected move
        """

    def get_name(self) -> str:
        """Get the bot's name/identifier."""
        return self.__class__.__name__


class RandomPolicy(BotPolicy):
    """
    Random policy - selects moves uniformly at random.

    Used for:
    - Simulation
    - Fuzzing the engine with legal sequences
    """

    def __init__(self, seed: int | None = None):
        self.rng = random.Random(seed)

    def select_move(self, game: Game, moves: list[Move]) -> BotDecision:
        if not moves:
            raise ValueError("No legal moves available")

        move = self.rng.choice(moves)
        return BotDecision(
            move=move,
            explanation="Selected randomly",
            evaluated_moves=len(moves),
        )


class FirstLegalPolicy(BotPolicy):
    """
    First-legal policy - always selects the first legal move.

    Used for deterministic testing.
    """

    def select_move(self, game: Game, moves: list[Move]) -> BotDecision:
        if not moves:
            raise ValueError("No legal moves available")

        return BotDecision(
            move=moves[0],
            explanation="Selected first legal move",
            evaluated_moves=1,
        )


def _apply_decision(game: Game, policy: BotPolicy, moves: list[Move]) -> BotDecision:
    decision = policy.select_move(game, moves)
    result = apply_move(game, decision.move)
    if not result.success:
        raise RuntimeError(
            f"{policy.get_name()} chose an illegal move: {result.error} ({result.error_code})"
        )
    logger.debug("%s: %s", policy.get_name(), "; ".join(result.changes))
    return decision


def play_turn(game: Game, policy: BotPolicy) -> list[BotDecision]:
    """
    Let one policy play for the active player until control passes.

    Control passes when the turn ends or, during initial placement, once
    the placement is made. Returns the decisions in order; an empty list
    means the active player had no legal move.
    """
    player = game.current_player
    mode = game.mode
    decisions = []
    while game.current_player == player and game.mode == mode:
        moves = legal_moves(game)
        if not moves:
            logger.info("No legal moves left for %s", player.value)
            break
        decisions.append(_apply_decision(game, policy, moves))
    return decisions


def run_bots(
    game: Game,
    policies: dict[Player, BotPolicy],
    max_turns: int = 20,
    max_moves: int = 1000,
) -> int:
    """
    Let bots play until max_turns standard-play turns have finished.

    Stops early if no legal move is left or max_moves is reached.
    Returns the number of moves applied.
    """
    applied = 0
    while applied < max_moves and game.turn_number <= max_turns:
        decisions = play_turn(game, policies[game.current_player])
        if not decisions:
            break
        applied += len(decisions)
    return applied

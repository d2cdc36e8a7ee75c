"""
Bots - Automated players for simulations and tests.

Policies pick among the engine's legal moves:
- RandomPolicy: uniform random choice, seedable
- FirstLegalPolicy: deterministic baseline
"""

from .policy import BotPolicy, BotDecision, RandomPolicy, FirstLegalPolicy, play_turn, run_bots

__all__ = [
    "BotPolicy",
    "BotDecision",
    "RandomPolicy",
    "FirstLegalPolicy",
    "play_turn",
    "run_bots",
]

"""
Senatus - Patrician Influence Contest Engine

A deterministic rules engine for a two-player card game in which Caesar
and Cleopatra compete for Patrician groups. The package provides:
- The game state machine, decks and Patrician ledger
- Legal move generation and a move reducer
- Bot policies for simulation
- An in-memory session layer and a REST API
"""

__version__ = "0.1.0"

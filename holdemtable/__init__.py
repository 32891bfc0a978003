"""
holdemtable - Texas Hold'em Table Engine

One human against computer opponents:
- Pure Python table logic (cards, hand evaluation, betting, side pots)
- Heuristic AI opponents
- FastAPI + WebSocket server with per-table timers and chip settlement

Usage:
    from holdemtable.core import HoldemTable, TableConfig, ActionType
    from holdemtable.agents import HeuristicAgent
"""

__version__ = "0.1.0"

from holdemtable.core.card import Card, Deck
from holdemtable.core.player import Player
from holdemtable.core.game import HoldemTable
from holdemtable.core.hand import HandScore, evaluate_best_of_seven

__all__ = [
    "Card",
    "Deck",
    "Player",
    "HoldemTable",
    "HandScore",
    "evaluate_best_of_seven",
    "__version__",
]

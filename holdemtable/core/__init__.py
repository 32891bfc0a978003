"""
holdemtable Core - Pure Python Texas Hold'em Table Logic

This module contains all game logic without any network dependencies.
"""

from holdemtable.core.card import Card, Deck, Suit, shuffled_deck, parse_cards
from holdemtable.core.errors import (
    HoldemError, IllegalActionError, DeckExhausted, SettlementError, BalanceUnavailable,
)
from holdemtable.core.hand import (
    HandCategory, HandScore, evaluate_five, evaluate_best_of_seven,
    compare_hand_scores, describe_hand,
)
from holdemtable.core.player import Player
from holdemtable.core.rules import ActionType, Street, TablePhase, TableConfig
from holdemtable.core.betting import BettingRound, HandState, ActionResult, RoundStatus
from holdemtable.core.pots import PotLayer, PotAward, build_pot_layers, distribute_pots
from holdemtable.core.game import HoldemTable, HandResult

__all__ = [
    "Card",
    "Deck",
    "Suit",
    "shuffled_deck",
    "parse_cards",
    "HoldemError",
    "IllegalActionError",
    "DeckExhausted",
    "SettlementError",
    "BalanceUnavailable",
    "HandCategory",
    "HandScore",
    "evaluate_five",
    "evaluate_best_of_seven",
    "compare_hand_scores",
    "describe_hand",
    "Player",
    "ActionType",
    "Street",
    "TablePhase",
    "TableConfig",
    "BettingRound",
    "HandState",
    "ActionResult",
    "RoundStatus",
    "PotLayer",
    "PotAward",
    "build_pot_layers",
    "distribute_pots",
    "HoldemTable",
    "HandResult",
]

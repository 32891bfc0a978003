"""
Heuristic decision policy for computer seats.

Strength is a number in (0, 1): before the flop it comes from the two hole
cards, afterwards from the best-of-seven score. The policy is probabilistic;
its only guarantees are that every decision is legal and every raise target
lies within [minimum raise, all-in].
"""

import random
from typing import Dict, Any, List

from holdemtable.core.betting import HandState
from holdemtable.core.card import Card
from holdemtable.core.hand import evaluate_best_of_seven
from holdemtable.core.player import Player
from holdemtable.core.rules import ActionType


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def preflop_strength(first: Card, second: Card) -> float:
    """Two-card heuristic: high card, kicker, pair, suited, connector and gap terms."""
    high = max(first.value, second.value)
    low = min(first.value, second.value)
    gap = high - low

    score = high / 16 + low / 30
    if gap == 0:
        score += 0.32 + high / 22
    if first.suit == second.suit:
        score += 0.08
    if gap == 1:
        score += 0.05
    if gap >= 4:
        score -= 0.07

    return clamp(score, 0.04, 0.98)


def postflop_strength(hole_cards: List[Card], board: List[Card]) -> float:
    score = evaluate_best_of_seven(hole_cards + board)
    return clamp(score.category * 0.13 + score.tiebreak[0] / 22, 0.05, 0.98)


def hand_strength(player: Player, board: List[Card]) -> float:
    if len(board) < 3:
        return preflop_strength(player.hole_cards[0], player.hole_cards[1])
    return postflop_strength(player.hole_cards, board)


def round_to_10(amount: int) -> int:
    return (amount + 5) // 10 * 10


def build_raise_target(player: Player, state: HandState, strength: float) -> int:
    """
    Raise target sized between a quarter and four fifths of the pot.

    Returns:
        Total street bet, clamped to the legal raise range
    """
    max_bet = player.max_bet
    min_target = max(state.min_raise_to, state.current_bet + state.last_raise_size)
    if min_target > max_bet:
        return max_bet

    pot_based = state.current_bet + max(state.big_blind, int(state.pot * (0.25 + strength * 0.55)))
    target = round_to_10(max(min_target, min(max_bet, pot_based)))
    return int(clamp(target, min_target, max_bet))


def decide(player: Player, state: HandState, rng: random.Random) -> Dict[str, Any]:
    """
    Choose FOLD, CALL (which checks when nothing is owed) or RAISE.

    Args:
        player: The computer seat to act
        state: Current hand state
        rng: Random source for the mixed strategy

    Returns:
        Action dict: {"action": "FOLD" | "CALL" | "RAISE", "amount": raise target or 0}
    """
    to_call = max(0, state.current_bet - player.street_bet)
    strength = hand_strength(player, state.board)
    can_raise = player.max_bet > state.current_bet

    if to_call == 0:
        raise_chance = clamp(strength * 0.5 + (0.2 - rng.random() * 0.2), 0.05, 0.7)
        if can_raise and rng.random() < raise_chance:
            return _raise(player, state, strength)
        return {"action": ActionType.CALL.value, "amount": 0}

    pot_odds = to_call / max(state.pot, 1)
    pressure = to_call / max(player.chips + to_call, 1)
    fold_threshold = clamp(0.62 - strength * 0.55 + pot_odds * 0.35 + pressure * 0.25, 0.08, 0.86)

    if rng.random() < fold_threshold and strength < 0.72:
        return {"action": ActionType.FOLD.value, "amount": 0}

    aggressive = (
        strength > 0.65
        and player.chips > to_call + state.big_blind
        and rng.random() < 0.32
    )
    if aggressive and can_raise:
        return _raise(player, state, strength)

    return {"action": ActionType.CALL.value, "amount": 0}


def _raise(player: Player, state: HandState, strength: float) -> Dict[str, Any]:
    target = build_raise_target(player, state, strength)
    if target <= state.current_bet:
        return {"action": ActionType.CALL.value, "amount": 0}
    return {"action": ActionType.RAISE.value, "amount": target}

"""
Hand Evaluation for Texas Hold'em.

Scores 5 to 7 cards into a HandScore: a category from 0 (high card) to 8
(straight flush) plus a tiebreak tuple compared element by element.

Category ranking (best to worst):
8. Straight Flush: 5 consecutive cards of same suit
7. Four of a Kind: quad value, kicker
6. Full House: trips value, pair value
5. Flush: all five values, descending
4. Straight: high card (A-2-3-4-5 counts as 5 high)
3. Three of a Kind: trips value, kickers descending
2. Two Pair: high pair, low pair, kicker
1. One Pair: pair value, kickers descending
0. High Card: all five values, descending
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Tuple, Sequence
from itertools import combinations
from enum import IntEnum
from collections import Counter

from holdemtable.core.card import Card


class HandCategory(IntEnum):
    """Hand categories; a higher value is a better hand."""
    HIGH_CARD = 0
    ONE_PAIR = 1
    TWO_PAIR = 2
    THREE_OF_A_KIND = 3
    STRAIGHT = 4
    FLUSH = 5
    FULL_HOUSE = 6
    FOUR_OF_A_KIND = 7
    STRAIGHT_FLUSH = 8


HAND_NAMES = {
    HandCategory.HIGH_CARD: "High Card",
    HandCategory.ONE_PAIR: "One Pair",
    HandCategory.TWO_PAIR: "Two Pair",
    HandCategory.THREE_OF_A_KIND: "Three of a Kind",
    HandCategory.STRAIGHT: "Straight",
    HandCategory.FLUSH: "Flush",
    HandCategory.FULL_HOUSE: "Full House",
    HandCategory.FOUR_OF_A_KIND: "Four of a Kind",
    HandCategory.STRAIGHT_FLUSH: "Straight Flush",
}

WHEEL = (14, 5, 4, 3, 2)


@dataclass(frozen=True)
class HandScore:
    """Evaluated strength of a 5-card hand."""
    category: int
    tiebreak: Tuple[int, ...]

    @property
    def name(self) -> str:
        return HAND_NAMES[HandCategory(self.category)]


def evaluate_five(cards: Sequence[Card]) -> HandScore:
    """
    Evaluate exactly 5 cards.

    Raises:
        ValueError: If not exactly 5 cards provided
    """
    if len(cards) != 5:
        raise ValueError(f"Need exactly 5 cards, got {len(cards)}")

    values = sorted((c.value for c in cards), reverse=True)
    is_flush = len({c.suit for c in cards}) == 1
    straight_high = _straight_high(values)

    # Most frequent first, higher value first among equal counts
    groups = sorted(Counter(values).items(), key=lambda item: (item[1], item[0]), reverse=True)
    counts = [count for _, count in groups]
    ranked = [value for value, _ in groups]

    if straight_high and is_flush:
        return HandScore(HandCategory.STRAIGHT_FLUSH, (straight_high,))

    if counts == [4, 1]:
        return HandScore(HandCategory.FOUR_OF_A_KIND, (ranked[0], ranked[1]))

    if counts == [3, 2]:
        return HandScore(HandCategory.FULL_HOUSE, (ranked[0], ranked[1]))

    if is_flush:
        return HandScore(HandCategory.FLUSH, tuple(values))

    if straight_high:
        return HandScore(HandCategory.STRAIGHT, (straight_high,))

    if counts == [3, 1, 1]:
        return HandScore(HandCategory.THREE_OF_A_KIND, tuple(ranked))

    if counts == [2, 2, 1]:
        return HandScore(HandCategory.TWO_PAIR, tuple(ranked))

    if counts == [2, 1, 1, 1]:
        return HandScore(HandCategory.ONE_PAIR, tuple(ranked))

    return HandScore(HandCategory.HIGH_CARD, tuple(values))


def _straight_high(values: List[int]) -> int:
    """High card of a straight, or 0 when the values do not form one."""
    unique = sorted(set(values), reverse=True)
    if len(unique) != 5:
        return 0

    if unique[0] - unique[4] == 4:
        return unique[0]

    if tuple(unique) == WHEEL:
        return 5  # 5-high straight

    return 0


def evaluate_best_of_seven(cards: Sequence[Card]) -> HandScore:
    """
    Best 5-card score among all subsets of 5 to 7 cards.

    Raises:
        ValueError: If not 5-7 cards provided
    """
    if len(cards) < 5 or len(cards) > 7:
        raise ValueError(f"Need 5-7 cards, got {len(cards)}")

    best = None
    for combo in combinations(cards, 5):
        score = evaluate_five(combo)
        if best is None or compare_hand_scores(score, best) > 0:
            best = score
    return best


def compare_hand_scores(a: HandScore, b: HandScore) -> int:
    """
    Compare two scores.

    Returns:
        1 if a is better, -1 if b is better, 0 on a tie (split)
    """
    if a.category != b.category:
        return 1 if a.category > b.category else -1

    length = max(len(a.tiebreak), len(b.tiebreak))
    for i in range(length):
        av = a.tiebreak[i] if i < len(a.tiebreak) else 0
        bv = b.tiebreak[i] if i < len(b.tiebreak) else 0
        if av != bv:
            return 1 if av > bv else -1

    return 0


def describe_hand(score: HandScore) -> str:
    """Human-readable description, e.g. 'Full House, Kings full of Sevens'."""
    category = HandCategory(score.category)
    top = score.tiebreak[0]

    if category == HandCategory.STRAIGHT_FLUSH:
        if top == 14:
            return "Royal Flush"
        return f"Straight Flush, {_value_name(top)} high"
    elif category == HandCategory.FOUR_OF_A_KIND:
        return f"Four of a Kind, {_plural(top)}"
    elif category == HandCategory.FULL_HOUSE:
        return f"Full House, {_plural(top)} full of {_plural(score.tiebreak[1])}"
    elif category == HandCategory.FLUSH:
        return f"Flush, {_value_name(top)} high"
    elif category == HandCategory.STRAIGHT:
        if top == 5:
            return "Straight, Five high (Wheel)"
        return f"Straight, {_value_name(top)} high"
    elif category == HandCategory.THREE_OF_A_KIND:
        return f"Three of a Kind, {_plural(top)}"
    elif category == HandCategory.TWO_PAIR:
        return f"Two Pair, {_plural(top)} and {_plural(score.tiebreak[1])}"
    elif category == HandCategory.ONE_PAIR:
        return f"Pair of {_plural(top)}"
    else:
        return f"High Card, {_value_name(top)}"


_VALUE_NAMES = {
    2: "Two", 3: "Three", 4: "Four", 5: "Five", 6: "Six", 7: "Seven",
    8: "Eight", 9: "Nine", 10: "Ten", 11: "Jack", 12: "Queen", 13: "King",
    14: "Ace",
}


def _value_name(value: int) -> str:
    return _VALUE_NAMES[value]


def _plural(value: int) -> str:
    return "Sixes" if value == 6 else f"{_VALUE_NAMES[value]}s"

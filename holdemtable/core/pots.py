"""
Side-pot distribution.

Contributions are split into layers at every distinct contribution level.
A layer is worth (level - previous level) from each seat that reached it and
can only be won by seats that reached it without folding. Folded chips stay
in the layers they were paid into and go to that layer's winners.
"""

from __future__ import annotations
from typing import List, Dict
from dataclasses import dataclass, field

from holdemtable.core.hand import compare_hand_scores
from holdemtable.core.player import Player


@dataclass
class PotLayer:
    """One pot (main pot or side pot)."""
    level: int
    amount: int
    contributors: List[int] = field(default_factory=list)  # seat indices
    eligible: List[int] = field(default_factory=list)  # seat indices


@dataclass
class PotAward:
    """Chips paid to one player from one layer."""
    player_id: int
    amount: int
    layer_index: int
    split: bool = False


def build_pot_layers(players: List[Player]) -> List[PotLayer]:
    """Layer the hand's contributions in ascending level order."""
    levels = sorted({p.hand_contribution for p in players if p.hand_contribution > 0})

    layers = []
    previous = 0
    for level in levels:
        contributors = [i for i, p in enumerate(players) if p.hand_contribution >= level]
        eligible = [i for i in contributors if players[i].is_contender]
        layers.append(PotLayer(
            level=level,
            amount=(level - previous) * len(contributors),
            contributors=contributors,
            eligible=eligible,
        ))
        previous = level

    return layers


def distribute_pots(players: List[Player], dealer_index: int) -> List[PotAward]:
    """
    Award every layer to its best eligible hand(s).

    Contenders must carry a hand_score unless they are alone in a layer.
    Tied winners share a layer by floor division; odd chips go one at a time
    to the tied winners in table order starting left of the dealer.

    Returns:
        Awards in layer order; their amounts sum to the pot exactly

    Raises:
        ValueError: If nobody is left to win the pot
    """
    count = len(players)

    def seat_order(index: int) -> int:
        return (index - dealer_index - 1) % count

    awards: List[PotAward] = []
    for layer_index, layer in enumerate(build_pot_layers(players)):
        eligible = layer.eligible or _deepest_contenders(players)
        if not eligible:
            raise ValueError("No contender left to award the pot")

        winners = sorted(_best_hands(players, eligible), key=seat_order)
        share, remainder = divmod(layer.amount, len(winners))

        for position, index in enumerate(winners):
            amount = share + (1 if position < remainder else 0)
            if amount > 0:
                awards.append(PotAward(
                    player_id=players[index].player_id,
                    amount=amount,
                    layer_index=layer_index,
                    split=len(winners) > 1,
                ))

    return awards


def total_by_player(awards: List[PotAward]) -> Dict[int, int]:
    """Sum awards per player id."""
    totals: Dict[int, int] = {}
    for award in awards:
        totals[award.player_id] = totals.get(award.player_id, 0) + award.amount
    return totals


def _best_hands(players: List[Player], eligible: List[int]) -> List[int]:
    if len(eligible) == 1:
        return list(eligible)

    best: List[int] = []
    for index in eligible:
        score = players[index].hand_score
        if score is None:
            raise ValueError(f"{players[index].name} has no hand score")
        if not best:
            best = [index]
            continue
        result = compare_hand_scores(score, players[best[0]].hand_score)
        if result > 0:
            best = [index]
        elif result == 0:
            best.append(index)
    return best


def _deepest_contenders(players: List[Player]) -> List[int]:
    """Contenders who put the most into the pot; they take a layer nobody else can claim."""
    contenders = [i for i, p in enumerate(players) if p.is_contender]
    if not contenders:
        return []
    deepest = max(players[i].hand_contribution for i in contenders)
    return [i for i in contenders if players[i].hand_contribution == deepest]

"""
Player seat for a Texas Hold'em table.

Manages seat state including:
- Chip count
- Hole cards
- Bet in the current street and total contribution to the hand
- Folded / all-in flags and the per-street acted flag
"""

from __future__ import annotations
from typing import List, Optional, Dict, Any
from dataclasses import dataclass, field

from holdemtable.core.card import Card
from holdemtable.core.hand import HandScore


@dataclass
class Player:
    """
    A seat at the table.

    Attributes:
        player_id: Stable seat identifier
        name: Display name
        chips: Chips behind (not yet committed)
        is_human: True for the single human seat
        hole_cards: The player's private cards (0 or 2)
        street_bet: Amount bet in the current street
        hand_contribution: Total put in the pot this hand (drives side pots)
        status: Free-text label for the presentation layer
        hand_score: Best-of-seven score, set only at showdown
    """
    player_id: int
    name: str
    chips: int
    is_human: bool = False
    hole_cards: List[Card] = field(default_factory=list)
    street_bet: int = 0
    hand_contribution: int = 0
    folded: bool = False
    all_in: bool = False
    acted_this_street: bool = False
    status: str = ""
    hand_score: Optional[HandScore] = None

    def reset_for_new_hand(self) -> None:
        """Clear cards and bets; a seat without chips sits the hand out."""
        self.hole_cards = []
        self.street_bet = 0
        self.hand_contribution = 0
        self.folded = self.chips <= 0
        self.all_in = False
        self.acted_this_street = False
        self.status = "Out" if self.folded else ""
        self.hand_score = None

    def reset_for_new_street(self) -> None:
        """Reset street bet and acted flag (flop, turn, river)."""
        self.street_bet = 0
        self.acted_this_street = False
        if not self.folded and not self.all_in:
            self.status = ""

    def pay(self, amount: int) -> int:
        """
        Move chips from the stack into the pot.

        Args:
            amount: Amount requested

        Returns:
            Actual amount paid (less than requested when the stack runs out)
        """
        paid = max(0, min(amount, self.chips))
        self.chips -= paid
        self.street_bet += paid
        self.hand_contribution += paid

        if self.chips == 0:
            self.all_in = True

        return paid

    @property
    def is_contender(self) -> bool:
        """Still holding cards in this hand."""
        return not self.folded

    @property
    def can_act(self) -> bool:
        """Eligible to take a betting action."""
        return not self.folded and not self.all_in and self.chips > 0

    @property
    def max_bet(self) -> int:
        """Largest street bet this player can reach (all-in)."""
        return self.street_bet + self.chips

    def to_dict(self, reveal_cards: bool = False) -> Dict[str, Any]:
        """
        Convert to dictionary for JSON serialization.

        Args:
            reveal_cards: If True, include hole card faces
        """
        result = {
            "id": self.player_id,
            "name": self.name,
            "is_human": self.is_human,
            "chips": self.chips,
            "bet": self.street_bet,
            "contribution": self.hand_contribution,
            "folded": self.folded,
            "all_in": self.all_in,
            "status": self.status,
            "card_count": len(self.hole_cards),
        }

        if reveal_cards and self.hole_cards:
            result["cards"] = [card.to_dict() for card in self.hole_cards]
        if reveal_cards and self.hand_score is not None:
            result["hand"] = self.hand_score.name

        return result

    def __repr__(self) -> str:
        return (
            f"Player({self.player_id}, {self.name}, chips={self.chips}, "
            f"bet={self.street_bet}, folded={self.folded}, all_in={self.all_in})"
        )

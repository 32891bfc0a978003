"""
Card and Deck classes for Texas Hold'em.

Cards carry a display rank ("2".."10", "J", "Q", "K", "A"), a suit and a
numeric value from 2 to 14 (Ace high) used by the hand evaluator.

A Deck is dealt from the top (the end of its list) and is never refilled:
every hand gets a fresh, reshuffled deck from shuffled_deck().
"""

from __future__ import annotations
import random
from dataclasses import dataclass
from typing import List, Optional
from enum import IntEnum

from holdemtable.core.errors import DeckExhausted


class Suit(IntEnum):
    """Card suits."""
    SPADES = 0    # ♠
    HEARTS = 1    # ♥
    DIAMONDS = 2  # ♦
    CLUBS = 3     # ♣


SUIT_SYMBOLS = {
    Suit.SPADES: "♠",
    Suit.HEARTS: "♥",
    Suit.DIAMONDS: "♦",
    Suit.CLUBS: "♣",
}

SUIT_CHARS = {
    Suit.SPADES: "s",
    Suit.HEARTS: "h",
    Suit.DIAMONDS: "d",
    Suit.CLUBS: "c",
}

RANKS = ["2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K", "A"]
RANK_VALUES = {rank: value for value, rank in enumerate(RANKS, start=2)}

# Reverse mappings
CHAR_TO_SUIT = {v: k for k, v in SUIT_CHARS.items()}
SYMBOL_TO_SUIT = {v: k for k, v in SUIT_SYMBOLS.items()}


@dataclass(frozen=True)
class Card:
    """
    An immutable playing card.

    Cards can be created from:
    - Rank string and Suit enum: Card("A", Suit.SPADES)
    - String notation: Card.from_string("As"), Card.from_string("10♥")
    """
    rank: str
    suit: Suit

    def __post_init__(self) -> None:
        rank = "10" if self.rank.upper() == "T" else self.rank.upper()
        if rank not in RANK_VALUES:
            raise ValueError(f"Invalid rank: {self.rank}")
        object.__setattr__(self, "rank", rank)
        object.__setattr__(self, "suit", Suit(self.suit))

    @property
    def value(self) -> int:
        """Numeric value, 2 through 14 (Ace)."""
        return RANK_VALUES[self.rank]

    @classmethod
    def from_string(cls, s: str) -> Card:
        """
        Create a card from string notation.

        Accepts formats:
        - "As", "Kh", "Td", "10c" (rank + suit char)
        - "A♠", "K♥", "10♦" (rank + suit symbol)
        """
        s = s.strip()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        rank_part, suit_part = s[:-1], s[-1]

        # Try suit char first, then symbol
        if suit_part.lower() in CHAR_TO_SUIT:
            suit = CHAR_TO_SUIT[suit_part.lower()]
        elif suit_part in SYMBOL_TO_SUIT:
            suit = SYMBOL_TO_SUIT[suit_part]
        else:
            raise ValueError(f"Invalid suit: {suit_part}")

        return cls(rank_part, suit)

    def __repr__(self) -> str:
        return f"Card({self.short_str})"

    def __str__(self) -> str:
        return f"{self.rank}{SUIT_SYMBOLS[self.suit]}"

    @property
    def short_str(self) -> str:
        """Short string like 'As', '10h'."""
        return f"{self.rank}{SUIT_CHARS[self.suit]}"

    @property
    def color(self) -> str:
        """Return 'red' for hearts/diamonds, 'black' for clubs/spades."""
        return "red" if self.suit in (Suit.HEARTS, Suit.DIAMONDS) else "black"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "rank": self.rank,
            "suit": SUIT_SYMBOLS[self.suit],
            "value": self.value,
            "text": str(self),
            "color": self.color,
        }


def full_deck() -> List[Card]:
    """The 52 cards in a fixed order (suit by suit, deuce to ace)."""
    return [Card(rank, suit) for suit in Suit for rank in RANKS]


class Deck:
    """
    A 52-card deck owned by a single hand.

    Usage:
        deck = shuffled_deck(rng)
        card = deck.deal_one()
        deck.burn_one()
    """

    def __init__(self, cards: List[Card]):
        self._cards: List[Card] = list(cards)
        self._burned: List[Card] = []

    def deal_one(self) -> Card:
        """
        Remove and return the top card.

        Raises:
            DeckExhausted: If no cards remain.
        """
        if not self._cards:
            raise DeckExhausted("Cannot deal from an empty deck")
        return self._cards.pop()

    def deal(self, n: int) -> List[Card]:
        """Deal n cards from the top of the deck."""
        return [self.deal_one() for _ in range(n)]

    def burn_one(self) -> Card:
        """Discard the top card."""
        card = self.deal_one()
        self._burned.append(card)
        return card

    @property
    def remaining(self) -> int:
        """Number of cards remaining in the deck."""
        return len(self._cards)

    @property
    def burned(self) -> List[Card]:
        """Cards burned so far this hand."""
        return self._burned.copy()

    def __len__(self) -> int:
        return len(self._cards)

    def __repr__(self) -> str:
        return f"Deck({self.remaining} cards remaining)"


def shuffled_deck(rng: Optional[random.Random] = None) -> Deck:
    """
    Build a fresh deck and shuffle it with Fisher-Yates.

    Args:
        rng: Random source; pass a seeded random.Random for reproducible deals

    Returns:
        A new Deck with all 52 cards
    """
    rng = rng or random.Random()
    cards = full_deck()
    for i in range(len(cards) - 1, 0, -1):
        j = rng.randrange(i + 1)
        cards[i], cards[j] = cards[j], cards[i]
    return Deck(cards)


def parse_cards(cards_str: str) -> List[Card]:
    """
    Parse space-separated cards, e.g. "As Kh 10d" or "A♠ K♥ 10♦".

    Returns:
        List of Card objects
    """
    return [Card.from_string(s) for s in cards_str.split()]

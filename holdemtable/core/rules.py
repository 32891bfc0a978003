"""
Texas Hold'em Table Rules and Constants.

Betting rules implemented by the engine:

1. Blinds are fixed per table (default 20/40). Heads-up, the dealer posts the
   small blind and acts first before the flop.

2. Minimum raise: a full raise must increase the bet by at least the size of
   the previous full raise, and never by less than the big blind.

3. Short all-in: a player whose whole stack is below the minimum raise target
   may still move all-in. It does not change the minimum raise increment.

4. Side pots: contributions are layered by level; only players who reached a
   level (and did not fold) can win that layer.
"""

from enum import Enum
from dataclasses import dataclass
from typing import Tuple


class Street(Enum):
    """Betting streets of a hand."""
    PRE_FLOP = "PRE_FLOP"
    FLOP = "FLOP"
    TURN = "TURN"
    RIVER = "RIVER"
    SHOWDOWN = "SHOWDOWN"


class TablePhase(Enum):
    """Lifecycle of a table, one hand at a time."""
    LOBBY = "LOBBY"
    DEALING = "DEALING"
    PRE_FLOP = "PRE_FLOP"
    FLOP = "FLOP"
    TURN = "TURN"
    RIVER = "RIVER"
    SHOWDOWN = "SHOWDOWN"
    PAYOUT = "PAYOUT"
    TABLE_OVER = "TABLE_OVER"


class ActionType(Enum):
    """Actions a seat can take."""
    FOLD = "FOLD"
    CHECK = "CHECK"
    CALL = "CALL"
    RAISE = "RAISE"


STREET_TO_PHASE = {
    Street.PRE_FLOP: TablePhase.PRE_FLOP,
    Street.FLOP: TablePhase.FLOP,
    Street.TURN: TablePhase.TURN,
    Street.RIVER: TablePhase.RIVER,
    Street.SHOWDOWN: TablePhase.SHOWDOWN,
}

# Next street and how many cards it reveals after the burn
NEXT_STREET = {
    Street.PRE_FLOP: (Street.FLOP, 3),
    Street.FLOP: (Street.TURN, 1),
    Street.TURN: (Street.RIVER, 1),
}


# Default table settings
DEFAULT_SMALL_BLIND = 20
DEFAULT_BIG_BLIND = 40
DEFAULT_HUMAN_CHIPS = 3000
DEFAULT_AI_COUNT = 5
AI_STACK_RANGE = (2200, 4000)
MIN_AI_COUNT = 1
MAX_AI_COUNT = 9

HOLE_CARDS = 2
TOTAL_COMMUNITY_CARDS = 5

AI_NAMES = [
    "Viper", "Orion", "Nova", "Blaze", "Kronos", "Echo", "Lyra", "Rogue", "Ghost",
]

HUMAN_NAME = "You"
HUMAN_SEAT_ID = 0


@dataclass
class TableConfig:
    """Per-table settings. Blinds never change during a table session."""
    small_blind: int = DEFAULT_SMALL_BLIND
    big_blind: int = DEFAULT_BIG_BLIND
    ai_count: int = DEFAULT_AI_COUNT
    human_chips: int = DEFAULT_HUMAN_CHIPS
    ai_stack_range: Tuple[int, int] = AI_STACK_RANGE

    def __post_init__(self) -> None:
        if self.small_blind <= 0 or self.big_blind <= 0:
            raise ValueError("Blinds must be positive")
        if self.small_blind > self.big_blind:
            raise ValueError("Small blind cannot exceed the big blind")
        if not MIN_AI_COUNT <= self.ai_count <= MAX_AI_COUNT:
            raise ValueError(f"AI opponents must be {MIN_AI_COUNT}-{MAX_AI_COUNT}")


def calculate_min_raise(current_bet: int, last_raise_size: int, big_blind: int) -> int:
    """
    Smallest legal total bet for a full raise.

    Args:
        current_bet: Current highest bet in the street
        last_raise_size: Size of the last full raise (the increase, not total)
        big_blind: Big blind amount

    Returns:
        Minimum total bet amount for a raise
    """
    return current_bet + max(last_raise_size, big_blind)


def get_blind_positions(funded_seats: int, dealer_index: int, next_funded) -> Tuple[int, int]:
    """
    Small and big blind seats for a hand.

    Heads-up the dealer posts the small blind; otherwise the small blind is
    the first funded seat after the dealer.

    Args:
        funded_seats: Number of seats holding chips this hand
        dealer_index: Seat index of the dealer button
        next_funded: Callable mapping a seat index to the next funded seat index

    Returns:
        Tuple of (small_blind_index, big_blind_index)
    """
    if funded_seats < 2:
        raise ValueError("Need at least 2 funded seats")

    if funded_seats == 2:
        sb_index = dealer_index
    else:
        sb_index = next_funded(dealer_index)
    return sb_index, next_funded(sb_index)

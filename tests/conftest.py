"""
Pytest configuration and shared fixtures for holdemtable tests.
"""

import random
from typing import List, Optional

import pytest

from holdemtable.agents.base import CallAgent
from holdemtable.core.betting import BettingRound, HandState
from holdemtable.core.card import Card, Deck, Suit, parse_cards
from holdemtable.core.game import HoldemTable
from holdemtable.core.player import Player
from holdemtable.core.rules import TableConfig


def call_agent_factory(player_id, name, rng):
    return CallAgent(player_id, name)


def make_table(
    human_chips: int = 1000,
    ai_stacks: Optional[List[int]] = None,
    seed: int = 7,
    agent_factory=call_agent_factory,
) -> HoldemTable:
    """Seated table whose computer seats check/call unless told otherwise."""
    ai_stacks = ai_stacks if ai_stacks is not None else [1000, 1000]
    table = HoldemTable(
        TableConfig(ai_count=len(ai_stacks)),
        rng=random.Random(seed),
        agent_factory=agent_factory,
    )
    table.seat_players(human_chips=human_chips, ai_stacks=ai_stacks)
    return table


def stacked_deck(cards_str: str) -> Deck:
    """Deck that deals the given cards in order."""
    return Deck(list(reversed(parse_cards(cards_str))))


@pytest.fixture
def heads_up_table():
    """Human (dealer, small blind) against one computer seat."""
    return make_table(ai_stacks=[1000])


@pytest.fixture
def three_handed_table():
    """Human on the button, seat 1 small blind, seat 2 big blind."""
    return make_table(ai_stacks=[1000, 1000])


@pytest.fixture
def three_players():
    return [
        Player(0, "You", 1000, is_human=True),
        Player(1, "Viper", 1000),
        Player(2, "Orion", 1000),
    ]


@pytest.fixture
def pre_flop_round(three_players):
    """Blinds posted (seat 1 SB 20, seat 2 BB 40), seat 0 to act."""
    state = HandState(dealer_index=0, small_blind_index=1, big_blind_index=2)
    betting = BettingRound(three_players, state)
    betting.post_blind(1, state.small_blind, "SB")
    betting.post_blind(2, state.big_blind, "BB")
    betting.open_pre_flop()
    return betting


@pytest.fixture
def sample_hand():
    """A sample 5-card hand (pair of aces)."""
    return [
        Card("A", Suit.SPADES),
        Card("A", Suit.HEARTS),
        Card("K", Suit.DIAMONDS),
        Card("Q", Suit.CLUBS),
        Card("J", Suit.SPADES),
    ]


@pytest.fixture
def royal_flush():
    return parse_cards("As Ks Qs Js 10s")


@pytest.fixture
def wheel_straight():
    """A wheel straight (A-2-3-4-5), mixed suits."""
    return parse_cards("As 2h 3d 4c 5s")


@pytest.fixture
def table_factory():
    """Build seated tables: table_factory(human_chips=..., ai_stacks=[...])."""
    return make_table


@pytest.fixture
def deck_of():
    """Build stacked decks: deck_of("2c As Kd ...") deals 2c first."""
    return stacked_deck

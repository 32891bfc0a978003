"""
Tests for side pot calculation and distribution.

Players are built directly with their hand contributions and showdown
scores, so each test isolates the layering and award rules.
"""

import pytest
from holdemtable.core.hand import HandScore
from holdemtable.core.player import Player
from holdemtable.core.pots import build_pot_layers, distribute_pots, total_by_player


STRONG = HandScore(6, (13, 7))   # Kings full of Sevens
MEDIUM = HandScore(2, (10, 4, 14))
WEAK = HandScore(0, (13, 9, 7, 4, 2))


def seat(player_id, contribution, score=None, folded=False):
    player = Player(player_id, f"P{player_id}", chips=0)
    player.hand_contribution = contribution
    player.hand_score = score
    player.folded = folded
    return player


class TestBuildLayers:

    def test_single_level_is_one_pot(self):
        layers = build_pot_layers([seat(0, 100, STRONG), seat(1, 100, WEAK)])
        assert len(layers) == 1
        assert layers[0].amount == 200
        assert layers[0].eligible == [0, 1]

    def test_layers_by_level(self):
        players = [seat(0, 60, STRONG), seat(1, 600, WEAK)]
        layers = build_pot_layers(players)
        assert [(l.level, l.amount) for l in layers] == [(60, 120), (600, 540)]
        assert layers[0].eligible == [0, 1]
        assert layers[1].eligible == [1]

    def test_folded_players_contribute_but_are_not_eligible(self):
        players = [seat(0, 60, STRONG), seat(1, 500, WEAK), seat(2, 200, folded=True)]
        layers = build_pot_layers(players)
        assert [(l.level, l.amount) for l in layers] == [(60, 180), (200, 280), (500, 300)]
        assert layers[1].contributors == [1, 2]
        assert layers[1].eligible == [1]

    def test_no_contributions(self):
        assert build_pot_layers([seat(0, 0), seat(1, 0)]) == []


class TestDistribution:

    def test_short_all_in_wins_only_main_pot(self):
        """A all-in for 60, B covers with 600: A takes 120, B gets 540 back."""
        players = [seat(0, 60, STRONG), seat(1, 600, WEAK)]
        totals = total_by_player(distribute_pots(players, dealer_index=0))
        assert totals == {0: 120, 1: 540}

    def test_bigger_stack_wins_everything(self):
        players = [seat(0, 60, WEAK), seat(1, 600, STRONG)]
        totals = total_by_player(distribute_pots(players, dealer_index=0))
        assert totals == {1: 660}

    def test_folded_chips_are_forfeited(self):
        players = [seat(0, 60, STRONG), seat(1, 500, MEDIUM), seat(2, 200, folded=True)]
        awards = distribute_pots(players, dealer_index=0)
        totals = total_by_player(awards)
        assert totals == {0: 180, 1: 580}
        assert 2 not in totals

    def test_three_way_side_pots(self):
        players = [seat(0, 100, WEAK), seat(1, 300, STRONG), seat(2, 500, MEDIUM)]
        totals = total_by_player(distribute_pots(players, dealer_index=0))
        # Main 300 and first side pot 400 to seat 1; seat 2 alone in the top layer
        assert totals == {1: 700, 2: 200}

    def test_chip_conservation(self):
        players = [
            seat(0, 37, MEDIUM),
            seat(1, 250, WEAK),
            seat(2, 250, STRONG, folded=False),
            seat(3, 90, folded=True),
            seat(4, 1000, WEAK),
        ]
        awards = distribute_pots(players, dealer_index=3)
        assert sum(a.amount for a in awards) == sum(p.hand_contribution for p in players)

    def test_players_only_win_layers_they_reached(self):
        players = [seat(0, 50, STRONG), seat(1, 400, WEAK), seat(2, 400, MEDIUM)]
        awards = distribute_pots(players, dealer_index=0)
        layers = build_pot_layers(players)
        for award in awards:
            assert award.player_id in [players[i].player_id for i in layers[award.layer_index].eligible]
        assert total_by_player(awards) == {0: 150, 2: 700}


class TestSplitPots:

    def test_even_split(self):
        players = [seat(0, 100, STRONG), seat(1, 100, STRONG)]
        awards = distribute_pots(players, dealer_index=0)
        assert total_by_player(awards) == {0: 100, 1: 100}
        assert all(a.split for a in awards)

    def test_odd_chip_goes_left_of_dealer_first(self):
        players = [
            seat(0, 25, folded=True),
            seat(1, 40, MEDIUM),
            seat(2, 40, MEDIUM),
        ]
        totals = total_by_player(distribute_pots(players, dealer_index=0))
        # Layer 75 splits 38/37 starting at seat 1; layer 30 splits 15/15
        assert totals == {1: 53, 2: 52}

    def test_odd_chip_order_follows_the_button(self):
        players = [
            seat(0, 25, folded=True),
            seat(1, 40, MEDIUM),
            seat(2, 40, MEDIUM),
        ]
        totals = total_by_player(distribute_pots(players, dealer_index=1))
        assert totals == {1: 52, 2: 53}


class TestEdgeCases:

    def test_single_contender_needs_no_score(self):
        players = [seat(0, 40, folded=True), seat(1, 60)]
        totals = total_by_player(distribute_pots(players, dealer_index=0))
        assert totals == {1: 100}

    def test_unclaimed_layer_goes_to_deepest_contenders(self):
        players = [seat(0, 500, folded=True), seat(1, 100, STRONG), seat(2, 100, WEAK)]
        totals = total_by_player(distribute_pots(players, dealer_index=0))
        assert totals == {1: 700}

    def test_missing_score_is_an_error(self):
        players = [seat(0, 100, STRONG), seat(1, 100)]
        with pytest.raises(ValueError):
            distribute_pots(players, dealer_index=0)

    def test_everyone_folded_is_an_error(self):
        players = [seat(0, 100, folded=True), seat(1, 100, folded=True)]
        with pytest.raises(ValueError):
            distribute_pots(players, dealer_index=0)

"""
Tests for edge cases and extreme situations at the table.

These tests cover:
- Everyone folding to a raise (before and after the flop)
- Blinds that put players all-in
- Computer seats that return illegal actions
- Hooks fired on the agents around each hand
"""

import pytest
from holdemtable.agents.base import BaseAgent
from holdemtable.core.rules import ActionType, Street, TablePhase


class FoldingAgent(BaseAgent):
    """Folds to any bet, checks otherwise."""

    def act(self, player, state, legal_actions):
        types = [a["type"] for a in legal_actions]
        if "CHECK" in types:
            return {"action": "CHECK"}
        return {"action": "FOLD"}


class RecklessAgent(BaseAgent):
    """Always asks for an impossible raise."""

    def act(self, player, state, legal_actions):
        return {"action": "RAISE", "amount": player.max_bet + 1000}


class RecordingAgent(BaseAgent):

    def __init__(self, player_id, name=None):
        super().__init__(player_id, name)
        self.started = []
        self.results = []

    def act(self, player, state, legal_actions):
        return {"action": "CALL"}

    def on_hand_start(self, hand_number):
        self.started.append(hand_number)

    def on_hand_end(self, result):
        self.results.append(result)


@pytest.fixture
def folding_table(table_factory):
    return table_factory(agent_factory=lambda seat, name, rng: FoldingAgent(seat, name))


class TestWinByFold:

    def test_everyone_folds_to_preflop_raise(self, folding_table):
        table = folding_table
        table.start_hand()

        table.take_action(0, ActionType.RAISE, 100)
        table.run_until_human()

        assert table.phase == TablePhase.PAYOUT
        assert table.human.chips == 1060
        assert table.human.status == "Collects 160"
        assert table.last_result.won_by_fold
        assert table.last_result.human_delta == 60
        assert table.state.board == []
        assert all(p.hand_score is None for p in table.players)

    def test_everyone_folds_on_flop(self, folding_table):
        table = folding_table
        table.start_hand()

        # Small blind folds, big blind checks its option
        table.take_action(0, ActionType.CALL)
        table.run_until_human()
        assert table.state.street == Street.FLOP
        assert table.players[1].folded

        table.take_action(0, ActionType.RAISE, 40)
        table.run_until_human()

        assert table.last_result.won_by_fold
        assert table.human.chips == 1060
        assert len(table.state.board) == 3
        assert all(p.hand_score is None for p in table.players)

    def test_folded_hands_stay_hidden(self, folding_table):
        table = folding_table
        table.start_hand()
        table.take_action(0, ActionType.RAISE, 100)
        table.run_until_human()

        snapshot = table.snapshot()
        assert "cards" in snapshot["players"][0]
        assert "cards" not in snapshot["players"][1]
        assert "cards" not in snapshot["players"][2]
        assert snapshot["result"]["won_by_fold"]
        assert all(p.hand_score is None for p in table.players)


class TestBlindAllIn:

    def test_blinds_cover_both_stacks(self, table_factory):
        table = table_factory(human_chips=20, ai_stacks=[40])

        assert table.start_hand()

        # Nobody can bet, the board runs out inside start_hand
        assert table.phase in (TablePhase.PAYOUT, TablePhase.TABLE_OVER)
        assert len(table.state.board) == 5
        assert any(e["action"] == "RUN_OUT" for e in table.hand_history)
        assert sum(p.chips for p in table.players) == 60

    def test_short_small_blind(self, table_factory):
        table = table_factory(human_chips=10, ai_stacks=[1000])
        table.start_hand()

        assert table.human.all_in
        assert table.human.status == "SB All-in 10"
        assert table.current_player is table.players[1]

        table.run_until_human()

        assert len(table.state.board) == 5
        assert sum(p.chips for p in table.players) == 1010
        # Uncalled part of the big blind comes back
        assert table.players[1].chips >= 990


class TestMisbehavingAgents:

    def test_illegal_choice_falls_back_to_call(self, table_factory):
        table = table_factory(agent_factory=lambda seat, name, rng: RecklessAgent(seat, name))
        table.start_hand()
        table.take_action(0, ActionType.CALL)

        result = table.play_ai_turn()

        assert result.success
        assert result.action_type == ActionType.CALL
        assert table.players[1].street_bet == 40


class TestAgentHooks:

    def test_hooks_called_each_hand(self, table_factory):
        agents = {}

        def factory(seat, name, rng):
            agents[seat] = RecordingAgent(seat, name)
            return agents[seat]

        table = table_factory(agent_factory=factory)
        table.start_hand()
        table.take_action(0, ActionType.FOLD)
        table.run_until_human()
        while table.is_hand_running():
            table.run_until_human()
        table.start_hand()

        for agent in agents.values():
            assert agent.started == [1, 2]
            assert len(agent.results) == 1
            assert agent.results[0].hand_number == 1

"""
Texas Hold'em Table Orchestrator - State Machine Implementation.

Runs one table of one human and several computer seats, hand after hand:

    LOBBY -> DEALING -> PRE_FLOP -> FLOP -> TURN -> RIVER -> SHOWDOWN
          -> PAYOUT -> DEALING | TABLE_OVER

Every external event (an action, an AI turn, a timeout) is a single call
into the table. Closed streets are advanced in a loop until somebody has
to act or the hand is over, so nothing recurses across turns or hands.
Timers and settlement live in the session layer, not here.
"""

from __future__ import annotations
from typing import List, Dict, Optional, Any, Callable, Union, TYPE_CHECKING
from dataclasses import dataclass, field
import logging
import random

from holdemtable.core.betting import BettingRound, HandState, ActionResult, RoundStatus
from holdemtable.core.card import Deck, shuffled_deck
from holdemtable.core.errors import DeckExhausted, IllegalActionError
from holdemtable.core.hand import evaluate_best_of_seven, describe_hand
from holdemtable.core.player import Player
from holdemtable.core.pots import PotAward, distribute_pots, total_by_player
from holdemtable.core.rules import (
    TablePhase, Street, ActionType, TableConfig,
    STREET_TO_PHASE, NEXT_STREET, get_blind_positions,
    AI_NAMES, HUMAN_NAME, HUMAN_SEAT_ID, HOLE_CARDS, TOTAL_COMMUNITY_CARDS,
    MIN_AI_COUNT, MAX_AI_COUNT,
)

if TYPE_CHECKING:
    from holdemtable.agents.base import BaseAgent


logger = logging.getLogger(__name__)

AgentFactory = Callable[[int, str, random.Random], "BaseAgent"]

BETTING_PHASES = (TablePhase.PRE_FLOP, TablePhase.FLOP, TablePhase.TURN, TablePhase.RIVER)


@dataclass
class HandResult:
    """Outcome of a finished hand, handed to the settlement layer."""
    hand_number: int
    won_by_fold: bool
    awards: List[PotAward] = field(default_factory=list)
    human_delta: int = 0
    message: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hand_number": self.hand_number,
            "won_by_fold": self.won_by_fold,
            "awards": [
                {"player_id": a.player_id, "amount": a.amount, "pot": a.layer_index, "split": a.split}
                for a in self.awards
            ],
            "human_delta": self.human_delta,
            "message": self.message,
        }


def _default_agent_factory(player_id: int, name: str, rng: random.Random) -> BaseAgent:
    # agents depend on core, so import on first use
    from holdemtable.agents.heuristic_agent import HeuristicAgent
    return HeuristicAgent(player_id, name, rng=rng)


class HoldemTable:
    """
    One table session's game state.

    Usage:
        table = HoldemTable(TableConfig(ai_count=3), rng=random.Random(7))
        table.seat_players(human_chips=3000)
        table.start_hand()

        while table.is_hand_running():
            table.run_until_human()
            if table.awaiting_human():
                table.take_action(HUMAN_SEAT_ID, ActionType.CALL)

        print(table.last_result.human_delta)
    """

    def __init__(
        self,
        config: Optional[TableConfig] = None,
        rng: Optional[random.Random] = None,
        agent_factory: Optional[AgentFactory] = None,
    ):
        """
        Initialize an empty table.

        Args:
            config: Blinds, opponent count and stack settings
            rng: Random source for shuffles, AI stacks and AI decisions
            agent_factory: Builds the agent for each computer seat
        """
        self.config = config or TableConfig()
        self.rng = rng or random.Random()
        self.agent_factory = agent_factory or _default_agent_factory

        self.players: List[Player] = []
        self.agents: Dict[int, BaseAgent] = {}

        self.state = HandState(
            small_blind=self.config.small_blind,
            big_blind=self.config.big_blind,
        )
        self.betting = BettingRound(self.players, self.state)
        self.deck: Optional[Deck] = None

        self.phase = TablePhase.LOBBY
        self.message = ""
        self.last_result: Optional[HandResult] = None

        # Per-hand event log
        self.hand_history: List[Dict[str, Any]] = []

        self._start_chips: Dict[int, int] = {}

    # ------------------------------------------------------------------
    # Queries

    @property
    def human(self) -> Player:
        return self.players[HUMAN_SEAT_ID]

    @property
    def current_player(self) -> Optional[Player]:
        """The player whose turn it is to act."""
        if not self.is_hand_running() or self.state.action_index is None:
            return None
        return self.players[self.state.action_index]

    @property
    def funded_seats(self) -> int:
        return sum(1 for p in self.players if p.chips > 0)

    def is_hand_running(self) -> bool:
        """Check if a betting street is in progress."""
        return self.phase in BETTING_PHASES

    def awaiting_human(self) -> bool:
        player = self.current_player
        return player is not None and player.is_human

    def get_player(self, player_id: int) -> Optional[Player]:
        for player in self.players:
            if player.player_id == player_id:
                return player
        return None

    # ------------------------------------------------------------------
    # Lobby

    def seat_players(
        self,
        human_chips: Optional[int] = None,
        ai_stacks: Optional[List[int]] = None,
    ) -> None:
        """
        Create the human seat and the computer seats.

        Args:
            human_chips: Human starting stack (defaults to config.human_chips)
            ai_stacks: Explicit AI stacks; random in config.ai_stack_range otherwise
        """
        if self.phase != TablePhase.LOBBY:
            raise RuntimeError("Players are already seated")

        if ai_stacks is None:
            low, high = self.config.ai_stack_range
            ai_stacks = [self.rng.randint(low // 10, high // 10) * 10 for _ in range(self.config.ai_count)]
        if not MIN_AI_COUNT <= len(ai_stacks) <= MAX_AI_COUNT:
            raise ValueError(f"AI opponents must be {MIN_AI_COUNT}-{MAX_AI_COUNT}")

        chips = self.config.human_chips if human_chips is None else human_chips
        self.players.append(Player(HUMAN_SEAT_ID, HUMAN_NAME, max(0, chips), is_human=True))

        names = self.rng.sample(AI_NAMES, len(ai_stacks))
        for seat, (name, stack) in enumerate(zip(names, ai_stacks), start=1):
            self.players.append(Player(seat, name, stack))
            self.agents[seat] = self.agent_factory(seat, name, self.rng)

        self.phase = TablePhase.DEALING
        logger.info(f"Seated {len(self.players)} players: {[p.name for p in self.players]}")

    # ------------------------------------------------------------------
    # Hand lifecycle

    def start_hand(self) -> bool:
        """
        Start a new hand.

        Returns:
            True if a hand was dealt, False if the table is over
        """
        if self.phase == TablePhase.LOBBY:
            raise RuntimeError("Seat players before dealing")
        if self.is_hand_running():
            raise RuntimeError("A hand is already in progress")
        if self.phase == TablePhase.TABLE_OVER:
            return False

        funded = self.funded_seats
        if funded < 2:
            self._end_table()
            return False

        state = self.state
        state.hand_number += 1
        logger.info(f"Starting hand #{state.hand_number}")

        self.phase = TablePhase.DEALING
        self.hand_history = []
        self.last_result = None
        self.message = ""

        for player in self.players:
            player.reset_for_new_hand()
        self._start_chips = {p.player_id: p.chips for p in self.players}

        state.street = Street.PRE_FLOP
        state.board = []
        state.pot = 0
        state.current_bet = 0
        state.action_index = None

        state.dealer_index = self._next_funded(state.dealer_index)
        state.small_blind_index, state.big_blind_index = get_blind_positions(
            funded, state.dealer_index, self._next_funded
        )

        self._log_action("HAND_START", {
            "hand_number": state.hand_number,
            "dealer": state.dealer_index,
            "small_blind": state.small_blind_index,
            "big_blind": state.big_blind_index,
        })

        self.deck = shuffled_deck(self.rng)
        try:
            self._post_blinds()
            self._deal_hole_cards()
        except DeckExhausted:
            logger.exception(f"Deck exhausted while dealing hand #{state.hand_number}")
            self._abort_hand()
            return True

        self.betting.open_pre_flop()
        self.phase = TablePhase.PRE_FLOP

        for agent in self.agents.values():
            agent.on_hand_start(state.hand_number)

        # Blinds alone can put everyone all-in
        self._advance()
        return True

    def _next_funded(self, after_index: int) -> int:
        """Next seat after after_index holding chips."""
        count = len(self.players)
        for step in range(1, count + 1):
            index = (after_index + step) % count
            if self.players[index].chips > 0:
                return index
        raise ValueError("No funded seats")

    def _post_blinds(self) -> None:
        state = self.state
        sb_paid = self.betting.post_blind(state.small_blind_index, state.small_blind, "SB")
        bb_paid = self.betting.post_blind(state.big_blind_index, state.big_blind, "BB")
        self._log_action("BLINDS", {
            "small_blind": {"player": self.players[state.small_blind_index].player_id, "amount": sb_paid},
            "big_blind": {"player": self.players[state.big_blind_index].player_id, "amount": bb_paid},
        })

    def _deal_hole_cards(self) -> None:
        """Two passes, one card each, starting left of the dealer."""
        count = len(self.players)
        order = [(self.state.dealer_index + step) % count for step in range(1, count + 1)]
        for _ in range(HOLE_CARDS):
            for index in order:
                player = self.players[index]
                if not player.folded:
                    player.hole_cards.append(self.deck.deal_one())

    # ------------------------------------------------------------------
    # Actions

    def take_action(
        self,
        player_id: int,
        action_type: Union[ActionType, str],
        amount: int = 0,
    ) -> ActionResult:
        """
        Process an action from the player whose turn it is.

        Args:
            player_id: ID of the acting player
            action_type: Type of action
            amount: Raise target (total street bet)

        Returns:
            ActionResult; success is False when the action was rejected
        """
        player = self.current_player
        if player is None:
            return ActionResult(False, "No action is pending")
        if player.player_id != player_id:
            return ActionResult(False, "Not your turn")

        if isinstance(action_type, str):
            try:
                action_type = ActionType(action_type.upper())
            except ValueError:
                return ActionResult(False, f"Unknown action: {action_type}")

        try:
            result = self.betting.apply(self.state.action_index, action_type, amount)
        except IllegalActionError as e:
            logger.warning(f"Rejected {action_type.value} from {player.name}: {e}")
            return ActionResult(False, str(e), action_type)

        self._log_action("ACTION", {
            "player": player.player_id,
            "type": result.action_type.value,
            "amount": result.amount,
            "street_bet": player.street_bet,
            "pot": self.state.pot,
        })
        self.message = result.message

        self._advance()
        return result

    def play_ai_turn(self) -> ActionResult:
        """Let the computer seat to act choose and apply its action."""
        player = self.current_player
        if player is None or player.is_human:
            return ActionResult(False, "No computer seat to act")

        legal = self.betting.legal_actions(player)
        decision = self.agents[player.player_id].act(player, self.state, legal)
        result = self.take_action(player.player_id, decision["action"], decision.get("amount", 0))

        if not result.success:
            fallback = self.betting.timeout_action(player)
            logger.warning(f"{player.name} chose an illegal action ({result.message}), using {fallback.value}")
            result = self.take_action(player.player_id, fallback)

        return result

    def timeout_action(self) -> ActionResult:
        """Resolve the human seat's expired turn: call when affordable, otherwise fold."""
        player = self.current_player
        if player is None or not player.is_human:
            return ActionResult(False, "No human turn to time out")

        action_type = self.betting.timeout_action(player)
        self._log_action("TIMEOUT", {"player": player.player_id, "type": action_type.value})
        logger.info(f"{player.name} timed out, auto {action_type.value}")
        return self.take_action(player.player_id, action_type)

    def run_until_human(self) -> List[ActionResult]:
        """Play computer turns until the human must act or the hand ends."""
        results = []
        while True:
            player = self.current_player
            if player is None or player.is_human:
                return results
            results.append(self.play_ai_turn())

    # ------------------------------------------------------------------
    # Street advancement

    def _advance(self) -> None:
        """Close finished streets until someone must act or the hand is over."""
        try:
            while True:
                status = self.betting.status()
                if status is RoundStatus.IN_PROGRESS:
                    return
                if status is RoundStatus.FOLD_OUT:
                    self._finish_by_fold()
                    return
                if status is RoundStatus.ALL_IN_LOCK:
                    self._run_out_board()
                    self._showdown()
                    return
                if self.state.street == Street.RIVER:
                    self._showdown()
                    return
                self._deal_next_street()
        except DeckExhausted:
            logger.exception(f"Deck exhausted during hand #{self.state.hand_number}")
            self._abort_hand()

    def _deal_street_cards(self) -> Street:
        street, count = NEXT_STREET[self.state.street]
        self.deck.burn_one()
        self.state.board.extend(self.deck.deal(count))
        return street

    def _deal_next_street(self) -> None:
        street = self._deal_street_cards()
        self.betting.start_street(street)
        self.phase = STREET_TO_PHASE[street]
        self._log_action("STREET", {
            "street": street.value,
            "board": [c.short_str for c in self.state.board],
        })

    def _run_out_board(self) -> None:
        """No more betting is possible: deal the rest of the board."""
        self.state.action_index = None
        while len(self.state.board) < TOTAL_COMMUNITY_CARDS:
            self.state.street = self._deal_street_cards()
        for player in self.players:
            player.reset_for_new_street()
        self.state.current_bet = 0
        self._log_action("RUN_OUT", {"board": [c.short_str for c in self.state.board]})

    def _showdown(self) -> None:
        state = self.state
        self.phase = TablePhase.SHOWDOWN
        state.street = Street.SHOWDOWN
        state.action_index = None

        contenders = self.betting.contenders()
        for player in contenders:
            player.hand_score = evaluate_best_of_seven(player.hole_cards + state.board)

        awards = distribute_pots(self.players, state.dealer_index)
        totals = total_by_player(awards)
        split_ids = {a.player_id for a in awards if a.split}

        for player in self.players:
            won = totals.get(player.player_id, 0)
            player.chips += won
            if not player.is_contender:
                continue
            if won and player.player_id in split_ids:
                player.status = f"Split {won}"
            elif won:
                player.status = f"Wins {won} · {player.hand_score.name}"
            else:
                player.status = f"Loses ({player.hand_score.name})"

        main_pot = [a for a in awards if a.layer_index == 0]
        winner = self.get_player(main_pot[0].player_id)
        if len(main_pot) > 1:
            names = ", ".join(self.get_player(a.player_id).name for a in main_pot)
            message = f"Split pot: {names} ({describe_hand(winner.hand_score)})"
        else:
            message = f"Winner: {winner.name} ({describe_hand(winner.hand_score)})"

        self._log_action("SHOWDOWN", {
            "hands": {p.player_id: describe_hand(p.hand_score) for p in contenders},
            "awards": [{"player": a.player_id, "amount": a.amount, "pot": a.layer_index} for a in awards],
        })
        self._finish_hand(won_by_fold=False, awards=awards, message=message)

    def _finish_by_fold(self) -> None:
        """Last contender standing takes the whole pot without a showdown."""
        state = self.state
        state.action_index = None
        winner = self.betting.contenders()[0]
        pot = state.pot

        winner.chips += pot
        winner.status = f"Collects {pot}"

        self._log_action("WIN_BY_FOLD", {"winner": winner.player_id, "amount": pot})
        self._finish_hand(
            won_by_fold=True,
            awards=[PotAward(player_id=winner.player_id, amount=pot, layer_index=0)],
            message=f"Pot of {pot} to {winner.name}, everyone else folded",
        )

    def _abort_hand(self) -> None:
        """Give every contribution back and close the hand."""
        for player in self.players:
            player.chips += player.hand_contribution
            player.street_bet = 0
            player.hand_contribution = 0
        self.state.pot = 0
        self.state.action_index = None

        self._log_action("HAND_ABORTED", {"reason": "deck exhausted"})
        self._finish_hand(won_by_fold=False, awards=[], message="Hand aborted, bets returned")

    def _finish_hand(self, won_by_fold: bool, awards: List[PotAward], message: str) -> None:
        self.phase = TablePhase.PAYOUT
        human = self.human
        delta = human.chips - self._start_chips.get(human.player_id, human.chips)

        self.last_result = HandResult(
            hand_number=self.state.hand_number,
            won_by_fold=won_by_fold,
            awards=awards,
            human_delta=delta,
            message=message,
        )
        self.message = message
        logger.info(f"Hand #{self.state.hand_number} over: {message} (human delta {delta:+d})")

        for agent in self.agents.values():
            agent.on_hand_end(self.last_result)

        if self.funded_seats < 2:
            self._end_table()

    def _end_table(self) -> None:
        self.phase = TablePhase.TABLE_OVER
        survivors = [p for p in self.players if p.chips > 0]
        winner = survivors[0] if survivors else self.players[0]
        verb = "win" if winner.is_human else "wins"
        self.message = f"Table over. {winner.name} {verb} the table."
        logger.info(f"Table over, remaining: {[p.name for p in survivors]}")

    # ------------------------------------------------------------------
    # Presentation

    def legal_actions(self, player_id: int) -> List[Dict[str, Any]]:
        player = self.current_player
        if player is None or player.player_id != player_id:
            return []
        # Checking is posted as a CALL of 0
        return [
            {"type": ActionType.CALL.value, "amount": 0}
            if action["type"] == ActionType.CHECK.value else action
            for action in self.betting.legal_actions(player)
        ]

    def snapshot(
        self,
        viewer_id: int = HUMAN_SEAT_ID,
        turn_deadline: Optional[float] = None,
    ) -> Dict[str, Any]:
        """
        Read-only view of the table.

        Args:
            viewer_id: Seat whose hole cards are revealed
            turn_deadline: Epoch seconds when the human's turn times out

        Returns:
            Table state dictionary
        """
        state = self.state
        showdown = self.last_result is not None and not self.last_result.won_by_fold
        active = self.current_player
        viewer = self.get_player(viewer_id)

        return {
            "hand_number": state.hand_number,
            "phase": self.phase.value,
            "street": state.street.value,
            "board": [c.to_dict() for c in state.board],
            "pot": state.pot,
            "current_bet": state.current_bet,
            "min_raise_to": state.min_raise_to,
            "small_blind": state.small_blind,
            "big_blind": state.big_blind,
            "dealer_index": state.dealer_index,
            "small_blind_index": state.small_blind_index,
            "big_blind_index": state.big_blind_index,
            "players": [
                p.to_dict(reveal_cards=p.player_id == viewer_id or (showdown and p.is_contender))
                for p in self.players
            ],
            "active_seat_id": active.player_id if active else None,
            "to_call": self.betting.to_call(viewer) if viewer and active is viewer else 0,
            "legal_actions": self.legal_actions(viewer_id),
            "turn_deadline": turn_deadline,
            "message": self.message,
            "result": self.last_result.to_dict() if self.last_result else None,
        }

    def _log_action(self, action: str, details: Dict[str, Any]) -> None:
        """Log an event to the hand history."""
        self.hand_history.append({
            "action": action,
            "phase": self.phase.value,
            **details
        })

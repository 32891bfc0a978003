"""
Betting Round Controller.

Drives one street of action over the table's seat list and the shared
HandState. Every chip that enters the pot goes through BettingRound.pay(),
which keeps pot == sum(hand_contribution) after every action.

Turn order cycles the seats in table order starting after an anchor seat
(the big blind before the flop, the dealer afterwards). A seat needs to act
while it has not acted this street or its street bet is below the current
bet. Rule violations raise IllegalActionError before any state is touched.
"""

from __future__ import annotations
from typing import List, Dict, Optional, Any
from dataclasses import dataclass, field
from enum import Enum, auto
import logging

from holdemtable.core.card import Card
from holdemtable.core.errors import IllegalActionError
from holdemtable.core.player import Player
from holdemtable.core.rules import (
    ActionType, Street, calculate_min_raise,
    DEFAULT_BIG_BLIND, DEFAULT_SMALL_BLIND,
)


logger = logging.getLogger(__name__)


@dataclass
class HandState:
    """Public betting state of the hand in progress."""
    hand_number: int = 0
    street: Street = Street.PRE_FLOP
    board: List[Card] = field(default_factory=list)
    pot: int = 0
    current_bet: int = 0
    min_raise_to: int = 0
    last_raise_size: int = 0
    dealer_index: int = -1
    small_blind_index: int = -1
    big_blind_index: int = -1
    action_index: Optional[int] = None
    small_blind: int = DEFAULT_SMALL_BLIND
    big_blind: int = DEFAULT_BIG_BLIND


@dataclass
class ActionResult:
    """Result of a player action."""
    success: bool
    message: str
    action_type: Optional[ActionType] = None
    amount: int = 0  # Chips moved into the pot


class RoundStatus(Enum):
    """Where the current street stands after an action."""
    IN_PROGRESS = auto()
    COMPLETE = auto()      # Nobody needs to act
    FOLD_OUT = auto()      # A single contender remains
    ALL_IN_LOCK = auto()   # Fewer than two contenders can still bet


class BettingRound:
    """
    Betting controller for a hand.

    Usage:
        betting = BettingRound(players, state)
        betting.post_blind(sb_index, 20, "SB")
        betting.post_blind(bb_index, 40, "BB")
        betting.open_pre_flop()
        result = betting.apply(state.action_index, ActionType.CALL)
        if betting.status() is RoundStatus.COMPLETE:
            betting.start_street(Street.FLOP)
    """

    def __init__(self, players: List[Player], state: HandState):
        self.players = players
        self.state = state

    # ------------------------------------------------------------------
    # Chip movement

    def pay(self, player: Player, amount: int) -> int:
        """Move chips from a player into the pot."""
        paid = player.pay(amount)
        self.state.pot += paid
        return paid

    def post_blind(self, index: int, amount: int, label: str) -> int:
        """Post a forced blind; a short stack posts what it has and is all-in."""
        player = self.players[index]
        paid = self.pay(player, amount)
        player.status = f"{label} All-in {paid}" if paid < amount else f"{label} {paid}"
        logger.debug(f"{player.name} posts {label} {paid}")
        return paid

    # ------------------------------------------------------------------
    # Street setup

    def open_pre_flop(self) -> None:
        """Set the opening bet after blinds and hand the action to the seat after the big blind."""
        state = self.state
        state.street = Street.PRE_FLOP
        state.current_bet = max((p.street_bet for p in self.players if p.is_contender), default=0)
        state.last_raise_size = state.big_blind
        state.min_raise_to = calculate_min_raise(state.current_bet, state.last_raise_size, state.big_blind)
        state.action_index = self.find_next_to_act(state.big_blind_index)

    def start_street(self, street: Street) -> None:
        """Reset street bets and hand the action to the first seat after the dealer."""
        state = self.state
        for player in self.players:
            player.reset_for_new_street()

        state.street = street
        state.current_bet = 0
        state.last_raise_size = state.big_blind
        state.min_raise_to = state.big_blind
        state.action_index = self.find_next_to_act(state.dealer_index)

    # ------------------------------------------------------------------
    # Turn sequencing

    def contenders(self) -> List[Player]:
        """Players still holding cards."""
        return [p for p in self.players if p.is_contender]

    def needs_to_act(self, player: Player) -> bool:
        return player.can_act and (
            not player.acted_this_street or player.street_bet < self.state.current_bet
        )

    def find_next_to_act(self, after_index: int) -> Optional[int]:
        """
        First seat after after_index that still needs to act.

        Returns:
            Seat index, or None when the street is closed
        """
        count = len(self.players)
        for step in range(1, count + 1):
            index = (after_index + step) % count
            if self.needs_to_act(self.players[index]):
                return index
        return None

    def status(self) -> RoundStatus:
        """Classify the street after the latest action."""
        contenders = self.contenders()
        if len(contenders) <= 1:
            return RoundStatus.FOLD_OUT
        if self.state.action_index is not None:
            return RoundStatus.IN_PROGRESS
        if sum(1 for p in contenders if p.can_act) < 2:
            return RoundStatus.ALL_IN_LOCK
        return RoundStatus.COMPLETE

    # ------------------------------------------------------------------
    # Actions

    def to_call(self, player: Player) -> int:
        """Chips the player owes to match the current bet."""
        return max(0, self.state.current_bet - player.street_bet)

    def legal_actions(self, player: Player) -> List[Dict[str, Any]]:
        """
        Legal actions for a player whose turn it is.

        Returns:
            List of action dicts with type and constraints
        """
        index = self.players.index(player)
        if index != self.state.action_index or not player.can_act:
            return []

        actions: List[Dict[str, Any]] = [{"type": ActionType.FOLD.value}]
        to_call = self.to_call(player)

        if to_call == 0:
            actions.append({"type": ActionType.CHECK.value})
        else:
            actions.append({
                "type": ActionType.CALL.value,
                "amount": min(to_call, player.chips),
            })

        if player.max_bet > self.state.current_bet:
            actions.append({
                "type": ActionType.RAISE.value,
                "min": min(self.state.min_raise_to, player.max_bet),
                "max": player.max_bet,
            })

        return actions

    def timeout_action(self, player: Player) -> ActionType:
        """Action taken for a seat that ran out of time: call when affordable, else fold."""
        if self.to_call(player) <= player.chips:
            return ActionType.CALL
        return ActionType.FOLD

    def apply(self, index: int, action_type: ActionType, amount: int = 0) -> ActionResult:
        """
        Apply an action for the seat at index.

        Args:
            index: Seat index of the acting player
            action_type: FOLD, CHECK, CALL or RAISE
            amount: Raise target (total street bet), ignored otherwise

        Returns:
            ActionResult describing what happened

        Raises:
            IllegalActionError: If the action breaks the betting rules
        """
        if index != self.state.action_index:
            raise IllegalActionError("Not your turn")

        player = self.players[index]
        if not player.can_act:
            raise IllegalActionError(f"{player.name} cannot act")

        if action_type == ActionType.FOLD:
            result = self._fold(player)
        elif action_type == ActionType.CHECK:
            result = self._check(player)
        elif action_type == ActionType.CALL:
            result = self._call(player)
        elif action_type == ActionType.RAISE:
            result = self._raise(player, amount)
        else:
            raise IllegalActionError(f"Unknown action: {action_type}")

        player.acted_this_street = True
        if len(self.contenders()) <= 1:
            self.state.action_index = None
        else:
            self.state.action_index = self.find_next_to_act(index)

        logger.debug(
            f"{player.name} {result.action_type.value} {result.amount} "
            f"(pot={self.state.pot}, bet={self.state.current_bet})"
        )
        return result

    def _fold(self, player: Player) -> ActionResult:
        player.folded = True
        player.status = "Fold"
        return ActionResult(True, f"{player.name} folds", ActionType.FOLD, 0)

    def _check(self, player: Player) -> ActionResult:
        to_call = self.to_call(player)
        if to_call > 0:
            raise IllegalActionError(f"Cannot check, must call {to_call}")
        player.status = "Check"
        return ActionResult(True, f"{player.name} checks", ActionType.CHECK, 0)

    def _call(self, player: Player) -> ActionResult:
        to_call = self.to_call(player)
        if to_call == 0:
            return self._check(player)

        paid = self.pay(player, to_call)
        if player.all_in:
            player.status = f"All-in {paid}"
            return ActionResult(True, f"{player.name} calls all-in for {paid}", ActionType.CALL, paid)
        player.status = f"Call {paid}"
        return ActionResult(True, f"{player.name} calls {paid}", ActionType.CALL, paid)

    def _raise(self, player: Player, target: int) -> ActionResult:
        state = self.state
        max_bet = player.max_bet

        if max_bet <= state.current_bet:
            raise IllegalActionError("Not enough chips to raise")
        if target > max_bet:
            raise IllegalActionError(f"Maximum raise is to {max_bet}")
        if target <= state.current_bet:
            raise IllegalActionError(f"Raise must exceed the current bet of {state.current_bet}")
        if target < state.min_raise_to and target != max_bet:
            raise IllegalActionError(f"Minimum raise is to {state.min_raise_to}")

        raise_size = target - state.current_bet
        paid = self.pay(player, target - player.street_bet)

        # A short all-in keeps the previous raise increment
        if raise_size >= state.last_raise_size:
            state.last_raise_size = max(raise_size, state.big_blind)
        state.current_bet = target
        state.min_raise_to = state.current_bet + state.last_raise_size

        self._reopen_action(player)

        if player.all_in:
            player.status = f"All-in {target}"
            return ActionResult(True, f"{player.name} raises all-in to {target}", ActionType.RAISE, paid)
        player.status = f"Raise {target}"
        return ActionResult(True, f"{player.name} raises to {target}", ActionType.RAISE, paid)

    def _reopen_action(self, raiser: Player) -> None:
        """Everyone else still able to bet gets another turn."""
        for player in self.players:
            if player is not raiser and player.can_act:
                player.acted_this_street = False

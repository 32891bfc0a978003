"""
Base Agent Interface for computer seats.

An agent is asked for an action whenever its seat is to act. It receives the
seat, the public hand state and the legal actions, and returns an action dict.

Usage:
    class MyAgent(BaseAgent):
        def act(self, player, state, legal_actions):
            return {"action": "CALL", "amount": 0}
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Any, Optional

from holdemtable.core.betting import HandState
from holdemtable.core.player import Player
from holdemtable.core.rules import ActionType


class BaseAgent(ABC):
    """
    Abstract base class for computer seats.

    Attributes:
        player_id: Seat this agent plays
        name: Human-readable name
    """

    def __init__(self, player_id: int, name: Optional[str] = None):
        self.player_id = player_id
        self.name = name or f"Agent-{player_id}"

    @abstractmethod
    def act(
        self,
        player: Player,
        state: HandState,
        legal_actions: List[Dict[str, Any]]
    ) -> Dict[str, Any]:
        """
        Choose an action for the seat to act.

        Args:
            player: The agent's seat (hole cards included)
            state: Public hand state (board, pot, current bet, raise limits)
            legal_actions: List of legal action dicts, each containing:
                - type: FOLD, CHECK, CALL or RAISE
                - amount: Chips owed (for CALL)
                - min/max: Valid raise targets (for RAISE)

        Returns:
            Action dictionary with:
                - action: Action type string
                - amount: Raise target for RAISE (optional, default 0)
        """

    def on_hand_start(self, hand_number: int) -> None:
        """Called when a new hand starts."""

    def on_hand_end(self, result: Any) -> None:
        """Called with the HandResult when a hand ends."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.player_id}, {self.name})"


class CallAgent(BaseAgent):
    """
    Deterministic baseline: checks or calls every time, never raises.

    Useful for tests and simulations where outcomes must depend only on the deal.
    """

    def act(
        self,
        player: Player,
        state: HandState,
        legal_actions: List[Dict[str, Any]]
    ) -> Dict[str, Any]:
        return {"action": ActionType.CALL.value, "amount": 0}

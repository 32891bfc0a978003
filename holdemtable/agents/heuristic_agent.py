"""
Heuristic Agent Implementation.

Plays the strength-based policy from holdemtable.agents.policy. The random
source is injected so a seeded table replays the same decisions.
"""

import random
import logging
from typing import Dict, List, Any, Optional

from holdemtable.agents.base import BaseAgent
from holdemtable.agents.policy import decide
from holdemtable.core.betting import HandState
from holdemtable.core.player import Player


logger = logging.getLogger(__name__)


class HeuristicAgent(BaseAgent):
    """
    Computer opponent driven by hand strength, pot odds and stack pressure.

    Attributes:
        rng: Random source for the mixed strategy
        hands_played: Hands dealt to this agent so far
    """

    def __init__(
        self,
        player_id: int,
        name: Optional[str] = None,
        rng: Optional[random.Random] = None,
    ):
        super().__init__(player_id, name or f"Heuristic-{player_id}")
        self.rng = rng or random.Random()
        self.hands_played = 0

    def act(
        self,
        player: Player,
        state: HandState,
        legal_actions: List[Dict[str, Any]]
    ) -> Dict[str, Any]:
        if not legal_actions:
            return {"action": "FOLD", "amount": 0}

        decision = decide(player, state, self.rng)
        logger.debug(f"{self.name} decides {decision['action']} {decision['amount']}")
        return decision

    def on_hand_start(self, hand_number: int) -> None:
        self.hands_played += 1

"""
holdemtable Agents - computer opponents

BaseAgent is the seat interface; HeuristicAgent plays the strength-based
policy and CallAgent is a deterministic check/call baseline.
"""

from holdemtable.agents.base import BaseAgent, CallAgent
from holdemtable.agents.heuristic_agent import HeuristicAgent

__all__ = ["BaseAgent", "CallAgent", "HeuristicAgent"]

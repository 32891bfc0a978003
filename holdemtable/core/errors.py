"""
Error taxonomy for the table engine.

Rule violations are handled inside the engine and surface as failed
ActionResults; only collaborator failures reach the user as notices.
"""


class HoldemError(Exception):
    """Base class for engine errors."""


class IllegalActionError(HoldemError):
    """An action that violates the betting rules. State is left unchanged."""


class DeckExhausted(HoldemError):
    """A card was requested from an empty deck."""


class SettlementError(HoldemError):
    """The external chip bank rejected or failed a balance update."""


class BalanceUnavailable(HoldemError):
    """The external chip bank could not report a balance."""

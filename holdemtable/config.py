"""Server configuration loaded from the environment."""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    """
    Process-wide settings.

    Attributes:
        bank_url: Base URL of the chip bank; None runs every table in local mode
        request_timeout: Seconds before a bank request is abandoned
        turn_seconds: Human turn length before the automatic action
        ai_delay_min: Shortest simulated thinking time for computer seats
        ai_delay_max: Longest simulated thinking time for computer seats
        next_hand_delay: Pause between the end of a hand and the next deal
        log_level: Root logging level name
    """
    bank_url: Optional[str] = None
    request_timeout: float = 9.0
    turn_seconds: float = 12.0
    ai_delay_min: float = 0.45
    ai_delay_max: float = 0.9
    next_hand_delay: float = 2.1
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.ai_delay_min < 0 or self.ai_delay_max < self.ai_delay_min:
            raise ValueError("AI delay range must satisfy 0 <= min <= max")
        if self.turn_seconds <= 0:
            raise ValueError("Turn length must be positive")

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from HOLDEM_* variables (a .env file is honoured)."""
        load_dotenv()
        return cls(
            bank_url=os.environ.get("HOLDEM_BANK_URL") or None,
            request_timeout=float(os.environ.get("HOLDEM_REQUEST_TIMEOUT", "9")),
            turn_seconds=float(os.environ.get("HOLDEM_TURN_SECONDS", "12")),
            ai_delay_min=float(os.environ.get("HOLDEM_AI_DELAY_MIN", "0.45")),
            ai_delay_max=float(os.environ.get("HOLDEM_AI_DELAY_MAX", "0.9")),
            next_hand_delay=float(os.environ.get("HOLDEM_NEXT_HAND_DELAY", "2.1")),
            log_level=os.environ.get("HOLDEM_LOG_LEVEL", "INFO").upper(),
        )

"""
Pydantic schemas for API request/response validation.
"""

from typing import List, Optional, Literal
from pydantic import BaseModel, Field, model_validator

from holdemtable.core.rules import (
    DEFAULT_AI_COUNT, DEFAULT_BIG_BLIND, DEFAULT_SMALL_BLIND, MIN_AI_COUNT, MAX_AI_COUNT,
)


# ============= Request Schemas =============

class CreateTableRequest(BaseModel):
    """Request to open a table for a user."""
    user_id: str = Field(..., min_length=1)
    ai_count: int = Field(ge=MIN_AI_COUNT, le=MAX_AI_COUNT, default=DEFAULT_AI_COUNT)
    small_blind: int = Field(gt=0, default=DEFAULT_SMALL_BLIND)
    big_blind: int = Field(gt=0, default=DEFAULT_BIG_BLIND)
    seed: Optional[int] = Field(default=None, description="Seed for reproducible deals")

    @model_validator(mode="after")
    def check_blinds(self) -> "CreateTableRequest":
        if self.small_blind > self.big_blind:
            raise ValueError("small_blind cannot exceed big_blind")
        return self


class ActionRequest(BaseModel):
    """Action for the human seat. CALL checks when nothing is owed."""
    action: Literal["FOLD", "CALL", "RAISE"]
    amount: int = Field(default=0, ge=0, description="Raise target (total street bet)")


# ============= Response Schemas =============

class CardSchema(BaseModel):
    """Card representation."""
    rank: str
    suit: str
    value: int
    text: str
    color: str


class PlayerSchema(BaseModel):
    """Seat as seen by the human player."""
    id: int
    name: str
    is_human: bool
    chips: int
    bet: int
    contribution: int
    folded: bool
    all_in: bool
    status: str
    card_count: int
    cards: Optional[List[CardSchema]] = None
    hand: Optional[str] = None


class AwardSchema(BaseModel):
    player_id: int
    amount: int
    pot: int
    split: bool


class HandResultSchema(BaseModel):
    hand_number: int
    won_by_fold: bool
    awards: List[AwardSchema]
    human_delta: int
    message: str


class TableStateSchema(BaseModel):
    """Read-only table snapshot."""
    table_id: str
    local_mode: bool
    notices: List[str]
    hand_number: int
    phase: str
    street: str
    board: List[CardSchema]
    pot: int
    current_bet: int
    min_raise_to: int
    small_blind: int
    big_blind: int
    dealer_index: int
    small_blind_index: int
    big_blind_index: int
    players: List[PlayerSchema]
    active_seat_id: Optional[int] = None
    to_call: int
    legal_actions: List[dict]
    turn_deadline: Optional[float] = None
    message: str
    result: Optional[HandResultSchema] = None


class ActionResultSchema(BaseModel):
    """Result of an accepted action."""
    success: bool
    message: str
    action: Optional[str] = None
    amount: int = 0
    state: TableStateSchema


class ErrorSchema(BaseModel):
    """Error response."""
    detail: str

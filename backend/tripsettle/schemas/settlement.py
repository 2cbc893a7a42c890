"""
Pydantic schemas for the settlement engine and settlement responses.
"""
from pydantic import BaseModel, Field
from typing import List, Dict, Any, Optional, Union, Literal, Annotated
from datetime import date as dt_date, datetime


class Participant(BaseModel):
    """Roster entry handed to the settlement engine."""
    id: int
    name: str

    model_config = {"from_attributes": True, "frozen": True}


class ParticipantRef(BaseModel):
    """Participant reference used inside a transfer."""
    id: int
    name: str


class EqualSplit(BaseModel):
    """Split evenly among participants; remainder to the first listed."""
    mode: Literal["equal"] = "equal"
    participant_ids: List[int]


class CustomSplit(BaseModel):
    """Split by explicit per-participant amounts (None counts as 0)."""
    mode: Literal["custom"] = "custom"
    custom_amounts: Dict[int, Optional[int]]


class DailySplit(BaseModel):
    """Split across dates first, then across each date's participants."""
    mode: Literal["daily"] = "daily"
    daily_participants: Dict[dt_date, List[int]]


ExpenseSplit = Annotated[Union[EqualSplit, CustomSplit, DailySplit], Field(discriminator="mode")]


class SettlementExpense(BaseModel):
    """Read-only expense snapshot consumed by the settlement engine."""
    id: int
    amount: int  # Minor currency units
    payer_id: int
    split: ExpenseSplit
    currency: str = "KRW"
    date: Optional[dt_date] = None

    model_config = {"frozen": True}


class UserTotal(BaseModel):
    """Amount each participant is responsible for."""
    id: int
    name: str
    regular_amount: int = 0
    shared_amount: int = 0  # Reserved for trip-wide shared costs, always 0 for now
    total_amount: int = 0


class SettlementBalance(BaseModel):
    """Paid vs owed per participant (positive = receives, negative = owes)."""
    participant_id: int
    participant_name: str
    total_paid: int = 0
    total_owed: int = 0
    net_balance: int = 0


class SettlementTransfer(BaseModel):
    """A single payment instruction between two participants."""
    from_participant: ParticipantRef = Field(alias="from")
    to_participant: ParticipantRef = Field(alias="to")
    amount: int = Field(gt=0)

    model_config = {"populate_by_name": True}


class ValidationResult(BaseModel):
    """Outcome of a settlement or transfer self-check."""
    is_valid: bool
    message: str
    total_balance: Optional[int] = None


class SettlementComputation(BaseModel):
    """Everything the engine produces for one run."""
    user_totals: List[UserTotal]
    balances: List[SettlementBalance]  # Pre-transfer snapshot
    transfers: List[SettlementTransfer]
    settlement_validation: ValidationResult
    transfer_validation: ValidationResult


class SettlementSummary(SettlementComputation):
    """Settlement of a trip, as returned by the API."""
    trip_id: int
    currency: str
    total_expenses: int
    participant_count: int
    expense_count: int
    skipped_expense_ids: List[int] = []


class SettlementResultResponse(BaseModel):
    """Schema for stored settlement result response."""
    id: int
    trip_id: int
    calculation_data: Dict[str, Any]
    summary: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}

"""
Pydantic schemas for Expense entity.
"""
from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from datetime import date as dt_date, datetime
from tripsettle.models.expense import PaymentType, SettlementType


class ExpenseBase(BaseModel):
    """Base expense schema."""
    date: dt_date
    end_date: Optional[dt_date] = None  # Last day of a multi-day item
    amount: int = Field(ge=0)  # Minor currency units
    item_name: str
    description: Optional[str] = None
    location: Optional[str] = None
    memo: Optional[str] = None
    category: Optional[str] = None
    category_id: Optional[int] = None  # Takes precedence over the free-text category
    payment_type: PaymentType = PaymentType.CARD
    settlement_type: SettlementType = SettlementType.EQUAL


class ExpenseCreate(ExpenseBase):
    """Schema for expense creation."""
    payer_id: int
    currency: Optional[str] = None  # Defaults to the trip currency
    participant_ids: List[int]  # Participants who share this expense
    custom_amounts: Optional[Dict[int, int]] = None  # participant_id -> amount, custom settlement only
    daily_participants: Optional[Dict[dt_date, List[int]]] = None  # date -> participants present that day


class ExpenseUpdate(BaseModel):
    """Schema for expense update."""
    date: Optional[dt_date] = None
    end_date: Optional[dt_date] = None
    amount: Optional[int] = Field(default=None, ge=0)
    item_name: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    memo: Optional[str] = None
    category: Optional[str] = None
    category_id: Optional[int] = None  # Takes precedence over the free-text category
    payment_type: Optional[PaymentType] = None
    settlement_type: Optional[SettlementType] = None
    payer_id: Optional[int] = None
    currency: Optional[str] = None
    participant_ids: Optional[List[int]] = None
    custom_amounts: Optional[Dict[int, int]] = None
    daily_participants: Optional[Dict[dt_date, List[int]]] = None


class ExpenseParticipantResponse(BaseModel):
    """Schema for expense participant response."""
    participant_id: int
    custom_amount: Optional[int] = None

    model_config = {"from_attributes": True}


class ExpenseDailyParticipantResponse(BaseModel):
    """Schema for a participant present on one day of an expense."""
    participant_id: int
    date: dt_date

    model_config = {"from_attributes": True}


class ExpenseResponse(ExpenseBase):
    """Schema for expense response."""
    id: int
    trip_id: int
    payer_id: int
    currency: str
    participants: List[ExpenseParticipantResponse] = []
    daily_participants: List[ExpenseDailyParticipantResponse] = []
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

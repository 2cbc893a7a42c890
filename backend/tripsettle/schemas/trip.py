"""
Pydantic schemas for Trip and Participant entities.
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date, datetime
from tripsettle.models.trip import TripStatus


class TripBase(BaseModel):
    """Base trip schema."""
    name: str
    start_date: date
    end_date: date
    description: Optional[str] = None
    currency: Optional[str] = None  # Defaults to DEFAULT_CURRENCY


class TripCreate(TripBase):
    """Schema for trip creation."""
    participant_ids: List[int] = []


class TripUpdate(BaseModel):
    """Schema for trip update."""
    name: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    description: Optional[str] = None
    currency: Optional[str] = None


class TripResponse(TripBase):
    """Schema for trip response."""
    id: int
    currency: str
    status: TripStatus
    is_settled: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ParticipantCreate(BaseModel):
    """Schema for participant creation."""
    name: str = Field(min_length=1, max_length=100)
    avatar_color: str = "#3B82F6"
    phone: Optional[str] = None


class ParticipantUpdate(BaseModel):
    """Schema for participant update."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    avatar_color: Optional[str] = None
    phone: Optional[str] = None


class ParticipantResponse(BaseModel):
    """Schema for participant response."""
    id: int
    name: str
    avatar_color: str
    phone: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class TripDetailResponse(TripResponse):
    """Schema for detailed trip response with participants."""
    participants: List[ParticipantResponse] = []


class TripParticipantAdd(BaseModel):
    """Schema for adding an existing participant to a trip."""
    participant_id: int

"""
Pydantic schemas for shared dashboards.
"""
from pydantic import BaseModel, Field, computed_field
from typing import Any, Dict, List, Optional
from datetime import date, datetime


class DashboardCreate(BaseModel):
    """Schema for shared dashboard creation; dates default to the trip's."""
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    password: Optional[str] = None


class DashboardResponse(BaseModel):
    """Schema for shared dashboard response."""
    id: int
    trip_id: int
    share_key: str
    title: str
    description: Optional[str] = None
    start_date: date
    end_date: date
    is_active: bool
    view_count: int
    created_at: datetime
    password_hash: Optional[str] = Field(default=None, exclude=True)

    @computed_field
    @property
    def has_password(self) -> bool:
        return self.password_hash is not None

    model_config = {"from_attributes": True}


class SnapshotResponse(BaseModel):
    """Schema for a frozen per-participant settlement figure."""
    participant_id: Optional[int] = None
    participant_name: str
    regular_amount: int
    shared_amount: int
    total_amount: int
    expense_details: Dict[str, Any]
    created_at: datetime

    model_config = {"from_attributes": True}


class SharedDashboardView(BaseModel):
    """Schema for a shared dashboard together with its snapshots."""
    dashboard: DashboardResponse
    snapshots: List[SnapshotResponse] = []

"""
Pydantic schemas for expense categories.
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class CategoryCreate(BaseModel):
    """Schema for category creation."""
    name: str = Field(min_length=1, max_length=50)
    icon: str = Field(min_length=1, max_length=20)
    color: str = "#6B7280"
    is_default: bool = False


class CategoryUpdate(BaseModel):
    """Schema for category update."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    icon: Optional[str] = Field(default=None, min_length=1, max_length=20)
    color: Optional[str] = None


class CategoryResponse(BaseModel):
    """Schema for category response."""
    id: int
    name: str
    icon: str
    color: str
    is_default: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

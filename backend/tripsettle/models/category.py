"""
Category model for labelling expenses.
"""
from sqlalchemy import Column, String, Boolean
from sqlalchemy.orm import relationship
from tripsettle.db.base import BaseModel


class Category(BaseModel):
    """Expense category; default categories are read-only."""
    __tablename__ = "categories"

    name = Column(String(50), unique=True, nullable=False)
    icon = Column(String(20), nullable=False)
    color = Column(String(7), nullable=False, default="#6B7280")  # Hex color for UI chips
    is_default = Column(Boolean, default=False, nullable=False)

    # Relationships
    expenses = relationship("Expense", back_populates="category_ref")

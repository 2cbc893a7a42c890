"""
Participant model for people sharing trip expenses.
"""
from sqlalchemy import Column, String
from sqlalchemy.orm import relationship
from tripsettle.db.base import BaseModel


class Participant(BaseModel):
    """Participant model; one person can join many trips."""
    __tablename__ = "participants"

    name = Column(String(100), nullable=False)
    avatar_color = Column(String(7), nullable=False, default="#3B82F6")  # Hex color for UI avatars
    phone = Column(String(30), nullable=True)

    # Relationships
    trips = relationship("TripParticipant", back_populates="participant", cascade="all, delete-orphan")
    expenses_paid = relationship("Expense", foreign_keys="Expense.payer_id", back_populates="payer")

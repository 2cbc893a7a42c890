"""
Trip model for group travel management.
"""
from sqlalchemy import Column, String, Date, Boolean, Text, Enum as SQLEnum, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship
from tripsettle.db.base import BaseModel
import enum


class TripStatus(str, enum.Enum):
    """Trip status enumeration."""
    UPCOMING = "Upcoming"
    ONGOING = "Ongoing"
    FINISHED = "Finished"
    SETTLED = "Settled"


class Trip(BaseModel):
    """Trip model representing a group travel event."""
    __tablename__ = "trips"

    name = Column(String(200), nullable=False)
    start_date = Column(Date, nullable=False, index=True)
    end_date = Column(Date, nullable=False, index=True)
    description = Column(Text, nullable=True)
    status = Column(SQLEnum(TripStatus), default=TripStatus.UPCOMING, nullable=False)
    is_settled = Column(Boolean, default=False, nullable=False)
    currency = Column(String(3), nullable=False, default="KRW")  # All trip amounts share this currency

    # Relationships
    participants = relationship("TripParticipant", back_populates="trip", cascade="all, delete-orphan")
    expenses = relationship("Expense", back_populates="trip", cascade="all, delete-orphan")
    settlement_results = relationship("SettlementResult", back_populates="trip", cascade="all, delete-orphan")
    dashboards = relationship("SharedDashboard", back_populates="trip", cascade="all, delete-orphan")


class TripParticipant(BaseModel):
    """Junction table for Trip and Participant many-to-many relationship."""
    __tablename__ = "trip_participants"
    __table_args__ = (UniqueConstraint("trip_id", "participant_id", name="uq_trip_participant"),)

    trip_id = Column(Integer, ForeignKey("trips.id"), nullable=False, index=True)
    participant_id = Column(Integer, ForeignKey("participants.id"), nullable=False, index=True)

    # Relationships
    trip = relationship("Trip", back_populates="participants")
    participant = relationship("Participant", back_populates="trips")

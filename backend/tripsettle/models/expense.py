"""
Expense model for tracking spending.
"""
from sqlalchemy import Column, String, Date, ForeignKey, Integer, Text, Enum as SQLEnum
from sqlalchemy.orm import relationship
from tripsettle.db.base import BaseModel
import enum


class SettlementType(str, enum.Enum):
    """How an expense is divided among its participants."""
    EQUAL = "equal"
    CUSTOM = "custom"


class PaymentType(str, enum.Enum):
    """Payment method used by the payer."""
    CASH = "cash"
    CARD = "card"


class Expense(BaseModel):
    """Expense model representing a single spending event."""
    __tablename__ = "expenses"

    trip_id = Column(Integer, ForeignKey("trips.id"), nullable=False, index=True)
    payer_id = Column(Integer, ForeignKey("participants.id"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    end_date = Column(Date, nullable=True)  # Last day for multi-day items (lodging, transport)
    amount = Column(Integer, nullable=False)  # Minor currency units
    currency = Column(String(3), nullable=False, default="KRW")
    item_name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    location = Column(String(200), nullable=True)
    memo = Column(Text, nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True, index=True)
    category = Column(String(50), nullable=True)  # Category name, kept when the category row is deleted
    payment_type = Column(SQLEnum(PaymentType), default=PaymentType.CARD, nullable=False)
    settlement_type = Column(SQLEnum(SettlementType), default=SettlementType.EQUAL, nullable=False)

    # Relationships
    trip = relationship("Trip", back_populates="expenses")
    payer = relationship("Participant", foreign_keys=[payer_id], back_populates="expenses_paid")
    category_ref = relationship("Category", back_populates="expenses")
    participants = relationship(
        "ExpenseParticipant",
        back_populates="expense",
        cascade="all, delete-orphan",
        order_by="ExpenseParticipant.id",
    )
    daily_participants = relationship(
        "ExpenseDailyParticipant",
        back_populates="expense",
        cascade="all, delete-orphan",
        order_by="ExpenseDailyParticipant.id",
    )


class ExpenseParticipant(BaseModel):
    """Junction table for Expense and Participant many-to-many relationship."""
    __tablename__ = "expense_participants"

    expense_id = Column(Integer, ForeignKey("expenses.id"), nullable=False, index=True)
    participant_id = Column(Integer, ForeignKey("participants.id"), nullable=False, index=True)
    custom_amount = Column(Integer, nullable=True)  # Only used by custom settlement

    # Relationships
    expense = relationship("Expense", back_populates="participants")
    participant = relationship("Participant")


class ExpenseDailyParticipant(BaseModel):
    """Participant present on one day of a multi-day expense."""
    __tablename__ = "expense_daily_participants"

    expense_id = Column(Integer, ForeignKey("expenses.id"), nullable=False, index=True)
    participant_id = Column(Integer, ForeignKey("participants.id"), nullable=False, index=True)
    date = Column(Date, nullable=False)

    # Relationships
    expense = relationship("Expense", back_populates="daily_participants")
    participant = relationship("Participant")

"""Models package - Import all models for SQLAlchemy registration."""
from tripsettle.models.participant import Participant
from tripsettle.models.category import Category
from tripsettle.models.trip import Trip, TripParticipant, TripStatus
from tripsettle.models.expense import (
    Expense, ExpenseParticipant, ExpenseDailyParticipant, SettlementType, PaymentType
)
from tripsettle.models.settlement import SettlementResult
from tripsettle.models.dashboard import SharedDashboard, DashboardSnapshot

__all__ = [
    "Participant",
    "Category",
    "Trip",
    "TripParticipant",
    "TripStatus",
    "Expense",
    "ExpenseParticipant",
    "ExpenseDailyParticipant",
    "SettlementType",
    "PaymentType",
    "SettlementResult",
    "SharedDashboard",
    "DashboardSnapshot",
]

"""
Shared dashboard models for read-only settlement views.
"""
from sqlalchemy import Column, String, Date, Boolean, Text, ForeignKey, Integer, JSON
from sqlalchemy.orm import relationship
from tripsettle.db.base import BaseModel


class SharedDashboard(BaseModel):
    """Public, optionally password-protected view of a trip settlement."""
    __tablename__ = "shared_dashboards"

    trip_id = Column(Integer, ForeignKey("trips.id"), nullable=False, index=True)
    share_key = Column(String(64), unique=True, nullable=False, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    password_hash = Column(String(255), nullable=True)
    view_count = Column(Integer, default=0, nullable=False)

    # Relationships
    trip = relationship("Trip", back_populates="dashboards")
    snapshots = relationship(
        "DashboardSnapshot",
        back_populates="dashboard",
        cascade="all, delete-orphan",
        order_by="DashboardSnapshot.id",
    )


class DashboardSnapshot(BaseModel):
    """Per-participant settlement figures frozen when the dashboard was created."""
    __tablename__ = "dashboard_snapshots"

    dashboard_id = Column(Integer, ForeignKey("shared_dashboards.id"), nullable=False, index=True)
    participant_id = Column(Integer, ForeignKey("participants.id"), nullable=True)
    participant_name = Column(String(100), nullable=False)
    regular_amount = Column(Integer, nullable=False, default=0)
    shared_amount = Column(Integer, nullable=False, default=0)
    total_amount = Column(Integer, nullable=False, default=0)
    expense_details = Column(JSON, nullable=False)

    # Relationships
    dashboard = relationship("SharedDashboard", back_populates="snapshots")

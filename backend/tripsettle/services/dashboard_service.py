"""
Shared dashboard service: read-only, optionally password-protected
settlement views backed by immutable snapshots.
"""
import logging
from datetime import date
from typing import List
from sqlalchemy.orm import Session
from tripsettle.core.exceptions import DashboardAccessError, NotFoundError
from tripsettle.core.security import generate_share_key, get_password_hash, verify_password
from tripsettle.core.utils import serialize_date
from tripsettle.models.dashboard import SharedDashboard, DashboardSnapshot
from tripsettle.schemas.settlement import SettlementSummary
from tripsettle.services.settlement_service import build_trip_settlement
from tripsettle.services.trip_service import get_trip

logger = logging.getLogger(__name__)


def _new_share_key(db: Session) -> str:
    """Generate a share key not used by any dashboard yet."""
    while True:
        share_key = generate_share_key()
        exists = db.query(SharedDashboard).filter(
            SharedDashboard.share_key == share_key
        ).first()
        if not exists:
            return share_key


def build_snapshots(summary: SettlementSummary, start_date: date, end_date: date) -> List[DashboardSnapshot]:
    """One snapshot per participant with their balance and transfers."""
    balances = {b.participant_id: b for b in summary.balances}
    snapshots = []

    for total in summary.user_totals:
        balance = balances[total.id]
        expense_details = {
            "currency": summary.currency,
            "period": {"start": serialize_date(start_date), "end": serialize_date(end_date)},
            "total_paid": balance.total_paid,
            "total_owed": balance.total_owed,
            "net_balance": balance.net_balance,
            "transfers_out": [
                {"to_id": t.to_participant.id, "to_name": t.to_participant.name, "amount": t.amount}
                for t in summary.transfers if t.from_participant.id == total.id
            ],
            "transfers_in": [
                {"from_id": t.from_participant.id, "from_name": t.from_participant.name, "amount": t.amount}
                for t in summary.transfers if t.to_participant.id == total.id
            ],
        }
        snapshots.append(DashboardSnapshot(
            participant_id=total.id,
            participant_name=total.name,
            regular_amount=total.regular_amount,
            shared_amount=total.shared_amount,
            total_amount=total.total_amount,
            expense_details=expense_details
        ))

    return snapshots


def create_shared_dashboard(
    trip_id: int,
    title: str,
    db: Session,
    description: str = None,
    start_date: date = None,
    end_date: date = None,
    password: str = None,
) -> SharedDashboard:
    """Create a dashboard and freeze the settlement of its date window."""
    trip = get_trip(trip_id, db)
    start_date = start_date or trip.start_date
    end_date = end_date or trip.end_date
    if end_date < start_date:
        raise ValueError("Dashboard end date is before its start date")

    summary = build_trip_settlement(trip_id, db, start_date=start_date, end_date=end_date)

    dashboard = SharedDashboard(
        trip_id=trip_id,
        share_key=_new_share_key(db),
        title=title,
        description=description,
        start_date=start_date,
        end_date=end_date,
        password_hash=get_password_hash(password) if password else None
    )
    db.add(dashboard)
    db.flush()

    for snapshot in build_snapshots(summary, start_date, end_date):
        snapshot.dashboard_id = dashboard.id
        db.add(snapshot)

    db.commit()
    db.refresh(dashboard)
    logger.info(f"Created shared dashboard {dashboard.id} for trip {trip_id}")

    return dashboard


def get_shared_dashboard(share_key: str, db: Session, password: str = None) -> SharedDashboard:
    """
    Open a shared dashboard by its key and count the view.

    Raises:
        NotFoundError: unknown or deactivated dashboard
        DashboardAccessError: password missing or wrong
    """
    dashboard = db.query(SharedDashboard).filter(
        SharedDashboard.share_key == share_key,
        SharedDashboard.is_active.is_(True)
    ).first()
    if not dashboard:
        raise NotFoundError("Shared dashboard", share_key)

    if dashboard.password_hash:
        if not password:
            raise DashboardAccessError("Password required")
        if not verify_password(password, dashboard.password_hash):
            logger.warning(f"Wrong password for shared dashboard {dashboard.id}")
            raise DashboardAccessError("Incorrect password")

    dashboard.view_count += 1
    db.commit()
    db.refresh(dashboard)

    return dashboard


def list_trip_dashboards(trip_id: int, db: Session) -> List[SharedDashboard]:
    """Dashboards created for a trip, newest first."""
    get_trip(trip_id, db)
    return db.query(SharedDashboard).filter(
        SharedDashboard.trip_id == trip_id
    ).order_by(SharedDashboard.id.desc()).all()


def deactivate_dashboard(share_key: str, db: Session) -> SharedDashboard:
    """Stop serving a shared dashboard; its snapshots are kept."""
    dashboard = db.query(SharedDashboard).filter(
        SharedDashboard.share_key == share_key
    ).first()
    if not dashboard:
        raise NotFoundError("Shared dashboard", share_key)

    dashboard.is_active = False
    db.commit()
    db.refresh(dashboard)
    return dashboard

"""
Trip service: trips and their participant rosters.
"""
import logging
from datetime import date
from typing import List
from sqlalchemy.orm import Session
from tripsettle.core.config import settings
from tripsettle.core.exceptions import NotFoundError
from tripsettle.models.expense import Expense, ExpenseDailyParticipant, ExpenseParticipant
from tripsettle.models.participant import Participant
from tripsettle.models.trip import Trip, TripParticipant, TripStatus
from tripsettle.schemas import settlement as settlement_schemas

logger = logging.getLogger(__name__)

TRIP_FIELDS = ("name", "start_date", "end_date", "description", "currency")
PARTICIPANT_FIELDS = ("name", "avatar_color", "phone")


def status_for_dates(start_date: date, end_date: date, today: date = None) -> TripStatus:
    """Determine trip status from its dates."""
    today = today or date.today()
    if start_date > today:
        return TripStatus.UPCOMING
    if end_date < today:
        return TripStatus.FINISHED
    return TripStatus.ONGOING


def create_trip(
    name: str,
    start_date: date,
    end_date: date,
    db: Session,
    description: str = None,
    currency: str = None,
    participant_ids: List[int] = None,
) -> Trip:
    """Create a trip and optionally register its participants."""
    if end_date < start_date:
        raise ValueError("Trip end date is before its start date")

    trip = Trip(
        name=name,
        start_date=start_date,
        end_date=end_date,
        description=description,
        status=status_for_dates(start_date, end_date),
        currency=(currency or settings.DEFAULT_CURRENCY).upper(),
    )
    db.add(trip)
    db.flush()

    for participant_id in participant_ids or []:
        get_participant(participant_id, db)
        db.add(TripParticipant(trip_id=trip.id, participant_id=participant_id))

    db.commit()
    db.refresh(trip)
    logger.info(f"Created trip {trip.id} '{trip.name}'")
    return trip


def get_trip(trip_id: int, db: Session) -> Trip:
    """Get a trip or raise NotFoundError."""
    trip = db.query(Trip).filter(Trip.id == trip_id).first()
    if not trip:
        raise NotFoundError("Trip", trip_id)
    return trip


def list_trips(db: Session) -> List[Trip]:
    """List trips, most recent start first."""
    return db.query(Trip).order_by(Trip.start_date.desc(), Trip.id.desc()).all()


def update_trip(trip_id: int, db: Session, updates: dict = None) -> Trip:
    """Update trip fields; status follows the new dates unless already settled."""
    trip = get_trip(trip_id, db)

    for field, value in (updates or {}).items():
        if field in TRIP_FIELDS and value is not None:
            setattr(trip, field, value)
    if trip.end_date < trip.start_date:
        db.rollback()
        raise ValueError("Trip end date is before its start date")

    trip.currency = trip.currency.upper()
    if trip.status != TripStatus.SETTLED:
        trip.status = status_for_dates(trip.start_date, trip.end_date)

    db.commit()
    db.refresh(trip)
    return trip


def delete_trip(trip_id: int, db: Session):
    """Delete a trip with its expenses, settlements and dashboards."""
    trip = get_trip(trip_id, db)
    db.delete(trip)
    db.commit()
    logger.info(f"Deleted trip {trip_id}")


def create_participant(name: str, db: Session, avatar_color: str = None, phone: str = None) -> Participant:
    """Register a new participant."""
    participant = Participant(name=name, phone=phone)
    if avatar_color:
        participant.avatar_color = avatar_color
    db.add(participant)
    db.commit()
    db.refresh(participant)
    return participant


def get_participant(participant_id: int, db: Session) -> Participant:
    """Get a participant or raise NotFoundError."""
    participant = db.query(Participant).filter(Participant.id == participant_id).first()
    if not participant:
        raise NotFoundError("Participant", participant_id)
    return participant


def list_participants(db: Session) -> List[Participant]:
    """List all participants by name."""
    return db.query(Participant).order_by(Participant.name, Participant.id).all()


def _expense_ids_involving(participant_id: int, db: Session, trip_id: int = None) -> List[int]:
    """Ids of expenses the participant paid for or shares in."""
    paid = db.query(Expense.id).filter(Expense.payer_id == participant_id)
    shared = db.query(ExpenseParticipant.expense_id).join(Expense).filter(
        ExpenseParticipant.participant_id == participant_id
    )
    daily = db.query(ExpenseDailyParticipant.expense_id).join(Expense).filter(
        ExpenseDailyParticipant.participant_id == participant_id
    )
    if trip_id is not None:
        paid = paid.filter(Expense.trip_id == trip_id)
        shared = shared.filter(Expense.trip_id == trip_id)
        daily = daily.filter(Expense.trip_id == trip_id)
    return sorted({row[0] for query in (paid, shared, daily) for row in query.all()})


def update_participant(participant_id: int, db: Session, updates: dict = None) -> Participant:
    """Update a participant's name, avatar color or phone."""
    participant = get_participant(participant_id, db)
    for field, value in (updates or {}).items():
        if field in PARTICIPANT_FIELDS and value is not None:
            setattr(participant, field, value)
    db.commit()
    db.refresh(participant)
    return participant


def delete_participant(participant_id: int, db: Session):
    """Delete a participant who has no expenses; trip memberships go with them."""
    participant = get_participant(participant_id, db)
    expense_ids = _expense_ids_involving(participant_id, db)
    if expense_ids:
        raise ValueError(
            f"Participant {participant_id} still appears in expenses {expense_ids}"
        )
    db.delete(participant)
    db.commit()
    logger.info(f"Deleted participant {participant_id}")


def add_trip_participant(trip_id: int, participant_id: int, db: Session) -> Participant:
    """Add a participant to a trip; adding twice is a no-op."""
    get_trip(trip_id, db)
    participant = get_participant(participant_id, db)

    existing = db.query(TripParticipant).filter(
        TripParticipant.trip_id == trip_id,
        TripParticipant.participant_id == participant_id
    ).first()
    if not existing:
        db.add(TripParticipant(trip_id=trip_id, participant_id=participant_id))
        db.commit()
    return participant


def remove_trip_participant(trip_id: int, participant_id: int, db: Session):
    """Remove a participant from a trip they have no expenses in."""
    get_trip(trip_id, db)
    membership = db.query(TripParticipant).filter(
        TripParticipant.trip_id == trip_id,
        TripParticipant.participant_id == participant_id
    ).first()
    if not membership:
        raise NotFoundError("Trip participant", participant_id)

    expense_ids = _expense_ids_involving(participant_id, db, trip_id=trip_id)
    if expense_ids:
        raise ValueError(
            f"Participant {participant_id} still appears in expenses {expense_ids} of trip {trip_id}"
        )
    db.delete(membership)
    db.commit()
    logger.info(f"Removed participant {participant_id} from trip {trip_id}")


def get_trip_participants(trip_id: int, db: Session) -> List[Participant]:
    """Participants of a trip, in the order they joined."""
    return db.query(Participant).join(TripParticipant).filter(
        TripParticipant.trip_id == trip_id
    ).order_by(TripParticipant.id).all()


def get_trip_roster(trip_id: int, db: Session) -> List[settlement_schemas.Participant]:
    """Trip participants as settlement roster entries."""
    return [
        settlement_schemas.Participant(id=p.id, name=p.name)
        for p in get_trip_participants(trip_id, db)
    ]

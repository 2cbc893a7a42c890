"""
Expense service for expense-related business logic.
"""
import logging
from datetime import date
from typing import Dict, List, Optional
from sqlalchemy.orm import Session, selectinload
from tripsettle.core.config import settings
from tripsettle.core.exceptions import NotFoundError
from tripsettle.core.utils import get_date_range
from tripsettle.models.expense import (
    Expense, ExpenseParticipant, ExpenseDailyParticipant, PaymentType, SettlementType
)
from tripsettle.models.trip import TripParticipant
from tripsettle.schemas.settlement import CustomSplit, DailySplit, EqualSplit, SettlementExpense
from tripsettle.services.category_service import get_category
from tripsettle.services.trip_service import get_trip

logger = logging.getLogger(__name__)

EXPENSE_FIELDS = (
    "date", "end_date", "amount", "item_name", "description", "location", "memo",
    "category", "category_id", "payment_type", "settlement_type", "payer_id", "currency",
)


def is_multi_day_category(category: Optional[str]) -> bool:
    """Whether expenses in this category are prorated per day."""
    if not category:
        return False
    return category.strip().lower() in {c.lower() for c in settings.MULTI_DAY_CATEGORIES}


def default_daily_participants(
    start_date: date,
    end_date: date,
    participant_ids: List[int],
) -> Dict[date, List[int]]:
    """Every day of the range attended by all selected participants."""
    return {day: list(participant_ids) for day in get_date_range(start_date, end_date)}


def _check_trip_members(trip_id: int, participant_ids, db: Session):
    """Raise ValueError if any id is not a participant of the trip."""
    member_ids = {
        row.participant_id for row in db.query(TripParticipant).filter(
            TripParticipant.trip_id == trip_id
        ).all()
    }
    outsiders = sorted(set(participant_ids) - member_ids)
    if outsiders:
        raise ValueError(f"Participants {outsiders} are not part of trip {trip_id}")


def _replace_participants(
    expense: Expense,
    participant_ids: List[int],
    custom_amounts: Optional[Dict[int, int]],
    db: Session,
):
    db.query(ExpenseParticipant).filter(
        ExpenseParticipant.expense_id == expense.id
    ).delete()
    for participant_id in dict.fromkeys(participant_ids):
        custom_amount = None
        if expense.settlement_type == SettlementType.CUSTOM and custom_amounts:
            custom_amount = custom_amounts.get(participant_id)
        db.add(ExpenseParticipant(
            expense_id=expense.id,
            participant_id=participant_id,
            custom_amount=custom_amount
        ))


def _replace_daily_participants(
    expense: Expense,
    daily_participants: Dict[date, List[int]],
    db: Session,
):
    db.query(ExpenseDailyParticipant).filter(
        ExpenseDailyParticipant.expense_id == expense.id
    ).delete()
    for day in sorted(daily_participants):
        for participant_id in dict.fromkeys(daily_participants[day]):
            db.add(ExpenseDailyParticipant(
                expense_id=expense.id,
                participant_id=participant_id,
                date=day
            ))


def _resolve_daily_participants(
    category: Optional[str],
    start_date: date,
    end_date: Optional[date],
    participant_ids: List[int],
    daily_participants: Optional[Dict[date, List[int]]],
) -> Dict[date, List[int]]:
    if daily_participants:
        return daily_participants
    if is_multi_day_category(category) and end_date and end_date > start_date:
        return default_daily_participants(start_date, end_date, participant_ids)
    return {}


def create_expense_with_participants(
    trip_id: int,
    payer_id: int,
    expense_date: date,
    amount: int,
    item_name: str,
    participant_ids: List[int],
    db: Session,
    settlement_type: SettlementType = SettlementType.EQUAL,
    custom_amounts: Dict[int, int] = None,
    daily_participants: Dict[date, List[int]] = None,
    end_date: date = None,
    currency: str = None,
    description: str = None,
    location: str = None,
    memo: str = None,
    category: str = None,
    category_id: int = None,
    payment_type: PaymentType = PaymentType.CARD,
) -> Expense:
    """Create an expense with its participants and per-day attendance."""
    trip = get_trip(trip_id, db)
    if category_id is not None:
        category = get_category(category_id, db).name
    daily = _resolve_daily_participants(
        category, expense_date, end_date, participant_ids, daily_participants
    )
    _check_trip_members(
        trip_id,
        [payer_id, *participant_ids, *(pid for ids in daily.values() for pid in ids)],
        db,
    )

    expense = Expense(
        trip_id=trip_id,
        payer_id=payer_id,
        date=expense_date,
        end_date=end_date,
        amount=amount,
        currency=(currency or trip.currency).upper(),
        item_name=item_name,
        description=description,
        location=location,
        memo=memo,
        category=category,
        category_id=category_id,
        payment_type=payment_type,
        settlement_type=settlement_type
    )
    db.add(expense)
    db.flush()

    _replace_participants(expense, participant_ids, custom_amounts, db)
    if daily:
        _replace_daily_participants(expense, daily, db)

    db.commit()
    db.refresh(expense)
    logger.info(f"Created expense {expense.id} for trip {trip_id}: {amount} {expense.currency}")

    return expense


def get_expense(expense_id: int, db: Session) -> Expense:
    """Get an expense or raise NotFoundError."""
    expense = db.query(Expense).filter(Expense.id == expense_id).first()
    if not expense:
        raise NotFoundError("Expense", expense_id)
    return expense


def update_expense(
    expense_id: int,
    db: Session,
    updates: dict = None,
    participant_ids: List[int] = None,
    custom_amounts: Dict[int, int] = None,
    daily_participants: Dict[date, List[int]] = None,
) -> Expense:
    """
    Update expense fields; participants and daily participants are replaced
    only when given.
    """
    expense = get_expense(expense_id, db)
    updates = dict(updates or {})
    if updates.get("category_id") is not None:
        updates["category"] = get_category(updates["category_id"], db).name

    for field, value in updates.items():
        if field in EXPENSE_FIELDS and value is not None:
            setattr(expense, field, value)
    if expense.currency:
        expense.currency = expense.currency.upper()

    check_ids = [expense.payer_id]
    if participant_ids is not None:
        check_ids.extend(participant_ids)
    if daily_participants is not None:
        check_ids.extend(pid for ids in daily_participants.values() for pid in ids)
    _check_trip_members(expense.trip_id, check_ids, db)

    if participant_ids is not None:
        _replace_participants(expense, participant_ids, custom_amounts, db)
    elif custom_amounts is not None:
        for ep in expense.participants:
            ep.custom_amount = custom_amounts.get(ep.participant_id)
    if daily_participants is not None:
        _replace_daily_participants(expense, daily_participants, db)

    db.commit()
    db.refresh(expense)
    return expense


def delete_expense(expense_id: int, db: Session):
    """Delete an expense together with its participants."""
    expense = get_expense(expense_id, db)
    db.delete(expense)
    db.commit()
    logger.info(f"Deleted expense {expense_id}")


def list_trip_expenses(
    trip_id: int,
    db: Session,
    expense_date: date = None,
    start_date: date = None,
    end_date: date = None,
) -> List[Expense]:
    """Expenses of a trip, optionally filtered by a single date or a date window."""
    query = db.query(Expense).options(
        selectinload(Expense.participants),
        selectinload(Expense.daily_participants)
    ).filter(Expense.trip_id == trip_id)

    if expense_date is not None:
        query = query.filter(Expense.date == expense_date)
    if start_date is not None:
        query = query.filter(Expense.date >= start_date)
    if end_date is not None:
        query = query.filter(Expense.date <= end_date)

    return query.order_by(Expense.date, Expense.id).all()


def to_settlement_expense(expense: Expense) -> SettlementExpense:
    """
    Convert a stored expense into the settlement engine's input.
    Per-day attendance wins over the settlement type when present.
    """
    if expense.daily_participants:
        by_date: Dict[date, List[int]] = {}
        for row in expense.daily_participants:
            by_date.setdefault(row.date, []).append(row.participant_id)
        split = DailySplit(daily_participants=by_date)
    elif expense.settlement_type == SettlementType.CUSTOM:
        split = CustomSplit(custom_amounts={
            ep.participant_id: ep.custom_amount for ep in expense.participants
        })
    else:
        split = EqualSplit(participant_ids=[ep.participant_id for ep in expense.participants])

    return SettlementExpense(
        id=expense.id,
        amount=expense.amount,
        payer_id=expense.payer_id,
        split=split,
        currency=expense.currency,
        date=expense.date,
    )

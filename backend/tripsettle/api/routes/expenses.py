"""
Expense management routes.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date
from tripsettle.db.session import get_db
from tripsettle.schemas.expense import ExpenseCreate, ExpenseResponse, ExpenseUpdate
from tripsettle.services import expense_service
from tripsettle.services.trip_service import get_trip

router = APIRouter(prefix="/expenses", tags=["expenses"])

PARTICIPANT_FIELDS = {"participant_ids", "custom_amounts", "daily_participants"}


@router.post("/{trip_id}", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
async def create_expense(
    trip_id: int,
    expense_data: ExpenseCreate,
    db: Session = Depends(get_db)
):
    """Create an expense for a trip."""
    return expense_service.create_expense_with_participants(
        trip_id=trip_id,
        payer_id=expense_data.payer_id,
        expense_date=expense_data.date,
        end_date=expense_data.end_date,
        amount=expense_data.amount,
        item_name=expense_data.item_name,
        participant_ids=expense_data.participant_ids,
        settlement_type=expense_data.settlement_type,
        custom_amounts=expense_data.custom_amounts,
        daily_participants=expense_data.daily_participants,
        currency=expense_data.currency,
        description=expense_data.description,
        location=expense_data.location,
        memo=expense_data.memo,
        category=expense_data.category,
        category_id=expense_data.category_id,
        payment_type=expense_data.payment_type,
        db=db
    )


@router.get("/{trip_id}", response_model=List[ExpenseResponse])
async def list_expenses(
    trip_id: int,
    date: Optional[date] = None,
    db: Session = Depends(get_db)
):
    """List expenses of a trip, optionally for a single date."""
    get_trip(trip_id, db)
    return expense_service.list_trip_expenses(trip_id, db, expense_date=date)


@router.get("/item/{expense_id}", response_model=ExpenseResponse)
async def get_expense(
    expense_id: int,
    db: Session = Depends(get_db)
):
    """Get a single expense with its participants."""
    return expense_service.get_expense(expense_id, db)


@router.put("/{expense_id}", response_model=ExpenseResponse)
async def update_expense(
    expense_id: int,
    expense_data: ExpenseUpdate,
    db: Session = Depends(get_db)
):
    """Update an expense; participant lists are replaced only when sent."""
    return expense_service.update_expense(
        expense_id,
        db,
        updates=expense_data.model_dump(exclude_unset=True, exclude=PARTICIPANT_FIELDS),
        participant_ids=expense_data.participant_ids,
        custom_amounts=expense_data.custom_amounts,
        daily_participants=expense_data.daily_participants
    )


@router.delete("/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_expense(
    expense_id: int,
    db: Session = Depends(get_db)
):
    """Delete an expense."""
    expense_service.delete_expense(expense_id, db)

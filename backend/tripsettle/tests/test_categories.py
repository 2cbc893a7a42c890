"""
Tests for expense categories.
"""
from datetime import date

import pytest

from tripsettle.core.exceptions import NotFoundError
from tripsettle.schemas.settlement import DailySplit
from tripsettle.services import category_service, expense_service

D1, D3 = date(2024, 5, 1), date(2024, 5, 3)


def test_list_orders_defaults_first(db):
    category_service.create_category("Snacks", "🍪", db)
    category_service.create_category("Food", "🍽️", db, is_default=True)
    category_service.create_category("Activities", "🎢", db)

    names = [c.name for c in category_service.list_categories(db)]

    assert names == ["Food", "Activities", "Snacks"]


def test_duplicate_name_rejected(db):
    category_service.create_category("Food", "🍽️", db)

    with pytest.raises(ValueError, match="already exists"):
        category_service.create_category(" Food ", "🍔", db)


def test_default_category_is_read_only(db):
    food = category_service.create_category("Food", "🍽️", db, is_default=True)

    with pytest.raises(ValueError, match="cannot be changed"):
        category_service.update_category(food.id, db, updates={"name": "Meals"})
    with pytest.raises(ValueError, match="cannot be deleted"):
        category_service.delete_category(food.id, db)


def test_expense_takes_category_name(db, trip_with_people):
    trip, alice, bob, carol = trip_with_people
    lodging = category_service.create_category("Lodging", "🏨", db)

    expense = expense_service.create_expense_with_participants(
        trip_id=trip.id,
        payer_id=alice.id,
        expense_date=D1,
        end_date=D3,
        amount=90000,
        item_name="Hotel",
        participant_ids=[alice.id, bob.id, carol.id],
        category_id=lodging.id,
        db=db
    )

    assert expense.category_id == lodging.id
    assert expense.category == "Lodging"
    # Named like a multi-day category, so attendance defaults to every day
    assert isinstance(expense_service.to_settlement_expense(expense).split, DailySplit)


def test_rename_and_delete_keep_expense_label(db, trip_with_people):
    trip, alice, bob, carol = trip_with_people
    snacks = category_service.create_category("Snacks", "🍪", db)
    expense = expense_service.create_expense_with_participants(
        trip_id=trip.id,
        payer_id=bob.id,
        expense_date=D1,
        amount=3000,
        item_name="Tangerines",
        participant_ids=[alice.id, bob.id],
        category_id=snacks.id,
        db=db
    )

    category_service.update_category(snacks.id, db, updates={"name": "Treats", "color": "#F59E0B"})
    db.refresh(expense)
    assert expense.category == "Treats"

    category_service.delete_category(snacks.id, db)
    db.refresh(expense)
    assert expense.category_id is None
    assert expense.category == "Treats"
    with pytest.raises(NotFoundError):
        category_service.get_category(snacks.id, db)


def test_unknown_category_rejected(db, trip_with_people):
    trip, alice, bob, carol = trip_with_people

    with pytest.raises(NotFoundError):
        expense_service.create_expense_with_participants(
            trip_id=trip.id,
            payer_id=alice.id,
            expense_date=D1,
            amount=1000,
            item_name="Water",
            participant_ids=[alice.id],
            category_id=42,
            db=db
        )

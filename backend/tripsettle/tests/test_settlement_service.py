"""
Tests for trip-level settlement orchestration.
"""
import logging
from datetime import date

import pytest

from tripsettle.core.exceptions import NotFoundError, SettlementValidationError
from tripsettle.models.expense import SettlementType
from tripsettle.models.settlement import SettlementResult
from tripsettle.models.trip import TripStatus
from tripsettle.services import expense_service, settlement_service, trip_service

D1, D2, D3 = date(2024, 5, 1), date(2024, 5, 2), date(2024, 5, 3)


@pytest.fixture
def trip_expenses(db, trip_with_people):
    """Alice, Bob and Carol each pay for something."""
    trip, alice, bob, carol = trip_with_people
    everyone = [alice.id, bob.id, carol.id]
    for payer, amount, participants in [
        (alice, 30000, everyone),
        (bob, 20000, [bob.id, carol.id]),
        (carol, 15000, everyone),
    ]:
        expense_service.create_expense_with_participants(
            trip_id=trip.id,
            payer_id=payer.id,
            expense_date=D1,
            amount=amount,
            item_name=f"Paid by {payer.name}",
            participant_ids=participants,
            db=db
        )
    return trip_with_people


def test_build_trip_settlement(db, trip_expenses):
    trip, alice, bob, carol = trip_expenses

    summary = settlement_service.build_trip_settlement(trip.id, db)

    assert summary.total_expenses == 65000
    assert summary.participant_count == 3
    assert summary.expense_count == 3
    assert {t.name: t.total_amount for t in summary.user_totals} == {
        "Alice": 15000, "Bob": 25000, "Carol": 25000
    }
    assert {b.participant_name: b.net_balance for b in summary.balances} == {
        "Alice": 15000, "Bob": -5000, "Carol": -10000
    }
    assert [(t.from_participant.name, t.to_participant.name, t.amount) for t in summary.transfers] == [
        ("Carol", "Alice", 10000),
        ("Bob", "Alice", 5000),
    ]
    assert summary.settlement_validation.is_valid
    assert summary.transfer_validation.is_valid


def test_daily_prorated_lodging(db, trip_with_people):
    trip, alice, bob, carol = trip_with_people
    expense_service.create_expense_with_participants(
        trip_id=trip.id,
        payer_id=alice.id,
        expense_date=D1,
        end_date=D3,
        amount=300000,
        item_name="Guesthouse",
        category="lodging",
        participant_ids=[alice.id, bob.id, carol.id],
        daily_participants={D1: [alice.id, bob.id], D2: [alice.id], D3: [bob.id, carol.id]},
        db=db
    )

    summary = settlement_service.build_trip_settlement(trip.id, db)

    assert {t.name: t.total_amount for t in summary.user_totals} == {
        "Alice": 150000, "Bob": 100000, "Carol": 50000
    }
    assert {b.participant_name: b.net_balance for b in summary.balances} == {
        "Alice": 150000, "Bob": -100000, "Carol": -50000
    }


def test_zero_activity_participant_on_roster(db, trip_expenses):
    trip, alice, bob, carol = trip_expenses
    dave = trip_service.create_participant("Dave", db)
    trip_service.add_trip_participant(trip.id, dave.id, db)

    summary = settlement_service.build_trip_settlement(trip.id, db)

    dave_balance = next(b for b in summary.balances if b.participant_id == dave.id)
    assert (dave_balance.total_paid, dave_balance.total_owed, dave_balance.net_balance) == (0, 0, 0)
    assert len(summary.transfers) == 2


def test_custom_mismatch_flagged_or_rejected(db, trip_with_people):
    trip, alice, bob, carol = trip_with_people
    expense_service.create_expense_with_participants(
        trip_id=trip.id,
        payer_id=alice.id,
        expense_date=D1,
        amount=100,
        item_name="Groceries",
        participant_ids=[alice.id, bob.id],
        settlement_type=SettlementType.CUSTOM,
        custom_amounts={alice.id: 60, bob.id: 30},
        db=db
    )

    summary = settlement_service.build_trip_settlement(trip.id, db, strict=False)
    assert not summary.settlement_validation.is_valid
    assert summary.settlement_validation.total_balance == 10

    with pytest.raises(SettlementValidationError):
        settlement_service.build_trip_settlement(trip.id, db, strict=True)


def test_foreign_currency_logged(db, trip_with_people, caplog):
    trip, alice, bob, carol = trip_with_people
    expense_service.create_expense_with_participants(
        trip_id=trip.id,
        payer_id=alice.id,
        expense_date=D1,
        amount=1000,
        currency="usd",
        item_name="Souvenir",
        participant_ids=[alice.id, bob.id],
        db=db
    )

    with caplog.at_level(logging.WARNING, logger="tripsettle.services.settlement_service"):
        summary = settlement_service.build_trip_settlement(trip.id, db)

    assert "not in KRW" in caplog.text
    assert summary.total_expenses == 1000


def test_calculate_settlement_stores_latest_result(db, trip_expenses):
    trip, alice, bob, carol = trip_expenses

    settlement_service.calculate_settlement(trip.id, db)
    latest_id = settlement_service.calculate_settlement(trip.id, db).id

    stored = settlement_service.get_latest_settlement(trip.id, db)
    assert stored.id == latest_id
    assert db.query(SettlementResult).filter(SettlementResult.trip_id == trip.id).count() == 1
    assert stored.calculation_data["transfers"][0] == {
        "from": {"id": carol.id, "name": "Carol"},
        "to": {"id": alice.id, "name": "Alice"},
        "amount": 10000,
    }
    assert "Carol -> Alice: 10,000 KRW" in stored.summary

    db.refresh(trip)
    assert trip.is_settled
    assert trip.status == TripStatus.SETTLED


def test_missing_trip_and_result(db):
    with pytest.raises(NotFoundError):
        settlement_service.build_trip_settlement(999, db)
    with pytest.raises(NotFoundError):
        settlement_service.get_latest_settlement(999, db)


def test_format_summary(db, trip_expenses):
    trip, alice, bob, carol = trip_expenses

    text = settlement_service.format_settlement_summary(
        settlement_service.build_trip_settlement(trip.id, db)
    )

    assert text.splitlines()[0] == "Total expenses: 65,000 KRW"
    assert "  Alice: +15,000 KRW" in text
    assert "  Bob -> Alice: 5,000 KRW" in text
    assert "Warning" not in text

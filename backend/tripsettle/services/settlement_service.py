"""
Settlement service: who owes whom, with the fewest transfers.

The engine functions (compute_owed_totals, compute_balances,
minimize_transfers and the two validators) are pure and work on integer
minor-unit amounts only. calculate_settlement / build_trip_settlement wire
them to the database.
"""
import logging
from datetime import date
from typing import Dict, Hashable, List, Optional, Sequence, Set, Tuple

from sqlalchemy.orm import Session

from tripsettle.core.config import settings
from tripsettle.core.exceptions import NotFoundError, SettlementValidationError
from tripsettle.models.settlement import SettlementResult
from tripsettle.models.trip import TripStatus
from tripsettle.schemas.settlement import (
    CustomSplit,
    DailySplit,
    EqualSplit,
    Participant,
    ParticipantRef,
    SettlementBalance,
    SettlementComputation,
    SettlementExpense,
    SettlementSummary,
    SettlementTransfer,
    UserTotal,
    ValidationResult,
)
from tripsettle.services.expense_service import list_trip_expenses, to_settlement_expense
from tripsettle.services.trip_service import get_trip, get_trip_roster

logger = logging.getLogger(__name__)


def _resolve_strict(strict: Optional[bool]) -> bool:
    return settings.SETTLEMENT_STRICT_VALIDATION if strict is None else strict


def split_evenly(amount: int, keys: Sequence[Hashable]) -> List[Tuple[Hashable, int]]:
    """
    Divide amount among keys with integer floor division.
    The whole remainder goes to the first key, so shares always sum to amount.
    """
    if not keys:
        return []
    per_key, remainder = divmod(amount, len(keys))
    return [
        (key, per_key + (remainder if index == 0 else 0))
        for index, key in enumerate(keys)
    ]


def _unique(participant_ids: Sequence[int]) -> List[int]:
    return list(dict.fromkeys(participant_ids))


def split_participant_ids(expense: SettlementExpense) -> List[int]:
    """All participant ids an expense's split refers to, in first-seen order."""
    split = expense.split
    if isinstance(split, EqualSplit):
        return _unique(split.participant_ids)
    if isinstance(split, CustomSplit):
        return list(split.custom_amounts.keys())
    ids: List[int] = []
    for day in sorted(split.daily_participants):
        ids.extend(split.daily_participants[day])
    return _unique(ids)


def allocate_expense(expense: SettlementExpense) -> List[Tuple[int, int]]:
    """
    Return (participant_id, share) pairs for a single expense.

    Equal: remainder to the first participant.
    Custom: amounts verbatim, missing amounts count as 0.
    Daily: amount split across dates (remainder to the earliest date), then
    each date's share split across that day's participants.
    An empty participant set yields no shares.
    """
    split = expense.split
    if isinstance(split, EqualSplit):
        return split_evenly(expense.amount, _unique(split.participant_ids))

    if isinstance(split, CustomSplit):
        return [(pid, amount or 0) for pid, amount in split.custom_amounts.items()]

    shares: List[Tuple[int, int]] = []
    if isinstance(split, DailySplit):
        days: List[date] = sorted(day for day, ids in split.daily_participants.items() if ids)
        for day, day_amount in split_evenly(expense.amount, days):
            shares.extend(split_evenly(day_amount, _unique(split.daily_participants[day])))
    return shares


def check_expense(expense: SettlementExpense, roster_ids: Set[int]) -> List[str]:
    """Describe everything malformed about one expense (empty list when clean)."""
    issues = []
    if expense.amount < 0:
        issues.append(f"Expense {expense.id} has negative amount {expense.amount}")

    participant_ids = split_participant_ids(expense)
    if not participant_ids:
        issues.append(f"Expense {expense.id} has no participants")

    unknown = [pid for pid in participant_ids if pid not in roster_ids]
    if unknown:
        issues.append(f"Expense {expense.id} references unknown participants {unknown}")

    if expense.payer_id not in roster_ids:
        issues.append(f"Expense {expense.id} has unknown payer {expense.payer_id}")

    if isinstance(expense.split, CustomSplit) and participant_ids:
        custom_total = sum(amount or 0 for amount in expense.split.custom_amounts.values())
        if custom_total != expense.amount:
            issues.append(
                f"Expense {expense.id} custom amounts sum to {custom_total}, "
                f"expected {expense.amount}"
            )
    return issues


def compute_owed_totals(
    expenses: Sequence[SettlementExpense],
    participants: Sequence[Participant],
    strict: Optional[bool] = None,
) -> List[UserTotal]:
    """
    Fold expenses into one UserTotal per roster participant (roster order).

    In strict mode any malformed expense raises SettlementValidationError;
    otherwise empty splits are skipped and shares of participants outside the
    roster are dropped, both with a warning.
    """
    totals: Dict[int, UserTotal] = {
        p.id: UserTotal(id=p.id, name=p.name) for p in participants
    }

    if _resolve_strict(strict):
        roster_ids = set(totals)
        issues = [issue for expense in expenses for issue in check_expense(expense, roster_ids)]
        if issues:
            raise SettlementValidationError(issues)

    for expense in expenses:
        shares = allocate_expense(expense)
        if not shares:
            logger.warning(f"Skipping expense {expense.id}: no participants")
            continue

        for participant_id, share in shares:
            total = totals.get(participant_id)
            if total is None:
                logger.warning(
                    f"Expense {expense.id}: participant {participant_id} is not in the roster, "
                    f"share of {share} ignored"
                )
                continue
            total.regular_amount += share

    for total in totals.values():
        total.total_amount = total.regular_amount + total.shared_amount

    return list(totals.values())


def compute_balances(
    expenses: Sequence[SettlementExpense],
    user_totals: Sequence[UserTotal],
    strict: Optional[bool] = None,
) -> List[SettlementBalance]:
    """
    Combine owed totals with what each participant actually paid.

    The payer is credited the full amount whether or not they took part in
    the expense. Unknown payers raise in strict mode and are dropped with a
    warning otherwise.
    """
    balances: Dict[int, SettlementBalance] = {
        total.id: SettlementBalance(
            participant_id=total.id,
            participant_name=total.name,
            total_owed=total.total_amount,
        )
        for total in user_totals
    }

    unknown_payers = [e for e in expenses if e.payer_id not in balances]
    if unknown_payers and _resolve_strict(strict):
        raise SettlementValidationError([
            f"Expense {e.id} has unknown payer {e.payer_id}" for e in unknown_payers
        ])

    for expense in expenses:
        balance = balances.get(expense.payer_id)
        if balance is None:
            logger.warning(
                f"Expense {expense.id}: payer {expense.payer_id} is not in the roster, "
                f"{expense.amount} not credited"
            )
            continue
        balance.total_paid += expense.amount

    for balance in balances.values():
        balance.net_balance = balance.total_paid - balance.total_owed

    return list(balances.values())


def minimize_transfers(balances: Sequence[SettlementBalance]) -> List[SettlementTransfer]:
    """
    Minimize the number of transfers needed to settle debts.
    Greedily matches the largest receiver with the largest payer.
    Works on a copy; the given balances are left untouched.
    """
    # [participant, remaining amount] pairs; payers keep their negative sign
    receivers = [
        [ParticipantRef(id=b.participant_id, name=b.participant_name), b.net_balance]
        for b in balances if b.net_balance > 0
    ]
    payers = [
        [ParticipantRef(id=b.participant_id, name=b.participant_name), b.net_balance]
        for b in balances if b.net_balance < 0
    ]

    # Stable sorts: ties keep input order
    receivers.sort(key=lambda entry: entry[1], reverse=True)
    payers.sort(key=lambda entry: entry[1])

    transfers = []
    receiver_idx = 0
    payer_idx = 0

    while receiver_idx < len(receivers) and payer_idx < len(payers):
        receiver = receivers[receiver_idx]
        payer = payers[payer_idx]

        amount = min(receiver[1], abs(payer[1]))
        transfers.append(SettlementTransfer(
            from_participant=payer[0],
            to_participant=receiver[0],
            amount=amount,
        ))

        receiver[1] -= amount
        payer[1] += amount

        if receiver[1] == 0:
            receiver_idx += 1
        if payer[1] == 0:
            payer_idx += 1

    return transfers


def validate_settlement(balances: Sequence[SettlementBalance]) -> ValidationResult:
    """Check that net balances sum to zero (money is conserved)."""
    total_balance = sum(b.net_balance for b in balances)
    is_valid = abs(total_balance) < settings.SETTLEMENT_TOLERANCE

    if is_valid:
        message = "Settlement is balanced."
    else:
        message = f"Settlement balances sum to {total_balance} instead of 0. Check the expense splits."
    return ValidationResult(is_valid=is_valid, message=message, total_balance=total_balance)


def validate_transfers(
    balances: Sequence[SettlementBalance],
    transfers: Sequence[SettlementTransfer],
) -> ValidationResult:
    """Replay transfers on a copy of the balances and check everyone ends at zero."""
    final_balances: Dict[int, int] = {b.participant_id: b.net_balance for b in balances}

    for transfer in transfers:
        from_id = transfer.from_participant.id
        to_id = transfer.to_participant.id
        final_balances[from_id] = final_balances.get(from_id, 0) + transfer.amount
        final_balances[to_id] = final_balances.get(to_id, 0) - transfer.amount

    remaining = {
        pid: balance for pid, balance in final_balances.items()
        if abs(balance) >= settings.SETTLEMENT_TOLERANCE
    }
    if remaining:
        return ValidationResult(
            is_valid=False,
            message=f"Transfers leave unsettled balances: {remaining}",
            total_balance=sum(remaining.values()),
        )
    return ValidationResult(
        is_valid=True,
        message=f"Settled with {len(transfers)} transfer(s).",
        total_balance=0,
    )


def settle(
    expenses: Sequence[SettlementExpense],
    participants: Sequence[Participant],
    strict: Optional[bool] = None,
) -> SettlementComputation:
    """Run the whole pipeline: totals, balances, transfers, self-checks."""
    user_totals = compute_owed_totals(expenses, participants, strict=strict)
    balances = compute_balances(expenses, user_totals, strict=strict)
    transfers = minimize_transfers(balances)

    computation = SettlementComputation(
        user_totals=user_totals,
        balances=balances,
        transfers=transfers,
        settlement_validation=validate_settlement(balances),
        transfer_validation=validate_transfers(balances, transfers),
    )
    logger.debug(
        f"Settled {len(expenses)} expenses among {len(participants)} participants "
        f"with {len(transfers)} transfers"
    )
    return computation


def build_trip_settlement(
    trip_id: int,
    db: Session,
    start_date: date = None,
    end_date: date = None,
    strict: Optional[bool] = None,
) -> SettlementSummary:
    """Load a trip's roster and expenses and settle them."""
    trip = get_trip(trip_id, db)
    roster = get_trip_roster(trip_id, db)
    expenses = list_trip_expenses(trip_id, db, start_date=start_date, end_date=end_date)

    foreign = [e.id for e in expenses if e.currency != trip.currency]
    if foreign:
        # No conversion happens; amounts are summed as-is
        logger.warning(f"Trip {trip_id}: expenses {foreign} are not in {trip.currency}")

    settlement_expenses = [to_settlement_expense(e) for e in expenses]
    computation = settle(settlement_expenses, roster, strict=strict)

    if not computation.settlement_validation.is_valid:
        logger.warning(f"Trip {trip_id}: {computation.settlement_validation.message}")
    if not computation.transfer_validation.is_valid:
        logger.warning(f"Trip {trip_id}: {computation.transfer_validation.message}")

    return SettlementSummary(
        trip_id=trip_id,
        currency=trip.currency,
        total_expenses=sum(e.amount for e in settlement_expenses),
        participant_count=len(roster),
        expense_count=len(settlement_expenses),
        skipped_expense_ids=[e.id for e in settlement_expenses if not allocate_expense(e)],
        **dict(computation),
    )


def format_settlement_summary(summary: SettlementSummary) -> str:
    """Render a settlement as plain text."""
    currency = summary.currency
    lines = [
        f"Total expenses: {summary.total_expenses:,} {currency}",
        f"Participants: {summary.participant_count}",
        "\nNet balances:",
    ]
    for balance in summary.balances:
        lines.append(f"  {balance.participant_name}: {balance.net_balance:+,} {currency}")
    lines.append("\nTransfers:")
    for transfer in summary.transfers:
        lines.append(
            f"  {transfer.from_participant.name} -> {transfer.to_participant.name}: "
            f"{transfer.amount:,} {currency}"
        )
    if not summary.settlement_validation.is_valid:
        lines.append(f"\nWarning: {summary.settlement_validation.message}")
    return "\n".join(lines)


def calculate_settlement(trip_id: int, db: Session, strict: Optional[bool] = None) -> SettlementResult:
    """
    Calculate and store the settlement for a trip.
    Replaces any earlier result and marks the trip as settled.
    """
    summary = build_trip_settlement(trip_id, db, strict=strict)

    # Delete old settlement results for this trip (we only need the latest)
    db.query(SettlementResult).filter(
        SettlementResult.trip_id == trip_id
    ).delete()

    settlement = SettlementResult(
        trip_id=trip_id,
        calculation_data=summary.model_dump(mode="json", by_alias=True),
        summary=format_settlement_summary(summary),
    )
    db.add(settlement)

    trip = get_trip(trip_id, db)
    trip.is_settled = True
    trip.status = TripStatus.SETTLED

    db.commit()
    db.refresh(settlement)
    logger.info(f"Trip {trip_id}: stored settlement {settlement.id} with {len(summary.transfers)} transfers")

    return settlement


def get_latest_settlement(trip_id: int, db: Session) -> SettlementResult:
    """Return the stored settlement for a trip."""
    settlement = db.query(SettlementResult).filter(
        SettlementResult.trip_id == trip_id
    ).first()
    if not settlement:
        raise NotFoundError("Settlement result", trip_id)
    return settlement

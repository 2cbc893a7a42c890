"""
Settlement routes.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Optional
from tripsettle.db.session import get_db
from tripsettle.schemas.settlement import SettlementResultResponse, SettlementSummary
from tripsettle.services import settlement_service

router = APIRouter(prefix="/settlement", tags=["settlement"])


@router.get("/{trip_id}", response_model=SettlementSummary)
async def get_settlement(
    trip_id: int,
    strict: Optional[bool] = None,
    db: Session = Depends(get_db)
):
    """Compute the current settlement of a trip without storing it."""
    return settlement_service.build_trip_settlement(trip_id, db, strict=strict)


@router.post("/{trip_id}/trigger")
async def trigger_settlement(
    trip_id: int,
    db: Session = Depends(get_db)
):
    """Trigger settlement calculation for a trip."""
    result = settlement_service.calculate_settlement(trip_id, db)

    return {"message": "Settlement calculated successfully", "settlement_id": result.id}


@router.get("/{trip_id}/result", response_model=SettlementResultResponse)
async def get_settlement_result(
    trip_id: int,
    db: Session = Depends(get_db)
):
    """Get the stored settlement result for a trip."""
    return settlement_service.get_latest_settlement(trip_id, db)

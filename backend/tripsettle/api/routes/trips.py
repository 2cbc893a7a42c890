"""
Trip management routes.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from tripsettle.db.session import get_db
from tripsettle.schemas.trip import (
    TripCreate, TripUpdate, TripResponse, TripDetailResponse, TripParticipantAdd, ParticipantResponse
)
from tripsettle.services import trip_service

router = APIRouter(prefix="/trips", tags=["trips"])


@router.post("", response_model=TripResponse, status_code=status.HTTP_201_CREATED)
async def create_trip(
    trip_data: TripCreate,
    db: Session = Depends(get_db)
):
    """Create a new trip."""
    return trip_service.create_trip(
        name=trip_data.name,
        start_date=trip_data.start_date,
        end_date=trip_data.end_date,
        description=trip_data.description,
        currency=trip_data.currency,
        participant_ids=trip_data.participant_ids,
        db=db
    )


@router.get("", response_model=List[TripResponse])
async def list_trips(db: Session = Depends(get_db)):
    """List all trips."""
    return trip_service.list_trips(db)


@router.get("/{trip_id}", response_model=TripDetailResponse)
async def get_trip(
    trip_id: int,
    db: Session = Depends(get_db)
):
    """Get trip details with participants."""
    trip = trip_service.get_trip(trip_id, db)
    participants = trip_service.get_trip_participants(trip_id, db)

    return TripDetailResponse(
        **TripResponse.model_validate(trip).model_dump(),
        participants=[ParticipantResponse.model_validate(p) for p in participants]
    )


@router.put("/{trip_id}", response_model=TripResponse)
async def update_trip(
    trip_id: int,
    trip_data: TripUpdate,
    db: Session = Depends(get_db)
):
    """Update a trip."""
    return trip_service.update_trip(trip_id, db, updates=trip_data.model_dump(exclude_unset=True))


@router.delete("/{trip_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_trip(
    trip_id: int,
    db: Session = Depends(get_db)
):
    """Delete a trip and everything recorded for it."""
    trip_service.delete_trip(trip_id, db)


@router.get("/{trip_id}/participants", response_model=List[ParticipantResponse])
async def list_trip_participants(
    trip_id: int,
    db: Session = Depends(get_db)
):
    """List participants of a trip."""
    trip_service.get_trip(trip_id, db)
    return trip_service.get_trip_participants(trip_id, db)


@router.post(
    "/{trip_id}/participants",
    response_model=ParticipantResponse,
    status_code=status.HTTP_201_CREATED
)
async def add_trip_participant(
    trip_id: int,
    data: TripParticipantAdd,
    db: Session = Depends(get_db)
):
    """Add an existing participant to a trip."""
    return trip_service.add_trip_participant(trip_id, data.participant_id, db)


@router.delete("/{trip_id}/participants/{participant_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_trip_participant(
    trip_id: int,
    participant_id: int,
    db: Session = Depends(get_db)
):
    """Remove a participant who has no expenses in the trip."""
    trip_service.remove_trip_participant(trip_id, participant_id, db)

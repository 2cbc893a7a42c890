"""
Participant registry routes.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from tripsettle.db.session import get_db
from tripsettle.schemas.trip import ParticipantCreate, ParticipantResponse, ParticipantUpdate
from tripsettle.services import trip_service

router = APIRouter(prefix="/participants", tags=["participants"])


@router.post("", response_model=ParticipantResponse, status_code=status.HTTP_201_CREATED)
async def create_participant(
    data: ParticipantCreate,
    db: Session = Depends(get_db)
):
    """Register a participant."""
    return trip_service.create_participant(
        name=data.name,
        avatar_color=data.avatar_color,
        phone=data.phone,
        db=db
    )


@router.get("", response_model=List[ParticipantResponse])
async def list_participants(db: Session = Depends(get_db)):
    """List all participants."""
    return trip_service.list_participants(db)


@router.get("/{participant_id}", response_model=ParticipantResponse)
async def get_participant(
    participant_id: int,
    db: Session = Depends(get_db)
):
    """Get a participant."""
    return trip_service.get_participant(participant_id, db)


@router.put("/{participant_id}", response_model=ParticipantResponse)
async def update_participant(
    participant_id: int,
    data: ParticipantUpdate,
    db: Session = Depends(get_db)
):
    """Update a participant."""
    return trip_service.update_participant(
        participant_id, db, updates=data.model_dump(exclude_unset=True)
    )


@router.delete("/{participant_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_participant(
    participant_id: int,
    db: Session = Depends(get_db)
):
    """Delete a participant who has no expenses."""
    trip_service.delete_participant(participant_id, db)

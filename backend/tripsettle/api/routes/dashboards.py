"""
Shared dashboard routes.
"""
from fastapi import APIRouter, Depends, Header, status
from sqlalchemy.orm import Session
from typing import List, Optional
from tripsettle.db.session import get_db
from tripsettle.schemas.dashboard import (
    DashboardCreate, DashboardResponse, SharedDashboardView, SnapshotResponse
)
from tripsettle.services import dashboard_service

router = APIRouter(prefix="/dashboards", tags=["dashboards"])


@router.post("/{trip_id}", response_model=DashboardResponse, status_code=status.HTTP_201_CREATED)
async def create_dashboard(
    trip_id: int,
    data: DashboardCreate,
    db: Session = Depends(get_db)
):
    """Create a shared dashboard with a frozen settlement snapshot."""
    return dashboard_service.create_shared_dashboard(
        trip_id=trip_id,
        title=data.title,
        description=data.description,
        start_date=data.start_date,
        end_date=data.end_date,
        password=data.password,
        db=db
    )


@router.get("/{trip_id}", response_model=List[DashboardResponse])
async def list_dashboards(
    trip_id: int,
    db: Session = Depends(get_db)
):
    """List dashboards of a trip."""
    return dashboard_service.list_trip_dashboards(trip_id, db)


@router.get("/shared/{share_key}", response_model=SharedDashboardView)
async def view_shared_dashboard(
    share_key: str,
    password: Optional[str] = Header(default=None, alias="X-Dashboard-Password"),
    db: Session = Depends(get_db)
):
    """Open a shared dashboard; protected ones need the password header."""
    dashboard = dashboard_service.get_shared_dashboard(share_key, db, password=password)
    return SharedDashboardView(
        dashboard=DashboardResponse.model_validate(dashboard),
        snapshots=[SnapshotResponse.model_validate(s) for s in dashboard.snapshots]
    )


@router.post("/shared/{share_key}/deactivate", response_model=DashboardResponse)
async def deactivate_dashboard(
    share_key: str,
    db: Session = Depends(get_db)
):
    """Stop serving a shared dashboard."""
    return dashboard_service.deactivate_dashboard(share_key, db)

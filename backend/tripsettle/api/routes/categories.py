"""
Expense category routes.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from tripsettle.db.session import get_db
from tripsettle.schemas.category import CategoryCreate, CategoryResponse, CategoryUpdate
from tripsettle.services import category_service

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=List[CategoryResponse])
async def list_categories(db: Session = Depends(get_db)):
    """List categories, defaults first."""
    return category_service.list_categories(db)


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    data: CategoryCreate,
    db: Session = Depends(get_db)
):
    """Create a category."""
    return category_service.create_category(
        name=data.name,
        icon=data.icon,
        color=data.color,
        is_default=data.is_default,
        db=db
    )


@router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: int,
    data: CategoryUpdate,
    db: Session = Depends(get_db)
):
    """Update a user category."""
    return category_service.update_category(
        category_id, db, updates=data.model_dump(exclude_unset=True)
    )


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: int,
    db: Session = Depends(get_db)
):
    """Delete a user category."""
    category_service.delete_category(category_id, db)

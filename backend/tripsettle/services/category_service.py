"""
Category service: expense categories shared by all trips.
"""
import logging
from typing import List
from sqlalchemy.orm import Session
from tripsettle.core.exceptions import NotFoundError
from tripsettle.models.category import Category
from tripsettle.models.expense import Expense

logger = logging.getLogger(__name__)

CATEGORY_FIELDS = ("name", "icon", "color")


def _check_name_free(name: str, db: Session, exclude_id: int = None):
    query = db.query(Category).filter(Category.name == name)
    if exclude_id is not None:
        query = query.filter(Category.id != exclude_id)
    if query.first():
        raise ValueError(f"Category '{name}' already exists")


def list_categories(db: Session) -> List[Category]:
    """Default categories first, then by name."""
    return db.query(Category).order_by(Category.is_default.desc(), Category.name).all()


def get_category(category_id: int, db: Session) -> Category:
    """Get a category or raise NotFoundError."""
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise NotFoundError("Category", category_id)
    return category


def create_category(
    name: str,
    icon: str,
    db: Session,
    color: str = None,
    is_default: bool = False,
) -> Category:
    """Create a category with a unique name."""
    name = name.strip()
    _check_name_free(name, db)

    category = Category(name=name, icon=icon, is_default=is_default)
    if color:
        category.color = color
    db.add(category)
    db.commit()
    db.refresh(category)
    logger.info(f"Created category {category.id} '{category.name}'")
    return category


def update_category(category_id: int, db: Session, updates: dict = None) -> Category:
    """
    Rename or restyle a user category.
    Expenses labelled with it follow the new name.
    """
    category = get_category(category_id, db)
    if category.is_default:
        raise ValueError(f"Default category '{category.name}' cannot be changed")

    updates = {k: v for k, v in (updates or {}).items() if k in CATEGORY_FIELDS and v is not None}
    if "name" in updates:
        updates["name"] = updates["name"].strip()
        _check_name_free(updates["name"], db, exclude_id=category.id)

    for field, value in updates.items():
        setattr(category, field, value)
    if "name" in updates:
        db.query(Expense).filter(Expense.category_id == category.id).update(
            {Expense.category: category.name}, synchronize_session="fetch"
        )

    db.commit()
    db.refresh(category)
    return category


def delete_category(category_id: int, db: Session):
    """
    Delete a user category.
    Its expenses keep the category name but lose the reference.
    """
    category = get_category(category_id, db)
    if category.is_default:
        raise ValueError(f"Default category '{category.name}' cannot be deleted")

    db.query(Expense).filter(Expense.category_id == category.id).update(
        {Expense.category_id: None}, synchronize_session="fetch"
    )
    db.delete(category)
    db.commit()
    logger.info(f"Deleted category {category_id}")

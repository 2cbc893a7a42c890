"""
Utility functions for the application.
"""
from typing import Any, List
from datetime import date, datetime, timedelta


def serialize_date(obj: Any) -> str:
    """Serialize date objects to ISO format strings."""
    if isinstance(obj, (date, datetime)):
        return obj.isoformat()
    raise TypeError(f"Type {type(obj)} not serializable")


def get_date_range(start: date, end: date = None) -> List[date]:
    """
    Return every date from start to end, both inclusive.
    A missing or earlier end date yields just the start date.
    """
    if end is None or end < start:
        return [start]
    return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]

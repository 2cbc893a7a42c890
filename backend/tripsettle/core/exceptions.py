"""
Domain exceptions raised by services.

Routes translate these into HTTP errors; services never raise HTTPException.
"""
from typing import List, Optional


class SettlementValidationError(ValueError):
    """Malformed settlement input rejected in strict mode."""

    def __init__(self, issues: List[str]):
        self.issues = list(issues)
        super().__init__("; ".join(self.issues) or "Invalid settlement input")


class NotFoundError(LookupError):
    """Requested entity does not exist."""

    def __init__(self, entity: str, key: Optional[object] = None):
        self.entity = entity
        self.key = key
        message = f"{entity} not found" if key is None else f"{entity} {key} not found"
        super().__init__(message)


class DashboardAccessError(PermissionError):
    """Shared dashboard password missing or incorrect."""
    pass

"""
Translate service exceptions into HTTP responses.
"""
import logging
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from tripsettle.core.exceptions import DashboardAccessError, NotFoundError, SettlementValidationError

logger = logging.getLogger(__name__)


async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


async def dashboard_access_handler(request: Request, exc: DashboardAccessError):
    return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content={"detail": str(exc)})


async def settlement_validation_handler(request: Request, exc: SettlementValidationError):
    logger.info(f"Rejected settlement input: {exc}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": "Invalid settlement input", "issues": exc.issues},
    )


async def value_error_handler(request: Request, exc: ValueError):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


def register_exception_handlers(app: FastAPI):
    """Install handlers for the service-level exceptions."""
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(DashboardAccessError, dashboard_access_handler)
    app.add_exception_handler(SettlementValidationError, settlement_validation_handler)
    app.add_exception_handler(ValueError, value_error_handler)

"""
Main API router that includes all route modules.
"""
from fastapi import APIRouter
from tripsettle.api.routes import trips, participants, categories, expenses, settlements, dashboards

api_router = APIRouter()

# Include all route modules
api_router.include_router(trips.router)
api_router.include_router(participants.router)
api_router.include_router(categories.router)
api_router.include_router(expenses.router)
api_router.include_router(settlements.router)
api_router.include_router(dashboards.router)

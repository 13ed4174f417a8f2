"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from resort_api.api.routes import accommodations, bookings, catalog, health, payments

api_router = APIRouter(prefix="/api")
api_router.include_router(health.router)
api_router.include_router(accommodations.router)
api_router.include_router(catalog.router)
api_router.include_router(bookings.router)
api_router.include_router(payments.router)

"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter

from seatbooking.api.routes import bookings, seats, tickets

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(seats.router)
api_router.include_router(bookings.router)
api_router.include_router(tickets.router)

"""
FastAPI dependencies.
"""

from fastapi import Request

from seatbooking.services.booking_session import SeatBookingSession


async def get_session(request: Request) -> SeatBookingSession:
    """The session built at startup. Loads the layout on first use."""
    session: SeatBookingSession = request.app.state.session
    if not session.loaded:
        await session.refresh()
    return session

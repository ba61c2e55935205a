"""
Booking and cancellation endpoints.
Typed coordinator errors are turned into HTTP errors here, message verbatim.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from seatbooking.api.dependencies import get_session
from seatbooking.schemas.booking import BookingReceiptResponse, CancellationResponse, Patron
from seatbooking.services.booking_service import BookingError
from seatbooking.services.booking_session import SeatBookingSession
from seatbooking.services.cancellation_service import CancellationError

router = APIRouter(prefix="/bookings", tags=["Bookings"])

_ERROR_STATUS = {
    "precondition": status.HTTP_409_CONFLICT,
    "conflict": status.HTTP_409_CONFLICT,
    "rejected": status.HTTP_409_CONFLICT,
    "transport": status.HTTP_502_BAD_GATEWAY,
    "invalid": status.HTTP_502_BAD_GATEWAY,
}


def _raise_for(error) -> None:
    raise HTTPException(
        status_code=_ERROR_STATUS.get(error.kind, status.HTTP_502_BAD_GATEWAY),
        detail=error.message,
    )


@router.post("/", response_model=BookingReceiptResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(patron: Patron, session: SeatBookingSession = Depends(get_session)):
    """
    Book every seat in the current selection.

    Seats are booked one request at a time. The layout is refreshed after
    the attempt whatever the outcome, so the next read reflects the
    inventory service.
    """
    result = await session.book(patron)
    if isinstance(result, BookingError):
        _raise_for(result)
    return BookingReceiptResponse(
        name=result.owned.name,
        email=result.owned.email,
        tickets=list(result.tickets),
    )


@router.delete("/selected", response_model=CancellationResponse)
async def cancel_selected_booking(session: SeatBookingSession = Depends(get_session)):
    """Cancel the first seat queued for cancellation."""
    result = await session.cancel_selected()
    if isinstance(result, CancellationError):
        _raise_for(result)
    return CancellationResponse(
        message="Booking cancelled successfully",
        ticket_id=result.seat.ticket_id,
        seat_title=result.seat.seat_title,
    )


@router.delete("/{ticket_id}", response_model=CancellationResponse)
async def cancel_booking(ticket_id: str, session: SeatBookingSession = Depends(get_session)):
    """Cancel one owned ticket by id."""
    result = await session.cancel(ticket_id)
    if isinstance(result, CancellationError):
        _raise_for(result)
    return CancellationResponse(
        message="Booking cancelled successfully",
        ticket_id=result.seat.ticket_id,
        seat_title=result.seat.seat_title,
    )

"""
Seat map endpoints: view, refresh, and selection toggles.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from seatbooking.api.dependencies import get_session
from seatbooking.api.views import seat_map_view
from seatbooking.core.logging import get_logger
from seatbooking.schemas.seat import SeatMapResponse
from seatbooking.services.booking_session import SeatBookingSession

logger = get_logger(__name__)
router = APIRouter(prefix="/seats", tags=["Seats"])


@router.get("/", response_model=SeatMapResponse)
async def get_seat_map(session: SeatBookingSession = Depends(get_session)):
    """Current seat map with each seat's state as seen by this patron."""
    return seat_map_view(session.state)


@router.post("/refresh", response_model=SeatMapResponse)
async def refresh_seat_map(session: SeatBookingSession = Depends(get_session)):
    """Reload the layout from the inventory service and reconcile owned seats."""
    state = await session.refresh()
    return seat_map_view(state)


@router.post("/{seat_index}/toggle", response_model=SeatMapResponse)
async def toggle_seat(seat_index: int, session: SeatBookingSession = Depends(get_session)):
    """
    Toggle a seat.

    Owned seats toggle in the cancellation selection, all others in the
    booking selection. A toggle the guards refuse (seat booked by someone
    else, another seat already pending in single-seat flow) leaves the
    map unchanged.
    """
    if not session.state.contains(seat_index):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Seat {seat_index} does not exist",
        )
    before = session.state
    after = session.toggle(seat_index)
    if after is before:
        logger.debug("seat_toggle_ignored", seat=seat_index, state=before.seat_state(seat_index).value)
    return seat_map_view(after)


@router.delete("/selection", response_model=SeatMapResponse)
async def clear_selection(session: SeatBookingSession = Depends(get_session)):
    return seat_map_view(session.clear_selection())


@router.delete("/cancel-selection", response_model=SeatMapResponse)
async def clear_cancel_selection(session: SeatBookingSession = Depends(get_session)):
    return seat_map_view(session.clear_cancel_selection())

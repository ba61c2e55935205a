"""
Conversion of reservation state into response schemas.
"""

from seatbooking.schemas.seat import SeatMapResponse, SeatView
from seatbooking.services.reservation_state import ReservationState


def seat_map_view(state: ReservationState) -> SeatMapResponse:
    return SeatMapResponse(
        rows=state.layout.rows,
        cols=state.layout.cols,
        flow=state.flow.value,
        degraded=state.degraded,
        seats=[
            SeatView(index=index, label=label, state=seat_state.value)
            for index, label, seat_state in state.seat_map()
        ],
        selected=list(state.selected),
        cancel_selected=list(state.cancel_selected),
        booked=sorted(state.booked),
        owned=state.owned,
    )

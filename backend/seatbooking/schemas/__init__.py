from seatbooking.schemas.layout import AVAILABLE, BookedMarker, LayoutSnapshot, SeatStatusResponse
from seatbooking.schemas.booking import (
    BookSeatRequest,
    BookSeatResponse,
    BookingReceiptResponse,
    CancellationResponse,
    OwnedSeat,
    OwnedSeatRecord,
    Patron,
    TicketExport,
)
from seatbooking.schemas.seat import SeatMapResponse, SeatView

__all__ = [
    "AVAILABLE", "BookedMarker", "LayoutSnapshot", "SeatStatusResponse",
    "BookSeatRequest", "BookSeatResponse", "BookingReceiptResponse", "CancellationResponse",
    "OwnedSeat", "OwnedSeatRecord", "Patron", "TicketExport",
    "SeatMapResponse", "SeatView",
]

"""
Ticket export endpoint: owned tickets as a plain-text or JSON download.
"""

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import Response

from seatbooking.api.dependencies import get_session
from seatbooking.services.booking_session import SeatBookingSession
from seatbooking.services.ticket_export import (
    build_ticket,
    render_ticket_json,
    render_ticket_text,
    ticket_filename,
)

router = APIRouter(prefix="/tickets", tags=["Tickets"])

_MEDIA_TYPES = {
    "txt": "text/plain; charset=utf-8",
    "json": "application/json",
}


@router.get("/{ticket_id}")
async def export_ticket(
    ticket_id: str,
    request: Request,
    fmt: Literal["txt", "json"] = Query("txt", alias="format"),
    session: SeatBookingSession = Depends(get_session),
):
    owned = session.state.owned
    seat = owned.find_ticket(ticket_id) if owned else None
    if seat is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Ticket {ticket_id} not found",
        )

    settings = request.app.state.settings
    ticket = build_ticket(ticket_id, [seat.seat_title], settings.CINEMA_NAME, settings.MOVIE_TITLE)
    content = render_ticket_json(ticket) if fmt == "json" else render_ticket_text(ticket)

    return Response(
        content=content,
        media_type=_MEDIA_TYPES[fmt],
        headers={"Content-Disposition": f'attachment; filename="{ticket_filename(ticket_id, fmt)}"'},
    )

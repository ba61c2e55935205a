"""
Ticket export rendering: a boxed plain-text confirmation and a JSON record.
"""

import json
from datetime import datetime, timezone
from typing import Optional

from seatbooking.schemas.booking import TicketExport

RULE = "=" * 43


def format_booking_time(moment: datetime) -> str:
    """e.g. 'March 5, 2026 at 07:30 PM'"""
    return f"{moment:%B} {moment.day}, {moment:%Y} at {moment:%I:%M %p}"


def build_ticket(
    ticket_id: str,
    seat_labels: list[str],
    cinema: str,
    movie: str,
    booked_at: Optional[datetime] = None,
) -> TicketExport:
    booked_at = booked_at or datetime.now(timezone.utc)
    return TicketExport(
        ticket_id=ticket_id,
        cinema=cinema,
        movie=movie,
        seats_booked=list(seat_labels),
        total_seats=len(seat_labels),
        booking_date=booked_at,
        booking_time=format_booking_time(booked_at),
    )


def render_ticket_text(ticket: TicketExport) -> str:
    lines = [
        RULE,
        "         CINEMA TICKET CONFIRMATION",
        RULE,
        "",
        f"Ticket ID: {ticket.ticket_id}",
        f"Cinema: {ticket.cinema}",
        f"Movie: {ticket.movie}",
        f"Date: {ticket.booking_time}",
        "",
        "SEATS BOOKED:",
        ", ".join(ticket.seats_booked),
        "",
        f"Total Seats: {ticket.total_seats}",
        "",
        RULE,
        "Keep this ticket for your records.",
        "Valid for one-time use only.",
        RULE,
    ]
    return "\n".join(lines)


def render_ticket_json(ticket: TicketExport) -> str:
    return json.dumps(ticket.model_dump(mode="json", by_alias=True), indent=2)


def ticket_filename(ticket_id: str, fmt: str) -> str:
    return f"ticket-{ticket_id}.{fmt}"

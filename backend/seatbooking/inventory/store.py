"""
In-memory seat inventory for one hall.

CONCURRENCY STRATEGY: single asyncio.Lock
=========================================

Two patrons may POST /book for the same seat at the same moment. Every
mutation (book, cancel) runs under one lock, so the check "seat is
available" and the write "seat now holds ticket T" happen as one step.
Exactly one of the two requests gets a ticket; the other gets 409.

Reads (layout, single seat) take no lock: they copy a dict that is only
ever replaced entry-by-entry under the lock.

Seat keys are created in row-major order ("a1", "a2", ... "b1", ...) and
the dict keeps that order, which is what clients rely on to map the
layout enumeration back to seat indices.
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from fastapi import HTTPException, status

from seatbooking.core.logging import get_logger
from seatbooking.inventory.tickets import generate_ticket_id
from seatbooking.services.seat_codec import label_to_key, row_letters

logger = get_logger(__name__)

MAX_TICKET_ID_ATTEMPTS = 5


@dataclass(frozen=True)
class Ticket:
    ticket_id: str
    seat_key: str
    username: str
    email: str
    booked_at: datetime


class SeatInventory:

    def __init__(self, rows: int, cols: int, ticket_id_factory=generate_ticket_id):
        if rows <= 0 or cols <= 0:
            raise ValueError("A hall needs at least one row and one column")
        self.rows = rows
        self.cols = cols
        self._seats: dict[str, Optional[Ticket]] = {
            f"{row_letters(row).lower()}{col + 1}": None
            for row in range(rows)
            for col in range(cols)
        }
        self._tickets: dict[str, Ticket] = {}
        self._new_ticket_id = ticket_id_factory
        self._lock = asyncio.Lock()

    def layout(self) -> dict:
        return {
            "rows": self.rows,
            "cols": self.cols,
            "seats": {
                key: "available" if ticket is None else {"status": "booked", "ticketId": ticket.ticket_id}
                for key, ticket in list(self._seats.items())
            },
        }

    def seat(self, code: str) -> dict:
        key = self._resolve(code)
        ticket = self._seats[key]
        if ticket is None:
            return {"status": "available", "ticket": None}
        return {"status": "booked", "ticket": ticket.ticket_id}

    def _resolve(self, code: str) -> str:
        key = label_to_key(code)
        if key not in self._seats:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Seat {code} does not exist",
            )
        return key

    def _unique_ticket_id(self) -> str:
        for _ in range(MAX_TICKET_ID_ATTEMPTS):
            ticket_id = self._new_ticket_id()
            if ticket_id not in self._tickets:
                return ticket_id
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not allocate a ticket id",
        )

    async def book(self, code: str, username: str, email: str) -> Ticket:
        key = self._resolve(code)

        async with self._lock:
            if self._seats[key] is not None:
                logger.warning("inventory_seat_taken", seat=key, username=username)
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail=f"Seat {key.upper()} is already booked",
                )

            ticket = Ticket(
                ticket_id=self._unique_ticket_id(),
                seat_key=key,
                username=username,
                email=email,
                booked_at=datetime.now(timezone.utc),
            )
            self._seats[key] = ticket
            self._tickets[ticket.ticket_id] = ticket

        logger.info("inventory_seat_booked", seat=key, ticket_id=ticket.ticket_id)
        return ticket

    async def cancel(self, ticket_id: str) -> Ticket:
        async with self._lock:
            ticket = self._tickets.pop(ticket_id, None)
            if ticket is None:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail=f"Ticket {ticket_id} not found",
                )
            self._seats[ticket.seat_key] = None

        logger.info("inventory_ticket_cancelled", seat=ticket.seat_key, ticket_id=ticket_id)
        return ticket

    @property
    def booked_count(self) -> int:
        return len(self._tickets)

"""
Booking coordinator.

BOOKING PROTOCOL
================

The inventory service books exactly one seat per POST /book call and
answers with one ticket id. A multi-seat selection is therefore committed
as one call per seat, in selection order, and each ticket is paired with
the seat it was requested for at the call site. Nothing is inferred from
the position of a ticket in a batch response.

Outcomes:
  - All seats booked: the new tickets are merged into the owned-seat
    record (appended, never replacing earlier tickets) and persisted.
  - First call fails: nothing local changes; the error message is the
    service's own wording where it gave one.
  - A later call fails: the seats already confirmed are real tickets, so
    they are merged and persisted before the error is returned. The error
    carries that partial receipt.

Service errors never escape as exceptions; book() returns a typed result.
The caller refreshes the layout after every outcome.
"""

import time
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Optional, Union

from seatbooking.core.logging import get_logger
from seatbooking.core.metrics import booking_latency, record_booking_attempt
from seatbooking.infrastructure.inventory_client import InventoryClient, InventoryError
from seatbooking.schemas.booking import OwnedSeat, OwnedSeatRecord, Patron
from seatbooking.services.interfaces.repository import OwnedSeatRepository
from seatbooking.services.reservation_state import ReservationState, merge_owned
from seatbooking.services.seat_codec import to_label

logger = get_logger(__name__)

TRANSPORT_FAILURE_MESSAGE = "Something went wrong. Please try again."


@dataclass(frozen=True)
class BookingReceipt:
    tickets: tuple[OwnedSeat, ...]
    owned: OwnedSeatRecord


@dataclass(frozen=True)
class BookingError:
    message: str
    kind: str  # precondition, conflict, rejected, transport, invalid
    seat: Optional[int] = None
    partial: Optional[BookingReceipt] = None


BookingResult = Union[BookingReceipt, BookingError]


def check_preconditions(state: ReservationState, selection: Sequence[int]) -> Optional[BookingError]:
    """Client-side fast fail. The service remains the authority."""
    if state.layout is None:
        return BookingError("Seat layout is not loaded yet.", kind="precondition")
    if not selection:
        return BookingError("Please select at least one seat.", kind="precondition")
    if len(set(selection)) != len(selection):
        return BookingError("A seat was selected more than once.", kind="precondition")
    for seat in selection:
        if seat not in state.selected:
            return BookingError(f"Seat {seat} is not selected.", kind="precondition", seat=seat)
        if seat in state.booked:
            label = to_label(seat, state.cols)
            return BookingError(f"Seat {label} is already booked.", kind="precondition", seat=seat)
    return None


class BookingCoordinator:

    def __init__(self, client: InventoryClient, repository: OwnedSeatRepository):
        self.client = client
        self.repository = repository

    async def _book_one(self, seat: int, label: str, patron: Patron) -> OwnedSeat:
        start = time.perf_counter()
        try:
            ticket_id = await self.client.book_seat(label, patron.name, patron.email)
        finally:
            booking_latency.observe(time.perf_counter() - start)
        return OwnedSeat(seat_number=seat, ticket_id=ticket_id, seat_title=label)

    async def book(
        self,
        state: ReservationState,
        selection: Sequence[int],
        patron: Patron,
    ) -> BookingResult:
        error = check_preconditions(state, selection)
        if error:
            record_booking_attempt("precondition")
            logger.info("booking_rejected_locally", reason=error.message)
            return error

        tickets: list[OwnedSeat] = []
        for seat in selection:
            label = to_label(seat, state.cols)
            try:
                tickets.append(await self._book_one(seat, label, patron))
            except InventoryError as e:
                status = "conflict" if e.kind == "conflict" else "error"
                record_booking_attempt(status)
                logger.warning(
                    "booking_failed",
                    seat=label,
                    kind=e.kind,
                    status_code=e.status_code,
                    detail=e.message,
                    confirmed_before_failure=len(tickets),
                )
                message = TRANSPORT_FAILURE_MESSAGE if e.kind == "transport" else e.message
                partial = await self._commit(state.owned, patron, tickets) if tickets else None
                return BookingError(message, kind=e.kind, seat=seat, partial=partial)

            record_booking_attempt("success")
            logger.info("seat_booked", seat=label, ticket_id=tickets[-1].ticket_id)

        receipt = await self._commit(state.owned, patron, tickets)
        logger.info(
            "booking_confirmed",
            seats=[t.seat_title for t in tickets],
            owned_total=len(receipt.owned.seats),
        )
        return receipt

    async def _commit(
        self,
        owned: Optional[OwnedSeatRecord],
        patron: Patron,
        tickets: list[OwnedSeat],
    ) -> BookingReceipt:
        # Merge into the stored record: the in-memory one may have seats hidden
        # by a fallback layout.
        stored = await self.repository.load()
        merged = merge_owned(stored if stored is not None else owned, patron, tickets)
        await self.repository.save(merged)
        return BookingReceipt(tickets=tuple(tickets), owned=merged)

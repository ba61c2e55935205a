"""
Cancellation coordinator.

Cancels one ticket per call. A patron may queue several owned seats for
cancellation, but only one ticket is submitted per invocation; there is
no batch cancel in the inventory protocol.
"""

from dataclasses import dataclass
from typing import Optional, Union

from seatbooking.core.logging import get_logger
from seatbooking.core.metrics import record_cancellation_attempt
from seatbooking.infrastructure.inventory_client import InventoryClient, InventoryError
from seatbooking.schemas.booking import OwnedSeat, OwnedSeatRecord
from seatbooking.services.interfaces.repository import OwnedSeatRepository
from seatbooking.services.reservation_state import remove_owned_ticket

logger = get_logger(__name__)

TRANSPORT_FAILURE_MESSAGE = "Failed to cancel booking. Please try again."


@dataclass(frozen=True)
class CancellationReceipt:
    seat: OwnedSeat
    owned: OwnedSeatRecord


@dataclass(frozen=True)
class CancellationError:
    message: str
    kind: str  # precondition, conflict, rejected, transport


CancellationResult = Union[CancellationReceipt, CancellationError]


class CancellationCoordinator:

    def __init__(self, client: InventoryClient, repository: OwnedSeatRepository):
        self.client = client
        self.repository = repository

    async def cancel(self, owned: Optional[OwnedSeatRecord], ticket_id: str) -> CancellationResult:
        seat = owned.find_ticket(ticket_id) if owned else None
        if seat is None:
            record_cancellation_attempt("precondition")
            logger.info("cancellation_rejected_locally", ticket_id=ticket_id)
            return CancellationError(f"Ticket {ticket_id} is not one of your bookings.", kind="precondition")

        try:
            await self.client.cancel_ticket(ticket_id)
        except InventoryError as e:
            record_cancellation_attempt("error" if e.kind == "transport" else "rejected")
            logger.warning(
                "cancellation_failed",
                ticket_id=ticket_id,
                seat=seat.seat_title,
                kind=e.kind,
                status_code=e.status_code,
                detail=e.message,
            )
            message = TRANSPORT_FAILURE_MESSAGE if e.kind == "transport" else e.message
            return CancellationError(message, kind=e.kind)

        stored = await self.repository.load()
        updated = remove_owned_ticket(stored if stored is not None else owned, ticket_id)
        await self.repository.save(updated)

        record_cancellation_attempt("success")
        logger.info(
            "booking_cancelled",
            ticket_id=ticket_id,
            seat=seat.seat_title,
            owned_remaining=len(updated.seats),
        )
        return CancellationReceipt(seat=seat, owned=updated)

"""
Seat booking session: the single owner of the patron's reservation state.

Presentation code reads `session.state` and calls the methods below; it
never mutates state directly. Every change is a whole-object swap of an
immutable ReservationState.

Mutating network operations (refresh, book, cancel) are serialized by one
asyncio.Lock, so two of them never interleave their updates. Every
committed booking or cancellation is followed by a fresh snapshot and a
reconciliation pass before the lock is released.
"""

import asyncio
from collections.abc import Sequence
from dataclasses import replace
from typing import Optional

from seatbooking.core.logging import get_logger
from seatbooking.core.metrics import record_pruned_seats
from seatbooking.schemas.booking import Patron
from seatbooking.services.booking_service import BookingCoordinator, BookingError, BookingResult
from seatbooking.services.cancellation_service import (
    CancellationCoordinator,
    CancellationError,
    CancellationReceipt,
    CancellationResult,
)
from seatbooking.services.interfaces.repository import OwnedSeatRepository
from seatbooking.services.layout_loader import LayoutLoader
from seatbooking.services.reconciliation import reconcile
from seatbooking.services.reservation_state import (
    ReservationState,
    apply_snapshot,
    clear_cancel_selection,
    clear_selection,
    toggle_cancel_seat,
    toggle_seat,
)
from seatbooking.services.seat_state_machine import FlowVariant

logger = get_logger(__name__)


class SeatBookingSession:

    def __init__(
        self,
        loader: LayoutLoader,
        booking: BookingCoordinator,
        cancellation: CancellationCoordinator,
        repository: OwnedSeatRepository,
        flow: FlowVariant = FlowVariant.SINGLE,
    ):
        self.loader = loader
        self.booking = booking
        self.cancellation = cancellation
        self.repository = repository
        self._state = ReservationState(flow=flow)
        self._lock = asyncio.Lock()

    @property
    def state(self) -> ReservationState:
        return self._state

    @property
    def loaded(self) -> bool:
        return self._state.layout is not None

    # Snapshot / reconciliation

    async def refresh(self) -> ReservationState:
        async with self._lock:
            return await self._refresh()

    async def _refresh(self) -> ReservationState:
        loaded = await self.loader.load()

        persisted = await self.repository.load()
        owned = persisted if persisted is not None else self._state.owned

        result = reconcile(loaded.snapshot, owned)
        if result.changed:
            logger.info(
                "owned_seats_pruned",
                seats=list(result.pruned),
                degraded=loaded.degraded,
            )
            if loaded.degraded:
                # A fallback layout is not authoritative: hide the stale seats
                # from this view but keep the stored tickets.
                logger.warning("owned_seats_prune_not_persisted", reason="degraded_layout")
            else:
                record_pruned_seats(len(result.pruned))
                await self.repository.save(result.owned)

        self._state = apply_snapshot(self._state, loaded.snapshot, result, degraded=loaded.degraded)
        return self._state

    # Selection

    def toggle(self, seat: int) -> ReservationState:
        """Toggle a seat: owned seats go to the cancellation set, others to the booking set."""
        if seat in self._state.owned_seat_numbers:
            self._state = toggle_cancel_seat(self._state, seat)
        else:
            self._state = toggle_seat(self._state, seat)
        return self._state

    def clear_selection(self) -> ReservationState:
        self._state = clear_selection(self._state)
        return self._state

    def clear_cancel_selection(self) -> ReservationState:
        self._state = clear_cancel_selection(self._state)
        return self._state

    # Commits

    async def book(self, patron: Patron, selection: Optional[Sequence[int]] = None) -> BookingResult:
        async with self._lock:
            seats = tuple(self._state.selected if selection is None else selection)
            result = await self.booking.book(self._state, seats, patron)

            receipt = result.partial if isinstance(result, BookingError) else result
            if receipt is not None:
                booked_now = {ticket.seat_number for ticket in receipt.tickets}
                self._state = replace(
                    self._state,
                    owned=receipt.owned,
                    booked=self._state.booked | booked_now,
                    selected=tuple(s for s in self._state.selected if s not in booked_now),
                )

            if not (isinstance(result, BookingError) and result.kind == "precondition"):
                await self._refresh()
            return result

    async def cancel(self, ticket_id: str) -> CancellationResult:
        async with self._lock:
            return await self._cancel(ticket_id)

    async def _cancel(self, ticket_id: str) -> CancellationResult:
        result = await self.cancellation.cancel(self._state.owned, ticket_id)
        if isinstance(result, CancellationReceipt):
            seat = result.seat.seat_number
            self._state = replace(
                self._state,
                owned=result.owned,
                booked=self._state.booked - {seat},
                selected=(),
                cancel_selected=(),
            )
            await self._refresh()
        return result

    async def cancel_selected(self) -> CancellationResult:
        """Cancel the first seat queued for cancellation."""
        async with self._lock:
            state = self._state
            if not state.cancel_selected:
                return CancellationError("No seat selected for cancellation.", kind="precondition")
            seat = state.owned.find_seat(state.cancel_selected[0]) if state.owned else None
            if seat is None:
                return CancellationError("Selected seat is not one of your bookings.", kind="precondition")
            return await self._cancel(seat.ticket_id)

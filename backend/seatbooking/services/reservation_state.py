"""
Local reservation state.

ReservationState is immutable. Each transition returns a new instance, and
the session swaps the whole object in one assignment, so no partially
applied update is ever visible to readers.
"""

from dataclasses import dataclass, field, replace
from typing import Optional

from seatbooking.schemas.booking import OwnedSeat, OwnedSeatRecord, Patron
from seatbooking.schemas.layout import LayoutSnapshot
from seatbooking.services.reconciliation import ReconciliationResult
from seatbooking.services.seat_codec import to_label
from seatbooking.services.seat_state_machine import (
    FlowVariant,
    SeatState,
    can_select,
    can_select_for_cancel,
    seat_state,
    toggle,
)


@dataclass(frozen=True)
class ReservationState:
    flow: FlowVariant = FlowVariant.SINGLE
    layout: Optional[LayoutSnapshot] = None
    degraded: bool = False
    selected: tuple[int, ...] = ()
    cancel_selected: tuple[int, ...] = ()
    booked: frozenset[int] = field(default_factory=frozenset)
    owned: Optional[OwnedSeatRecord] = None

    @property
    def cols(self) -> int:
        if self.layout is None:
            raise RuntimeError("Layout has not been loaded yet")
        return self.layout.cols

    @property
    def owned_seat_numbers(self) -> frozenset[int]:
        if self.owned is None:
            return frozenset()
        return self.owned.seat_numbers

    def contains(self, seat: int) -> bool:
        return self.layout is not None and 0 <= seat < self.layout.seat_count

    def seat_state(self, seat: int) -> SeatState:
        return seat_state(
            seat,
            booked=self.booked,
            owned=self.owned_seat_numbers,
            selected=self.selected,
            cancel_selected=self.cancel_selected,
        )

    def seat_map(self) -> list[tuple[int, str, SeatState]]:
        if self.layout is None:
            return []
        return [
            (index, to_label(index, self.layout.cols), self.seat_state(index))
            for index in range(self.layout.seat_count)
        ]


def toggle_seat(state: ReservationState, seat: int) -> ReservationState:
    """Toggle seat in the booking selection. Guard failures are no-ops."""
    if not state.contains(seat):
        return state
    if not can_select(seat, state.booked, state.owned_seat_numbers, state.selected, state.flow):
        return state
    return replace(state, selected=toggle(state.selected, seat))


def toggle_cancel_seat(state: ReservationState, seat: int) -> ReservationState:
    """Toggle an owned seat in the cancellation selection. Guard failures are no-ops."""
    if not state.contains(seat):
        return state
    if not can_select_for_cancel(seat, state.booked, state.owned_seat_numbers, state.cancel_selected):
        return state
    return replace(state, cancel_selected=toggle(state.cancel_selected, seat))


def clear_selection(state: ReservationState) -> ReservationState:
    return replace(state, selected=())


def clear_cancel_selection(state: ReservationState) -> ReservationState:
    return replace(state, cancel_selected=())


def apply_snapshot(
    state: ReservationState,
    snapshot: LayoutSnapshot,
    result: ReconciliationResult,
    degraded: bool = False,
) -> ReservationState:
    """
    Fold a reconciled snapshot into the state.

    Selections that the new snapshot invalidates are dropped: selected seats
    that are now booked or out of range, and queued cancellations for seats
    the patron no longer owns.
    """
    owned_numbers = result.owned.seat_numbers if result.owned else frozenset()
    seat_count = snapshot.seat_count
    selected = tuple(
        s for s in state.selected
        if s < seat_count and s not in result.booked and s not in owned_numbers
    )
    cancel_selected = tuple(
        s for s in state.cancel_selected
        if s in owned_numbers and s in result.booked
    )
    return replace(
        state,
        layout=snapshot,
        degraded=degraded,
        booked=result.booked,
        owned=result.owned,
        selected=selected,
        cancel_selected=cancel_selected,
    )


def merge_owned(
    owned: Optional[OwnedSeatRecord],
    patron: Patron,
    tickets: list[OwnedSeat],
) -> OwnedSeatRecord:
    """
    Merge newly issued tickets into the owned-seat record.

    The first booking creates the record. Later bookings append to it, so
    tickets bought earlier (in this session or a previous one) are kept.
    """
    if owned is None:
        return OwnedSeatRecord(name=patron.name, email=patron.email, seats=tuple(tickets))
    return owned.model_copy(update={"seats": (*owned.seats, *tickets)})


def remove_owned_ticket(owned: OwnedSeatRecord, ticket_id: str) -> OwnedSeatRecord:
    return owned.model_copy(
        update={"seats": tuple(seat for seat in owned.seats if seat.ticket_id != ticket_id)}
    )

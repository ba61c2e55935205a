"""
Reconciliation of local ownership state against a fresh layout snapshot.

RECONCILIATION STRATEGY
=======================

The inventory service is the only authority on which seats are booked.
The patron's owned-seat record is a client-side cache that can go stale:
a ticket may have been cancelled from another tab, by staff, or expired.

On every snapshot:
  1. Walk snapshot.seats in enumeration order. Position = seat index.
     Every value other than the literal "available" marks the seat booked.
     Keys are not parsed: the service guarantees row-major key order.
  2. Keep only the owned seats whose seat number is still booked.
     Anything else is forgotten, however it was cancelled.
  3. Hand back a complete new record. Callers persist it and swap it in
     as a whole, so no reader ever sees a half-pruned record.

The engine itself is pure: no I/O, no mutation of its inputs.
"""

from dataclasses import dataclass
from typing import Optional

from seatbooking.schemas.booking import OwnedSeatRecord
from seatbooking.schemas.layout import AVAILABLE, LayoutSnapshot


@dataclass(frozen=True)
class ReconciliationResult:
    booked: frozenset[int]
    owned: Optional[OwnedSeatRecord]
    pruned: tuple[int, ...] = ()

    @property
    def changed(self) -> bool:
        return bool(self.pruned)


def booked_set(snapshot: LayoutSnapshot) -> frozenset[int]:
    return frozenset(
        index
        for index, value in enumerate(snapshot.seats.values())
        if value != AVAILABLE
    )


def prune_owned(
    owned: Optional[OwnedSeatRecord],
    booked: frozenset[int],
) -> tuple[Optional[OwnedSeatRecord], tuple[int, ...]]:
    if owned is None:
        return None, ()
    kept = tuple(seat for seat in owned.seats if seat.seat_number in booked)
    pruned = tuple(seat.seat_number for seat in owned.seats if seat.seat_number not in booked)
    if not pruned:
        return owned, ()
    return owned.model_copy(update={"seats": kept}), pruned


def reconcile(
    snapshot: LayoutSnapshot,
    owned: Optional[OwnedSeatRecord],
) -> ReconciliationResult:
    booked = booked_set(snapshot)
    pruned_owned, pruned = prune_owned(owned, booked)
    return ReconciliationResult(booked=booked, owned=pruned_owned, pruned=pruned)

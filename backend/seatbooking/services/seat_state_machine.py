"""
Per-seat selection state machine.

    AVAILABLE -> SELECTED -> (BOOKED_BY_ME | AVAILABLE)
    BOOKED_BY_ME -> CANCEL_SELECTED -> (AVAILABLE | BOOKED_BY_ME)
    BOOKED_BY_OTHER is never selectable.

A seat's state is never stored; it is derived from set membership
(booked, owned, selected, cancel-selected). The guards below are pure
predicates over those sets so they can be checked without any rendering
or network code involved.

Two flow variants exist:
  - SINGLE: at most one seat may be pending at a time (booking and
    cancellation each hold at most one seat).
  - MULTI: any subset of available, non-owned seats may be selected.
    Cancellation stays one-at-a-time in both variants.
"""

from collections.abc import Collection
from enum import Enum


class SeatState(str, Enum):
    AVAILABLE = "available"
    SELECTED = "selected"
    BOOKED_BY_ME = "booked_by_me"
    CANCEL_SELECTED = "cancel_selected"
    BOOKED_BY_OTHER = "booked_by_other"


class FlowVariant(str, Enum):
    SINGLE = "single"
    MULTI = "multi"


def seat_state(
    seat: int,
    booked: Collection[int],
    owned: Collection[int],
    selected: Collection[int],
    cancel_selected: Collection[int],
) -> SeatState:
    if seat in owned and seat in booked:
        if seat in cancel_selected:
            return SeatState.CANCEL_SELECTED
        return SeatState.BOOKED_BY_ME
    if seat in booked:
        return SeatState.BOOKED_BY_OTHER
    if seat in selected:
        return SeatState.SELECTED
    return SeatState.AVAILABLE


def can_select(
    seat: int,
    booked: Collection[int],
    owned: Collection[int],
    selected: Collection[int],
    flow: FlowVariant,
) -> bool:
    """Guard for AVAILABLE <-> SELECTED toggles."""
    if seat in booked or seat in owned:
        return False
    if seat in selected:
        # Toggling off is always allowed
        return True
    if flow is FlowVariant.SINGLE:
        return len(selected) == 0
    return True


def can_select_for_cancel(
    seat: int,
    booked: Collection[int],
    owned: Collection[int],
    cancel_selected: Collection[int],
) -> bool:
    """Guard for BOOKED_BY_ME <-> CANCEL_SELECTED toggles."""
    if seat not in owned or seat not in booked:
        return False
    if not cancel_selected:
        return True
    return len(cancel_selected) == 1 and seat in cancel_selected


def toggle(seq: tuple[int, ...], seat: int) -> tuple[int, ...]:
    """Add seat to the end of seq, or remove it if already present."""
    if seat in seq:
        return tuple(s for s in seq if s != seat)
    return (*seq, seat)

"""
End-to-end tests of the seat booking session against the in-process
inventory service: booking, merging, cancellation, concurrent patrons and
reconciliation after out-of-band changes.
"""

import asyncio

import httpx
import pytest

from seatbooking.infrastructure.inventory_client import InventoryClient
from seatbooking.infrastructure.memory_repository import InMemoryOwnedSeatRepository
from seatbooking.main import build_session
from seatbooking.schemas.booking import OwnedSeat, OwnedSeatRecord, Patron
from seatbooking.services.booking_service import BookingError, BookingReceipt
from seatbooking.services.cancellation_service import CancellationError, CancellationReceipt
from seatbooking.services.seat_state_machine import SeatState


@pytest.mark.asyncio
async def test_initial_refresh(hall, session):
    state = await session.refresh()
    assert state.booked == {3, 5}
    assert state.seat_state(0) is SeatState.AVAILABLE
    assert state.seat_state(3) is SeatState.BOOKED_BY_OTHER
    assert not state.degraded


@pytest.mark.asyncio
async def test_book_then_book_again_then_cancel(inventory, session, repository, patron):
    await session.refresh()

    session.toggle(0)
    first = await session.book(patron)
    assert isinstance(first, BookingReceipt)
    state = session.state
    assert state.selected == ()
    assert state.seat_state(0) is SeatState.BOOKED_BY_ME
    assert state.owned.model_dump(by_alias=True)["seats"] == (
        {"seatNumber": 0, "ticketId": "T1", "seatTitle": "A1"},
    )

    session.toggle(5)
    second = await session.book(patron)
    assert isinstance(second, BookingReceipt)
    seats = session.state.owned.seats
    assert len(seats) == 2
    assert seats[0] == OwnedSeat(seat_number=0, ticket_id="T1", seat_title="A1")
    assert seats[1] == OwnedSeat(seat_number=5, ticket_id="T2", seat_title="B2")
    assert session.state.booked == {0, 5}

    cancelled = await session.cancel("T1")
    assert isinstance(cancelled, CancellationReceipt)
    assert [s.seat_number for s in session.state.owned.seats] == [5]
    assert session.state.booked == {5}
    assert repository.record == session.state.owned


@pytest.mark.asyncio
async def test_single_flow_blocks_second_selection(inventory, session):
    await session.refresh()
    session.toggle(0)
    session.toggle(1)
    assert session.state.selected == (0,)
    session.toggle(0)
    assert session.state.selected == ()


@pytest.mark.asyncio
async def test_multi_flow_books_all_selected(inventory, multi_session, patron):
    await multi_session.refresh()
    for seat in (0, 1, 11):
        multi_session.toggle(seat)

    result = await multi_session.book(patron)

    assert isinstance(result, BookingReceipt)
    assert [t.seat_title for t in result.tickets] == ["A1", "A2", "C4"]
    assert multi_session.state.booked == {0, 1, 11}
    assert multi_session.state.selected == ()


@pytest.mark.asyncio
async def test_concurrent_patrons_same_seat(inventory, inventory_app, settings):
    """Two patrons see A1 free; only the first booking wins and the loser's view heals."""
    clients = [
        InventoryClient("http://inventory.test", transport=httpx.ASGITransport(app=inventory_app))
        for _ in range(2)
    ]
    alice = build_session(settings, clients[0], InMemoryOwnedSeatRepository())
    bob = build_session(settings, clients[1], InMemoryOwnedSeatRepository())
    await alice.refresh()
    await bob.refresh()
    alice.toggle(0)
    bob.toggle(0)

    won = await alice.book(Patron(name="Alice", email="alice@x.com"))
    lost = await bob.book(Patron(name="Bob", email="bob@x.com"))

    assert isinstance(won, BookingReceipt)
    assert isinstance(lost, BookingError)
    assert lost.kind == "conflict"
    assert bob.state.owned is None
    assert bob.state.selected == ()
    assert bob.state.seat_state(0) is SeatState.BOOKED_BY_OTHER
    for client in clients:
        await client.close()


@pytest.mark.asyncio
async def test_refresh_prunes_seats_cancelled_elsewhere(inventory, session, repository, patron):
    await session.refresh()
    session.toggle(2)
    await session.book(patron)
    assert session.state.owned_seat_numbers == {2}

    # Cancelled from another tab
    await inventory.cancel("T1")
    state = await session.refresh()

    assert state.owned.seats == ()
    assert state.seat_state(2) is SeatState.AVAILABLE
    assert repository.record.seats == ()


@pytest.mark.asyncio
async def test_persisted_record_reconciled_on_load(hall, inventory_client, settings):
    """A record left over from a previous run is pruned against the live layout."""
    stale = OwnedSeatRecord(
        name="Pedro",
        email="p@x.com",
        seats=(
            OwnedSeat(seat_number=3, ticket_id="T1", seat_title="A4"),
            OwnedSeat(seat_number=0, ticket_id="OLD", seat_title="A1"),
        ),
    )
    repository = InMemoryOwnedSeatRepository(stale)
    session = build_session(settings, inventory_client, repository)

    state = await session.refresh()

    assert [s.seat_number for s in state.owned.seats] == [3]
    assert state.seat_state(3) is SeatState.BOOKED_BY_ME
    assert [s.seat_number for s in repository.record.seats] == [3]


@pytest.mark.asyncio
async def test_degraded_layout_does_not_erase_stored_tickets(settings, transport_raising):
    record = OwnedSeatRecord(
        name="Pedro",
        email="p@x.com",
        seats=(OwnedSeat(seat_number=0, ticket_id="T1", seat_title="A1"),),
    )
    repository = InMemoryOwnedSeatRepository(record)
    client = InventoryClient("http://inventory.test", transport=transport_raising(httpx.ConnectError("down")))
    session = build_session(settings, client, repository)

    state = await session.refresh()

    assert state.degraded
    assert state.owned.seats == ()
    assert repository.record == record
    assert repository.saves == 0
    await client.close()


@pytest.mark.asyncio
async def test_failed_booking_refreshes_and_keeps_owned(inventory, session, repository, patron):
    await session.refresh()
    session.toggle(0)
    await inventory.book("A1", "rival", "rival@x.com")

    result = await session.book(patron)

    assert isinstance(result, BookingError)
    assert result.message == "Seat A1 is already booked"
    assert session.state.owned is None
    assert session.state.booked == {0}
    assert repository.saves == 0


@pytest.mark.asyncio
async def test_cancel_selected_cancels_only_first(inventory, multi_session, patron):
    await multi_session.refresh()
    multi_session.toggle(0)
    multi_session.toggle(1)
    await multi_session.book(patron)

    multi_session.toggle(1)
    multi_session.toggle(0)  # ignored: one cancellation at a time
    assert multi_session.state.cancel_selected == (1,)

    result = await multi_session.cancel_selected()

    assert isinstance(result, CancellationReceipt)
    assert result.seat.seat_title == "A2"
    assert multi_session.state.owned_seat_numbers == {0}
    assert multi_session.state.cancel_selected == ()


@pytest.mark.asyncio
async def test_cancel_selected_with_empty_queue(inventory, session):
    await session.refresh()
    result = await session.cancel_selected()
    assert isinstance(result, CancellationError)
    assert result.kind == "precondition"


@pytest.mark.asyncio
async def test_rejected_cancel_leaves_state(inventory, session, patron):
    await session.refresh()
    session.toggle(0)
    await session.book(patron)
    before = session.state

    await inventory.cancel("T1")  # gone server-side, not yet refreshed
    result = await session.cancel("T1")

    assert isinstance(result, CancellationError)
    assert session.state is before


def layout_down_transport(ticket: str = "NEW") -> httpx.MockTransport:
    """Inventory whose layout endpoint is unreachable but which still books and cancels."""
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/layout":
            raise httpx.ConnectError("down")
        if request.method == "POST":
            return httpx.Response(201, json={"ticket": ticket})
        return httpx.Response(200, json={"message": "cancelled"})
    return httpx.MockTransport(handler)


@pytest.mark.asyncio
async def test_booking_on_fallback_layout_keeps_hidden_tickets(settings, patron):
    record = OwnedSeatRecord(
        name="Pedro",
        email="p@x.com",
        seats=(OwnedSeat(seat_number=7, ticket_id="OLD", seat_title="B4"),),
    )
    repository = InMemoryOwnedSeatRepository(record)
    client = InventoryClient("http://inventory.test", transport=layout_down_transport())
    session = build_session(settings, client, repository)

    state = await session.refresh()
    assert state.degraded
    assert state.owned.seats == ()

    session.toggle(0)
    result = await session.book(patron)

    assert isinstance(result, BookingReceipt)
    assert [s.ticket_id for s in repository.record.seats] == ["OLD", "NEW"]
    await client.close()


@pytest.mark.asyncio
async def test_cancel_on_fallback_layout_keeps_hidden_tickets(settings):
    # A4 is booked in the fallback layout, B4 is not
    record = OwnedSeatRecord(
        name="Pedro",
        email="p@x.com",
        seats=(
            OwnedSeat(seat_number=3, ticket_id="T1", seat_title="A4"),
            OwnedSeat(seat_number=7, ticket_id="OLD", seat_title="B4"),
        ),
    )
    repository = InMemoryOwnedSeatRepository(record)
    client = InventoryClient("http://inventory.test", transport=layout_down_transport())
    session = build_session(settings, client, repository)

    state = await session.refresh()
    assert state.owned_seat_numbers == {3}

    result = await session.cancel("T1")

    assert isinstance(result, CancellationReceipt)
    assert [s.ticket_id for s in repository.record.seats] == ["OLD"]
    await client.close()


@pytest.mark.asyncio
async def test_cancel_selected_reads_queue_under_lock(inventory, multi_session, patron):
    """The queued seat is picked once the session is free, not when the call is made."""
    await multi_session.refresh()
    multi_session.toggle(0)
    multi_session.toggle(1)
    await multi_session.book(patron)
    multi_session.toggle(1)

    async with multi_session._lock:
        pending = asyncio.create_task(multi_session.cancel_selected())
        await asyncio.sleep(0)
        multi_session.clear_cancel_selection()
        multi_session.toggle(0)

    result = await pending

    assert isinstance(result, CancellationReceipt)
    assert result.seat.seat_title == "A1"
    assert multi_session.state.owned_seat_numbers == {1}

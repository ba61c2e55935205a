"""
Tests for the patron-facing API: seat map, toggles, booking, cancellation
and ticket export.
"""

import pytest
from httpx import AsyncClient

PEDRO = {"name": "Pedro", "email": "p@x.com"}


def states(data):
    return {seat["label"]: seat["state"] for seat in data["seats"]}


@pytest.mark.asyncio
async def test_seat_map(hall, client: AsyncClient):
    response = await client.get("/api/v1/seats/")
    assert response.status_code == 200
    data = response.json()
    assert data["rows"] == 3
    assert data["cols"] == 4
    assert data["flow"] == "single"
    assert data["booked"] == [3, 5]
    assert states(data)["A1"] == "available"
    assert states(data)["A4"] == "booked_by_other"
    assert data["owned"] is None
    assert "X-Request-ID" in response.headers


@pytest.mark.asyncio
async def test_toggle_and_guards(hall, client: AsyncClient):
    data = (await client.post("/api/v1/seats/0/toggle")).json()
    assert data["selected"] == [0]
    assert states(data)["A1"] == "selected"

    # Single-seat flow: a second seat is ignored, booked seats too
    assert (await client.post("/api/v1/seats/1/toggle")).json()["selected"] == [0]
    assert (await client.post("/api/v1/seats/3/toggle")).json()["selected"] == [0]

    # Toggle off
    assert (await client.post("/api/v1/seats/0/toggle")).json()["selected"] == []


@pytest.mark.asyncio
async def test_toggle_unknown_seat(hall, client: AsyncClient):
    response = await client.post("/api/v1/seats/12/toggle")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_clear_selection(hall, client: AsyncClient):
    await client.post("/api/v1/seats/0/toggle")
    response = await client.delete("/api/v1/seats/selection")
    assert response.json()["selected"] == []


@pytest.mark.asyncio
async def test_book_selected_seat(inventory, client: AsyncClient, repository):
    await client.post("/api/v1/seats/0/toggle")

    response = await client.post("/api/v1/bookings/", json=PEDRO)

    assert response.status_code == 201
    assert response.json() == {
        "name": "Pedro",
        "email": "p@x.com",
        "tickets": [{"seatNumber": 0, "ticketId": "T1", "seatTitle": "A1"}],
    }
    data = (await client.get("/api/v1/seats/")).json()
    assert states(data)["A1"] == "booked_by_me"
    assert data["owned"]["seats"] == [{"seatNumber": 0, "ticketId": "T1", "seatTitle": "A1"}]
    assert repository.record.seats[0].ticket_id == "T1"


@pytest.mark.asyncio
async def test_book_without_selection(inventory, client: AsyncClient):
    response = await client.post("/api/v1/bookings/", json=PEDRO)
    assert response.status_code == 409
    assert response.json()["detail"] == "Please select at least one seat."


@pytest.mark.asyncio
async def test_book_invalid_patron(inventory, client: AsyncClient):
    await client.post("/api/v1/seats/0/toggle")
    response = await client.post("/api/v1/bookings/", json={"name": "", "email": "nope"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_book_conflict_message_is_verbatim(inventory, client: AsyncClient):
    await client.get("/api/v1/seats/")
    await client.post("/api/v1/seats/0/toggle")
    await inventory.book("A1", "rival", "rival@x.com")

    response = await client.post("/api/v1/bookings/", json=PEDRO)

    assert response.status_code == 409
    assert response.json()["detail"] == "Seat A1 is already booked"
    data = (await client.get("/api/v1/seats/")).json()
    assert states(data)["A1"] == "booked_by_other"
    assert data["selected"] == []


@pytest.mark.asyncio
async def test_cancel_selected_seat(inventory, client: AsyncClient):
    await client.post("/api/v1/seats/0/toggle")
    await client.post("/api/v1/bookings/", json=PEDRO)

    data = (await client.post("/api/v1/seats/0/toggle")).json()
    assert data["cancel_selected"] == [0]
    assert states(data)["A1"] == "cancel_selected"

    response = await client.delete("/api/v1/bookings/selected")
    assert response.status_code == 200
    assert response.json() == {
        "message": "Booking cancelled successfully",
        "ticket_id": "T1",
        "seat_title": "A1",
    }
    data = (await client.get("/api/v1/seats/")).json()
    assert states(data)["A1"] == "available"
    assert data["owned"]["seats"] == []


@pytest.mark.asyncio
async def test_cancel_with_nothing_selected(inventory, client: AsyncClient):
    response = await client.delete("/api/v1/bookings/selected")
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_cancel_foreign_ticket(hall, client: AsyncClient):
    response = await client.delete("/api/v1/bookings/T1")
    assert response.status_code == 409
    data = (await client.get("/api/v1/seats/")).json()
    assert states(data)["A4"] == "booked_by_other"


@pytest.mark.asyncio
async def test_export_ticket(inventory, client: AsyncClient):
    await client.post("/api/v1/seats/5/toggle")
    await client.post("/api/v1/bookings/", json=PEDRO)

    text = await client.get("/api/v1/tickets/T1")
    assert text.status_code == 200
    assert text.headers["content-type"].startswith("text/plain")
    assert text.headers["content-disposition"] == 'attachment; filename="ticket-T1.txt"'
    assert "Ticket ID: T1" in text.text
    assert "Cinema: Test Cinema" in text.text
    assert "B2" in text.text

    as_json = await client.get("/api/v1/tickets/T1", params={"format": "json"})
    assert as_json.status_code == 200
    assert as_json.json()["seatsBooked"] == ["B2"]
    assert as_json.json()["movie"] == "Test Movie"


@pytest.mark.asyncio
async def test_export_unknown_ticket(inventory, client: AsyncClient):
    response = await client.get("/api/v1/tickets/NOPE")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_health(inventory, client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_metrics_endpoint(inventory, client: AsyncClient):
    await client.get("/api/v1/seats/")
    response = await client.get("/metrics")
    assert response.status_code == 200
    assert "layout_loads_total" in response.text

"""
Seat Inventory Service - reference implementation of the remote inventory API.

Serves one hall. Used for local development, integration tests and the
locust suite:

    uvicorn seatbooking.inventory.app:app --port 8080
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status

from seatbooking.api.middleware import RequestLoggingMiddleware
from seatbooking.core.config import get_settings
from seatbooking.core.logging import get_logger, setup_logging
from seatbooking.core.metrics import metrics_endpoint
from seatbooking.inventory.store import SeatInventory
from seatbooking.schemas.booking import BookSeatRequest, BookSeatResponse
from seatbooking.schemas.layout import LayoutSnapshot, SeatStatusResponse


def create_inventory_app(inventory: SeatInventory) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging()
        get_logger(__name__).info(
            "inventory_starting",
            rows=inventory.rows,
            cols=inventory.cols,
        )
        yield
        get_logger(__name__).info("inventory_shutdown", booked=inventory.booked_count)

    app = FastAPI(
        title="Seat Inventory Service",
        description="Seat layout, booking and cancellation for one hall",
        lifespan=lifespan,
    )
    app.state.inventory = inventory
    app.add_middleware(RequestLoggingMiddleware)

    @app.get("/layout", response_model=LayoutSnapshot, tags=["Inventory"])
    async def get_layout(request: Request):
        return request.app.state.inventory.layout()

    @app.post(
        "/book",
        response_model=BookSeatResponse,
        status_code=status.HTTP_201_CREATED,
        tags=["Inventory"],
    )
    async def book_seat(payload: BookSeatRequest, request: Request):
        """Book one seat. 409 if another patron holds it already."""
        ticket = await request.app.state.inventory.book(payload.seat_code, payload.username, payload.email)
        return BookSeatResponse(ticket=ticket.ticket_id)

    @app.delete("/book/{ticket_id}", tags=["Inventory"])
    async def cancel_ticket(ticket_id: str, request: Request):
        ticket = await request.app.state.inventory.cancel(ticket_id)
        return {"success": True, "ticketId": ticket.ticket_id}

    @app.get("/seats/{code}", response_model=SeatStatusResponse, tags=["Debug"])
    async def get_seat(code: str, request: Request):
        return request.app.state.inventory.seat(code)

    @app.get("/metrics", include_in_schema=False)
    async def metrics():
        return metrics_endpoint()

    return app


settings = get_settings()
app = create_inventory_app(SeatInventory(settings.INVENTORY_ROWS, settings.INVENTORY_COLS))

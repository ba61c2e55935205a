"""
Cinema Seat Booking API - Main Application Entry Point

Serves one patron's view of a cinema hall on top of a remote seat
inventory service:
- Seat map with per-seat state (available, selected, booked by me/others)
- Booking and cancellation through typed coordinators
- Reconciliation of owned tickets against every fresh layout snapshot
- Structured logging with request correlation
"""

from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from seatbooking.api.middleware import RequestLoggingMiddleware
from seatbooking.api.router import api_router
from seatbooking.core.config import Settings, get_settings
from seatbooking.core.logging import get_logger, setup_logging
from seatbooking.core.metrics import metrics_endpoint
from seatbooking.infrastructure.inventory_client import InventoryClient
from seatbooking.infrastructure.redis_repository import RedisOwnedSeatRepository
from seatbooking.services.booking_service import BookingCoordinator
from seatbooking.services.booking_session import SeatBookingSession
from seatbooking.services.cancellation_service import CancellationCoordinator
from seatbooking.services.interfaces.repository import OwnedSeatRepository
from seatbooking.services.layout_loader import LayoutLoader
from seatbooking.services.repository_factory import get_repository_for
from seatbooking.services.seat_state_machine import FlowVariant


def build_session(
    settings: Settings,
    client: InventoryClient,
    repository: OwnedSeatRepository,
) -> SeatBookingSession:
    return SeatBookingSession(
        loader=LayoutLoader(client, use_mock=settings.USE_API_MOCK),
        booking=BookingCoordinator(client, repository),
        cancellation=CancellationCoordinator(client, repository),
        repository=repository,
        flow=FlowVariant(settings.SELECTION_FLOW),
    )


def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    repository: Optional[OwnedSeatRepository] = None,
) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifecycle: startup and shutdown hooks."""
        setup_logging(settings)
        logger = get_logger(__name__)

        logger.info(
            "application_starting",
            app=settings.APP_NAME,
            version=settings.APP_VERSION,
            environment=settings.ENVIRONMENT,
            inventory=settings.inventory_base_url,
            flow=settings.SELECTION_FLOW,
            owned_seats_backend=settings.OWNED_SEATS_BACKEND,
        )

        yield

        await app.state.client.close()
        if isinstance(app.state.repository, RedisOwnedSeatRepository):
            await app.state.repository.close()
        logger.info("application_shutdown")

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Cinema seat selection, booking and cancellation",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    client = InventoryClient(settings.inventory_base_url, transport=transport)
    repository = repository or get_repository_for(settings)
    app.state.settings = settings
    app.state.client = client
    app.state.repository = repository
    app.state.session = build_session(settings, client, repository)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    app.include_router(api_router)

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint for Docker and load balancers."""
        session: SeatBookingSession = app.state.session
        return {
            "status": "healthy",
            "version": settings.APP_VERSION,
            "environment": settings.ENVIRONMENT,
            "layout_loaded": session.loaded,
            "degraded": session.state.degraded,
        }

    @app.get("/metrics", include_in_schema=False)
    async def metrics():
        return metrics_endpoint()

    @app.get("/", tags=["Root"])
    async def root():
        return {
            "message": f"Welcome to {settings.APP_NAME}",
            "version": settings.APP_VERSION,
            "docs": "/docs",
        }

    return app


app = create_app()

"""
Pytest fixtures: an in-process inventory service, clients wired to it
through ASGITransport, and sessions/apps built on top.

Ticket ids are deterministic (T1, T2, ...) so scenarios can assert on them.
"""

import itertools
from typing import AsyncGenerator

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from seatbooking.core.config import Settings
from seatbooking.infrastructure.inventory_client import InventoryClient
from seatbooking.infrastructure.memory_repository import InMemoryOwnedSeatRepository
from seatbooking.inventory.app import create_inventory_app
from seatbooking.inventory.store import SeatInventory
from seatbooking.main import build_session, create_app
from seatbooking.schemas.booking import Patron

INVENTORY_URL = "http://inventory.test"


def make_settings(**overrides) -> Settings:
    values = {
        "INVENTORY_BASE_URL": INVENTORY_URL,
        "USE_API_MOCK": False,
        "SELECTION_FLOW": "single",
        "OWNED_SEATS_BACKEND": "memory",
        "CINEMA_NAME": "Test Cinema",
        "MOVIE_TITLE": "Test Movie",
    }
    values.update(overrides)
    return Settings(**values)


def sequential_ticket_ids():
    counter = itertools.count(1)
    return lambda: f"T{next(counter)}"


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def inventory() -> SeatInventory:
    """Empty 3x4 hall."""
    return SeatInventory(rows=3, cols=4, ticket_id_factory=sequential_ticket_ids())


@pytest_asyncio.fixture
async def hall(inventory: SeatInventory) -> SeatInventory:
    """3x4 hall where another patron holds A4 and B2 (tickets T1, T2)."""
    await inventory.book("A4", "other", "other@x.com")
    await inventory.book("B2", "other", "other@x.com")
    return inventory


@pytest.fixture
def inventory_app(inventory: SeatInventory):
    return create_inventory_app(inventory)


@pytest_asyncio.fixture
async def inventory_http(inventory_app) -> AsyncGenerator[AsyncClient, None]:
    """Raw HTTP client against the inventory service."""
    transport = ASGITransport(app=inventory_app)
    async with AsyncClient(transport=transport, base_url=INVENTORY_URL) as ac:
        yield ac


@pytest_asyncio.fixture
async def inventory_client(inventory_app) -> AsyncGenerator[InventoryClient, None]:
    client = InventoryClient(INVENTORY_URL, transport=ASGITransport(app=inventory_app))
    yield client
    await client.close()


@pytest.fixture
def repository() -> InMemoryOwnedSeatRepository:
    return InMemoryOwnedSeatRepository()


@pytest.fixture
def session(settings, inventory_client, repository):
    return build_session(settings, inventory_client, repository)


@pytest.fixture
def multi_session(inventory_client, repository):
    return build_session(make_settings(SELECTION_FLOW="multi"), inventory_client, repository)


@pytest.fixture
def patron() -> Patron:
    return Patron(name="Pedro", email="p@x.com")


@pytest_asyncio.fixture
async def client(settings, inventory_app, repository) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client for the patron API, whose inventory calls go to the in-process service."""
    app = create_app(settings, transport=ASGITransport(app=inventory_app), repository=repository)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    await app.state.client.close()


def failing_transport(exc: Exception) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        raise exc
    return httpx.MockTransport(handler)


@pytest.fixture
def settings_factory():
    return make_settings


@pytest.fixture
def transport_raising():
    return failing_transport

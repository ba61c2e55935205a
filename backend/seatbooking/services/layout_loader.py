"""
Layout snapshot loader.

Fetches the authoritative layout from the inventory service. Transport
failures are not an error state: the loader substitutes a fixed mock
layout so there is always something to render, and flags the result as
degraded. load() never raises for service problems.
"""

from dataclasses import dataclass

from seatbooking.core.logging import get_logger
from seatbooking.core.metrics import record_layout_load
from seatbooking.infrastructure.inventory_client import InventoryClient, InventoryError
from seatbooking.schemas.layout import LayoutSnapshot

logger = get_logger(__name__)

MOCK_LAYOUT = LayoutSnapshot.model_validate({
    "rows": 3,
    "cols": 4,
    "seats": {
        "a1": "available",
        "a2": "available",
        "a3": "available",
        "a4": {"status": "booked", "ticketId": "MOCK-TICKET-A4"},
        "b1": "available",
        "b2": {"status": "booked", "ticketId": "MOCK-TICKET-B2"},
        "b3": "available",
        "b4": "available",
        "c1": "available",
        "c2": "available",
        "c3": "available",
        "c4": "available",
    },
})


@dataclass(frozen=True)
class LoadedLayout:
    snapshot: LayoutSnapshot
    degraded: bool = False


class LayoutLoader:

    def __init__(self, client: InventoryClient, use_mock: bool = False, fallback: LayoutSnapshot = MOCK_LAYOUT):
        self.client = client
        self.use_mock = use_mock
        self.fallback = fallback

    async def load(self) -> LoadedLayout:
        if self.use_mock:
            record_layout_load("mock")
            return LoadedLayout(self.fallback)

        try:
            snapshot = await self.client.get_layout()
        except InventoryError as e:
            logger.warning("layout_fallback", reason=e.kind, error=e.message)
            record_layout_load("fallback")
            return LoadedLayout(self.fallback, degraded=True)

        record_layout_load("live")
        logger.debug("layout_loaded", rows=snapshot.rows, cols=snapshot.cols)
        return LoadedLayout(snapshot)

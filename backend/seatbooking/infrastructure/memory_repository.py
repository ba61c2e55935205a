"""
Process-local owned-seat repository.
"""

from typing import Optional

from seatbooking.schemas.booking import OwnedSeatRecord
from seatbooking.services.interfaces.repository import OwnedSeatRepository


class InMemoryOwnedSeatRepository(OwnedSeatRepository):

    def __init__(self, record: Optional[OwnedSeatRecord] = None):
        self.record = record
        self.saves = 0

    async def load(self) -> Optional[OwnedSeatRecord]:
        return self.record

    async def save(self, record: OwnedSeatRecord) -> None:
        self.record = record
        self.saves += 1

    async def clear(self) -> None:
        self.record = None

"""
Owned-seat repository interface.
Keeps persistence out of the reservation logic; the session gets one injected.
"""

from abc import ABC, abstractmethod
from typing import Optional

from seatbooking.schemas.booking import OwnedSeatRecord


class OwnedSeatRepository(ABC):
    """
    Storage for the patron's owned-seat record.

    Implementations:
    - FileOwnedSeatRepository: JSON file on disk (one record per profile)
    - RedisOwnedSeatRepository: one key in Redis, shared by several processes
    - InMemoryOwnedSeatRepository: process-local, used in tests and mock mode
    """

    @abstractmethod
    async def load(self) -> Optional[OwnedSeatRecord]:
        """
        Load the persisted record.

        Returns:
            The record, or None if nothing is stored or the stored data
            cannot be parsed.
        """
        pass

    @abstractmethod
    async def save(self, record: OwnedSeatRecord) -> None:
        """Replace the persisted record with this one."""
        pass

    @abstractmethod
    async def clear(self) -> None:
        """Remove the persisted record."""
        pass

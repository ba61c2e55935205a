"""
Owned-seat repository factory.
Configures where the patron's tickets are persisted.
"""

from seatbooking.core.config import Settings
from seatbooking.infrastructure.file_repository import FileOwnedSeatRepository
from seatbooking.infrastructure.memory_repository import InMemoryOwnedSeatRepository
from seatbooking.infrastructure.redis_repository import RedisOwnedSeatRepository
from seatbooking.services.interfaces.repository import OwnedSeatRepository


def get_repository_for(settings: Settings) -> OwnedSeatRepository:
    """
    Build the repository selected by OWNED_SEATS_BACKEND.

    - file: JSON file at OWNED_SEATS_PATH (default)
    - redis: key OWNED_SEATS_KEY at REDIS_URL
    - memory: process-local, lost on restart
    """
    backend = settings.OWNED_SEATS_BACKEND

    if backend == "redis":
        return RedisOwnedSeatRepository.from_url(settings.REDIS_URL, settings.OWNED_SEATS_KEY)
    if backend == "memory":
        return InMemoryOwnedSeatRepository()
    return FileOwnedSeatRepository(settings.OWNED_SEATS_PATH)

"""
Redis-backed owned-seat repository.
Lets several front-end processes for the same patron profile share one record.

Redis failures degrade instead of failing the caller: a failed load reads
as "no record", a failed save is logged and the in-memory state stays
authoritative until the next successful save.
"""

from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from seatbooking.core.logging import get_logger
from seatbooking.infrastructure.serialization import dump_record, load_record
from seatbooking.schemas.booking import OwnedSeatRecord
from seatbooking.services.interfaces.repository import OwnedSeatRepository

logger = get_logger(__name__)


class RedisOwnedSeatRepository(OwnedSeatRepository):

    def __init__(self, client: redis.Redis, key: str):
        self.client = client
        self.key = key

    @classmethod
    def from_url(cls, url: str, key: str) -> "RedisOwnedSeatRepository":
        client = redis.from_url(
            url,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
            retry_on_timeout=True,
        )
        return cls(client, key)

    async def load(self) -> Optional[OwnedSeatRecord]:
        try:
            raw = await self.client.get(self.key)
        except RedisError as e:
            logger.error("owned_seats_load_error", key=self.key, error=str(e))
            return None
        return load_record(raw, source=f"redis:{self.key}")

    async def save(self, record: OwnedSeatRecord) -> None:
        try:
            await self.client.set(self.key, dump_record(record))
            logger.debug("owned_seats_saved", key=self.key, seats=len(record.seats))
        except RedisError as e:
            logger.error("owned_seats_save_error", key=self.key, error=str(e))

    async def clear(self) -> None:
        try:
            await self.client.delete(self.key)
        except RedisError as e:
            logger.error("owned_seats_clear_error", key=self.key, error=str(e))

    async def close(self) -> None:
        await self.client.aclose()

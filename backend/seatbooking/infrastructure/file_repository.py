"""
JSON-file owned-seat repository.
Plays the role browser local storage plays for the web front-end: one
record per profile directory, surviving restarts.
"""

import asyncio
import os
from pathlib import Path
from typing import Optional

from seatbooking.core.logging import get_logger
from seatbooking.infrastructure.serialization import dump_record, load_record
from seatbooking.schemas.booking import OwnedSeatRecord
from seatbooking.services.interfaces.repository import OwnedSeatRepository

logger = get_logger(__name__)


class FileOwnedSeatRepository(OwnedSeatRepository):
    """File I/O runs in a worker thread to keep the event loop free."""

    def __init__(self, path):
        self.path = Path(path)

    def _read(self) -> Optional[str]:
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def _write(self, payload: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Write then rename so a crash never leaves a truncated record behind
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(payload, encoding="utf-8")
        os.replace(tmp_path, self.path)

    async def load(self) -> Optional[OwnedSeatRecord]:
        raw = await asyncio.to_thread(self._read)
        if raw is None:
            return None
        return load_record(raw, source=str(self.path))

    async def save(self, record: OwnedSeatRecord) -> None:
        await asyncio.to_thread(self._write, dump_record(record))
        logger.debug("owned_seats_saved", path=str(self.path), seats=len(record.seats))

    async def clear(self) -> None:
        await asyncio.to_thread(self.path.unlink, missing_ok=True)

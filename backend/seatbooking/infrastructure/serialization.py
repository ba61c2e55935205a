"""
Encoding of the owned-seat record as stored by the repositories.

Stored shape: {"name": ..., "email": ..., "seats": [{"seatNumber", "ticketId", "seatTitle"}]}
"""

import json
from typing import Optional

from pydantic import ValidationError

from seatbooking.core.logging import get_logger
from seatbooking.schemas.booking import OwnedSeatRecord

logger = get_logger(__name__)


def dump_record(record: OwnedSeatRecord) -> str:
    return json.dumps(record.model_dump(mode="json", by_alias=True))


def load_record(raw: Optional[str], source: str) -> Optional[OwnedSeatRecord]:
    if not raw:
        return None
    try:
        return OwnedSeatRecord.model_validate_json(raw)
    except ValidationError as e:
        logger.warning("owned_seats_corrupt", source=source, error=str(e))
        return None

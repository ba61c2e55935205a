"""
Ticket id generation.
Format: TICKET-YYYYMMDD-HHMMSS-XXXXX (XXXXX is random base-36, upper case)
"""

import random
import string
from datetime import datetime, timezone
from typing import Optional

_ALPHABET = string.ascii_uppercase + string.digits


def generate_ticket_id(now: Optional[datetime] = None, rng: Optional[random.Random] = None) -> str:
    now = now or datetime.now(timezone.utc)
    rng = rng or random.SystemRandom()
    suffix = "".join(rng.choices(_ALPHABET, k=5))
    return f"TICKET-{now:%Y%m%d-%H%M%S}-{suffix}"

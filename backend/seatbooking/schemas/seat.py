"""
Pydantic schemas for the seat map view served to the front-end.
"""

from typing import Optional

from pydantic import BaseModel

from seatbooking.schemas.booking import OwnedSeatRecord


class SeatView(BaseModel):
    index: int
    label: str
    state: str


class SeatMapResponse(BaseModel):
    rows: int
    cols: int
    flow: str
    degraded: bool = False
    seats: list[SeatView]
    selected: list[int]
    cancel_selected: list[int]
    booked: list[int]
    owned: Optional[OwnedSeatRecord] = None

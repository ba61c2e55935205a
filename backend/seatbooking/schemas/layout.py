"""
Pydantic schemas for the seat layout snapshot served by the inventory service.

The seat mapping is order-sensitive: the position of a key in the enumeration
is the seat index, so the service must emit keys in row-major order.
"""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

AVAILABLE = "available"


class BookedMarker(BaseModel):
    status: str = "booked"
    ticket_id: str = Field(..., alias="ticketId")

    model_config = ConfigDict(populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _accept_ticket_alias(cls, data):
        if isinstance(data, dict) and "ticketId" not in data and "ticket_id" not in data and "ticket" in data:
            data = {**data, "ticketId": data["ticket"]}
        return data


# Anything other than the literal "available" counts as booked.
SeatValue = Union[BookedMarker, str]


class LayoutSnapshot(BaseModel):
    rows: int = Field(..., gt=0)
    cols: int = Field(..., gt=0)
    seats: dict[str, SeatValue]

    @model_validator(mode="after")
    def _check_seat_count(self) -> "LayoutSnapshot":
        expected = self.rows * self.cols
        if len(self.seats) != expected:
            raise ValueError(
                f"Layout declares {self.rows}x{self.cols} seats but lists {len(self.seats)}"
            )
        return self

    @property
    def seat_count(self) -> int:
        return self.rows * self.cols


class SeatStatusResponse(BaseModel):
    status: str
    ticket: Optional[str] = None

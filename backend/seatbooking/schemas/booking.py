"""
Pydantic schemas for booking-related request/response validation.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class Patron(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr


class OwnedSeat(BaseModel):
    seat_number: int = Field(..., ge=0, alias="seatNumber")
    ticket_id: str = Field(..., alias="ticketId")
    seat_title: str = Field(..., alias="seatTitle")

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class OwnedSeatRecord(BaseModel):
    """Tickets the current patron holds. Persisted across reloads."""

    name: str
    email: str
    seats: tuple[OwnedSeat, ...] = ()

    model_config = ConfigDict(frozen=True)

    @property
    def seat_numbers(self) -> frozenset[int]:
        return frozenset(seat.seat_number for seat in self.seats)

    def find_ticket(self, ticket_id: str) -> Optional[OwnedSeat]:
        return next((seat for seat in self.seats if seat.ticket_id == ticket_id), None)

    def find_seat(self, seat_number: int) -> Optional[OwnedSeat]:
        return next((seat for seat in self.seats if seat.seat_number == seat_number), None)


# Remote inventory wire format

class BookSeatRequest(BaseModel):
    seat_code: str = Field(..., min_length=2, max_length=8, alias="seatCode")
    username: str = Field(..., min_length=1, max_length=100)
    email: EmailStr

    model_config = ConfigDict(populate_by_name=True)


class BookSeatResponse(BaseModel):
    ticket: str


# Patron-facing API

class BookingReceiptResponse(BaseModel):
    name: str
    email: str
    tickets: list[OwnedSeat]

    model_config = ConfigDict(populate_by_name=True)


class CancellationResponse(BaseModel):
    message: str
    ticket_id: str
    seat_title: str


class TicketExport(BaseModel):
    ticket_id: str = Field(..., alias="ticketId")
    cinema: str
    movie: str
    seats_booked: list[str] = Field(..., alias="seatsBooked")
    total_seats: int = Field(..., alias="totalSeats")
    booking_date: datetime = Field(..., alias="bookingDate")
    booking_time: str = Field(..., alias="bookingTime")

    model_config = ConfigDict(populate_by_name=True)

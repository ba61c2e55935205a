"""
HTTP client for the remote seat inventory service.

Endpoints:
  GET    /layout            -> {rows, cols, seats}
  POST   /book              {seatCode, username, email} -> {ticket}
  DELETE /book/{ticketId}   -> 2xx on success
  GET    /seats/{code}      -> {status, ticket?}

No client-side timeout is applied: a hung request simply stays pending.
Every failure is raised as InventoryError so callers handle one type.
"""

from typing import Optional

import httpx
from pydantic import ValidationError

from seatbooking.core.logging import get_logger
from seatbooking.schemas.booking import BookSeatRequest, BookSeatResponse
from seatbooking.schemas.layout import LayoutSnapshot, SeatStatusResponse

logger = get_logger(__name__)


class InventoryError(Exception):
    """
    Failure talking to the inventory service.

    kind:
      transport - the request never produced a response
      conflict  - 409, the seat is already taken
      rejected  - any other non-2xx answer
      invalid   - a 2xx answer whose body could not be parsed
    """

    def __init__(self, message: str, kind: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.status_code = status_code


def _error_message(response: httpx.Response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        for field in ("detail", "message", "error"):
            value = body.get(field)
            if isinstance(value, str) and value:
                return value
    return None


class InventoryClient:

    def __init__(self, base_url: str, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url
        self._client = httpx.AsyncClient(
            base_url=base_url,
            transport=transport,
            timeout=None,
            headers={"Cache-Control": "no-store"},
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "InventoryClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _request(self, method: str, url: str, default_message: str, **kwargs) -> httpx.Response:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("inventory_transport_error", method=method, url=url, error=str(e))
            raise InventoryError(str(e) or type(e).__name__, kind="transport") from e

        if response.is_success:
            return response

        kind = "conflict" if response.status_code == httpx.codes.CONFLICT else "rejected"
        message = _error_message(response) or default_message
        logger.info(
            "inventory_request_rejected",
            method=method,
            url=url,
            status_code=response.status_code,
            detail=message,
        )
        raise InventoryError(message, kind=kind, status_code=response.status_code)

    async def get_layout(self) -> LayoutSnapshot:
        response = await self._request("GET", "/layout", "Failed to load layout")
        try:
            return LayoutSnapshot.model_validate_json(response.content)
        except ValidationError as e:
            raise InventoryError(f"Invalid layout payload: {e}", kind="invalid") from e

    async def book_seat(self, seat_code: str, username: str, email: str) -> str:
        """Book one seat. Returns the ticket id issued for it."""
        payload = BookSeatRequest(seat_code=seat_code, username=username, email=email)
        response = await self._request(
            "POST",
            "/book",
            "Booking failed. Please try again.",
            json=payload.model_dump(by_alias=True),
        )
        try:
            return BookSeatResponse.model_validate_json(response.content).ticket
        except ValidationError as e:
            raise InventoryError("Booking response carried no ticket", kind="invalid") from e

    async def cancel_ticket(self, ticket_id: str) -> None:
        await self._request(
            "DELETE",
            f"/book/{ticket_id}",
            "Cancellation failed. Please try again.",
        )

    async def get_seat(self, code: str) -> SeatStatusResponse:
        response = await self._request("GET", f"/seats/{code}", f"Seat {code} not found")
        try:
            return SeatStatusResponse.model_validate_json(response.content)
        except ValidationError as e:
            raise InventoryError(f"Invalid seat payload: {e}", kind="invalid") from e

"""HTTP connector forwarding bookings to the downstream system."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from bookbridge.adapters.http_resilience import ResilientClient
from bookbridge.config.downstream import DownstreamConfig, get_downstream_config
from bookbridge.domain.ports.downstream import (
    AlreadyCanceledError,
    BookingConnector,
    DownstreamError,
)

from .schema import BookingBody, CancelBody, ErrorResponse

if TYPE_CHECKING:
    from collections.abc import Callable

    from bookbridge.config.http_resilience import ResilienceConfig
    from bookbridge.domain.types import BookingPayload

log = getLogger(__name__)

ALREADY_CANCELLED = "ALREADY_CANCELLED"


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


def _error_code(response: httpx.Response) -> str | None:
    try:
        return ErrorResponse.model_validate(response.json()).error
    except (ValueError, ValidationError):
        return None


@dataclass(slots=True)
class HttpBookingConnector:
    """Calls the downstream booking API over one shared resilient client.

    The client is opened lazily and must be released with :meth:`aclose`.
    """

    config: DownstreamConfig = field(default_factory=get_downstream_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )
    _client: ResilientClient | None = None

    @property
    def client(self) -> ResilientClient:
        if self._client is None:
            self._client = self.client_factory(self.config.resilience)
        return self._client

    async def create(self, payload: BookingPayload) -> None:
        body = BookingBody.from_payload(payload).to_json()
        response = await self._send("POST", "/bookings", body, "create", payload.booking_id)
        self._check(response, "create", payload.booking_id)

    async def update(self, payload: BookingPayload) -> None:
        body = BookingBody.from_payload(payload).to_json()
        url = f"/bookings/{payload.booking_id}"
        response = await self._send("PUT", url, body, "update", payload.booking_id)
        self._check(response, "update", payload.booking_id)

    async def cancel(self, booking_id: str, canceled_by: str) -> None:
        body = CancelBody(canceled_by=canceled_by).to_json()
        url = f"/bookings/{booking_id}/cancel"
        response = await self._send("POST", url, body, "cancel", booking_id)
        if response.status_code == 400 and _error_code(response) == ALREADY_CANCELLED:
            raise AlreadyCanceledError(
                f"Booking {booking_id} is already canceled", status_code=response.status_code
            )
        self._check(response, "cancel", booking_id)

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _send(
        self,
        method: str,
        url: str,
        body: dict[str, object],
        operation: str,
        booking_id: str,
    ) -> httpx.Response:
        try:
            return await self.client.request(
                method,
                url,
                json=body,
                headers={"Authorization": f"Bearer {self.config.access_token}"},
            )
        except httpx.HTTPError as exc:
            raise DownstreamError(f"Downstream {operation} for {booking_id} failed: {exc}") from exc

    @staticmethod
    def _check(response: httpx.Response, operation: str, booking_id: str) -> None:
        if response.is_success:
            log.debug("Downstream %s for %s returned %s", operation, booking_id, response.status_code)
            return
        message = f"Downstream {operation} for {booking_id} failed with status {response.status_code}"
        code = _error_code(response)
        if code:
            message = f"{message} ({code})"
        raise DownstreamError(message, status_code=response.status_code)


if TYPE_CHECKING:
    _connector_check: BookingConnector = HttpBookingConnector()

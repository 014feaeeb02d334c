from __future__ import annotations

import asyncio
import json
from collections.abc import Callable  # noqa: TC003
from datetime import UTC, datetime

import httpx
import pytest

from bookbridge.adapters.downstream import BookingBody, HttpBookingConnector
from bookbridge.config import DownstreamConfig, ResilienceConfig
from bookbridge.domain.ports import AlreadyCanceledError, BookingConnector, DownstreamError
from bookbridge.domain.types import BookingPayload
from tests.helpers.http import make_client_factory

PAYLOAD = BookingPayload(
    booking_id="B1",
    name="Kim",
    phone="010-1111-2222",
    party_size=2,
    start=datetime(2024, 1, 1, 1, tzinfo=UTC),
    end=datetime(2024, 1, 1, 2, tzinfo=UTC),
    room="5",
    hole="9",
    amount=10_000,
    paid=False,
    site="KimCaddie",
)


def _connector(handler: Callable[[httpx.Request], httpx.Response]) -> HttpBookingConnector:
    config = DownstreamConfig(
        access_token="downstream-token",
        resilience=ResilienceConfig(name="downstream-test", base_url="https://downstream.test"),
    )
    return HttpBookingConnector(config=config, client_factory=make_client_factory(handler))


def test_booking_body_uses_camel_case_aliases() -> None:
    body = BookingBody.from_payload(PAYLOAD).to_json()

    assert body == {
        "externalId": "B1",
        "name": "Kim",
        "phone": "010-1111-2222",
        "partySize": 2,
        "startDate": "2024-01-01T01:00:00Z",
        "endDate": "2024-01-01T02:00:00Z",
        "roomId": "5",
        "hole": "9",
        "paymented": False,
        "paymentAmount": 10_000,
        "crawlingSite": "KimCaddie",
        "immediate": False,
    }


def test_connector_satisfies_port() -> None:
    assert isinstance(_connector(lambda _request: httpx.Response(200)), BookingConnector)


def test_create_update_and_cancel_requests() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"ok": True})

    connector = _connector(handler)

    async def scenario() -> None:
        await connector.create(PAYLOAD)
        await connector.update(PAYLOAD)
        await connector.cancel("B1", "App User")
        await connector.aclose()

    asyncio.run(scenario())

    create, update, cancel = seen
    assert (create.method, create.url.path) == ("POST", "/bookings")
    assert json.loads(create.content)["externalId"] == "B1"
    assert create.headers["Authorization"] == "Bearer downstream-token"
    assert (update.method, update.url.path) == ("PUT", "/bookings/B1")
    assert (cancel.method, cancel.url.path) == ("POST", "/bookings/B1/cancel")
    assert json.loads(cancel.content) == {"canceledBy": "App User"}


def test_cancel_maps_already_cancelled_response() -> None:
    connector = _connector(
        lambda _request: httpx.Response(400, json={"error": "ALREADY_CANCELLED"})
    )

    with pytest.raises(AlreadyCanceledError) as exc:
        asyncio.run(connector.cancel("B1", "App User"))

    assert exc.value.status_code == 400


def test_other_failures_raise_downstream_error() -> None:
    connector = _connector(lambda _request: httpx.Response(400, json={"error": "INVALID_ROOM"}))

    with pytest.raises(DownstreamError) as exc:
        asyncio.run(connector.create(PAYLOAD))

    assert not isinstance(exc.value, AlreadyCanceledError)
    assert exc.value.status_code == 400
    assert "INVALID_ROOM" in str(exc.value)


def test_transport_errors_raise_downstream_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(DownstreamError) as exc:
        asyncio.run(_connector(handler).update(PAYLOAD))

    assert exc.value.status_code is None

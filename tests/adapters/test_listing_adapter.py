from __future__ import annotations

import asyncio
from datetime import UTC, datetime

import httpx
import pytest

from bookbridge.adapters.listing import HttpSnapshotFetcher, parse_listing
from bookbridge.config import ListingConfig, ResilienceConfig
from bookbridge.domain.ports import SnapshotFetchError
from bookbridge.domain.types import BookingState, PaymentInfo
from tests.helpers.http import make_client_factory

FETCHED_AT = datetime(2024, 1, 1, tzinfo=UTC)


@pytest.fixture
def listing_payload() -> dict[str, object]:
    return {
        "results": [
            {
                "book_id": "B1",
                "book_idx": 42,
                "state": "success",
                "name": "Kim",
                "phone": "010-1111-2222",
                "person": "3",
                "start_datetime": "2024-01-01T10:00:00",
                "end_datetime": "2024-01-01T11:00:00",
                "room": 5,
                "customer": 77,
                "customer_detail": {"customerinfo_set": [{"upd_date": "2024-01-01T09:59:30"}]},
                "book_type": "U",
                "confirmed_by": "IM",
                "immediate_booked": True,
                "amount": "5000",
                "revenue_detail": {"amount": "20000", "finished": "true"},
            },
            {
                "book_id": "B2",
                "state": "canceled",
                "payment": {"amount": 8000},
                "is_paid": True,
            },
            {"book_id": "B3", "state": "archived"},
        ]
    }


def _config(store_id: str | None = "S1") -> ListingConfig:
    return ListingConfig(
        access_token="secret",
        store_id=store_id,
        resilience=ResilienceConfig(name="listing-test", base_url="https://listing.test/api"),
    )


def test_parse_listing_translates_records(listing_payload: dict[str, object]) -> None:
    snapshot = parse_listing(listing_payload, fetched_at=FETCHED_AT)

    assert len(snapshot) == 2
    first = snapshot.find("B1")
    assert first is not None
    assert first.state is BookingState.SUCCESS
    assert first.index == "42"
    assert first.party_size == 3
    assert first.room == "5"
    assert first.customer_id == "77"
    assert first.start == datetime(2024, 1, 1, 1, tzinfo=UTC)
    assert first.customer_updated_at == datetime(2024, 1, 1, 0, 59, 30, tzinfo=UTC)
    assert first.is_immediate
    assert first.is_app_booking
    assert first.payment == PaymentInfo(amount=20_000, paid=True)

    second = snapshot.find("B2")
    assert second is not None
    assert second.state.is_canceled
    assert second.payment == PaymentInfo(amount=8000, paid=True)


def test_fetcher_requests_listing_with_bearer_token(
    listing_payload: dict[str, object],
) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=listing_payload)

    fetcher = HttpSnapshotFetcher(
        config=_config(),
        client_factory=make_client_factory(handler),
        clock=lambda: FETCHED_AT,
    )

    snapshot = asyncio.run(fetcher())

    assert snapshot is not None
    assert snapshot.fetched_at == FETCHED_AT
    assert len(snapshot) == 2
    (request,) = seen
    assert request.method == "GET"
    assert request.url.path == "/api/stores/S1/reservation/crawl"
    assert request.headers["Authorization"] == "Bearer secret"


def test_fetcher_without_store_id_returns_none() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    fetcher = HttpSnapshotFetcher(
        config=_config(store_id=None),
        client_factory=make_client_factory(handler),
    )

    assert asyncio.run(fetcher()) is None


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, json={"detail": "boom"}),
        httpx.Response(200, json={"unexpected": []}),
        httpx.Response(200, text="<html>"),
        httpx.Response(200, json={"results": "not a list"}),
    ],
)
def test_fetcher_raises_on_unusable_response(
    response: httpx.Response,
) -> None:
    fetcher = HttpSnapshotFetcher(
        config=_config(),
        client_factory=make_client_factory(lambda _request: response),
    )

    with pytest.raises(SnapshotFetchError):
        asyncio.run(fetcher())


def test_fetcher_keeps_healthy_records_next_to_broken_ones() -> None:
    body = {
        "results": [
            {"state": "success"},
            {"book_id": "B1", "state": None},
            "not a record",
            {"book_id": "B2", "state": "canceling"},
        ]
    }
    fetcher = HttpSnapshotFetcher(
        config=_config(),
        client_factory=make_client_factory(lambda _request: httpx.Response(200, json=body)),
        clock=lambda: FETCHED_AT,
    )

    snapshot = asyncio.run(fetcher())

    assert snapshot is not None
    assert [(booking.booking_id, booking.state) for booking in snapshot] == [
        ("B2", BookingState.CANCELING)
    ]

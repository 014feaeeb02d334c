from __future__ import annotations

import asyncio

import httpx

from bookbridge.adapters.http_resilience import ResilientClient, build_retry
from bookbridge.config import RateLimit, ResilienceConfig, RetryPolicy


def test_retry_policy_leaves_post_to_event_redelivery() -> None:
    retry = build_retry(RetryPolicy())

    assert retry.is_retryable_method("GET")
    assert retry.is_retryable_method("PUT")
    assert not retry.is_retryable_method("POST")
    assert retry.is_retryable_status_code(503)
    assert not retry.is_retryable_status_code(400)
    assert retry.is_retryable_exception(httpx.ConnectTimeout("slow"))


def test_client_applies_base_url_and_headers_without_hooks() -> None:
    config = ResilienceConfig(
        name="listing",
        base_url="https://listing.example",
        default_headers={"X-Client": "bookbridge"},
        ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
    )

    async def scenario() -> None:
        async with ResilientClient(config) as client:
            inner = client._client  # noqa: SLF001  # type: ignore[reportPrivateUsage]
            assert inner.base_url == httpx.URL("https://listing.example")
            assert inner.headers["X-Client"] == "bookbridge"
            assert inner.event_hooks["response"] == []

    asyncio.run(scenario())

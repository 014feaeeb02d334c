"""Configuration for the booking listing (snapshot) source."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var, require_env_vars
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

LISTING_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True, slots=True)
class ListingConfig:
    """Holds listing API configuration values."""

    access_token: str
    store_id: str | None
    resilience: ResilienceConfig


def get_listing_config(*, resilience: ResilienceConfig | None = None) -> ListingConfig:
    values = require_env_vars(("LISTING_BASE_URL", "LISTING_ACCESS_TOKEN"))
    return ListingConfig(
        access_token=values["LISTING_ACCESS_TOKEN"],
        store_id=optional_env_var("STORE_ID"),
        resilience=resilience
        or ResilienceConfig(
            name="listing",
            base_url=values["LISTING_BASE_URL"].rstrip("/"),
            timeout_seconds=LISTING_TIMEOUT_SECONDS,
            ratelimit=RateLimit(max_calls=2, per_seconds=1.0),
            retry=RetryPolicy(total=2),
            default_headers={"Content-Type": "application/json"},
        ),
    )

"""Configuration for the downstream booking connector."""

from __future__ import annotations

from dataclasses import dataclass

from .env import require_env_vars
from .http_resilience import RateLimit, ResilienceConfig

DOWNSTREAM_TIMEOUT_SECONDS = 15.0


@dataclass(frozen=True, slots=True)
class DownstreamConfig:
    """Holds downstream connector configuration values."""

    access_token: str
    resilience: ResilienceConfig


def get_downstream_config(*, resilience: ResilienceConfig | None = None) -> DownstreamConfig:
    values = require_env_vars(("DOWNSTREAM_BASE_URL", "DOWNSTREAM_ACCESS_TOKEN"))
    return DownstreamConfig(
        access_token=values["DOWNSTREAM_ACCESS_TOKEN"],
        resilience=resilience
        or ResilienceConfig(
            name="downstream",
            base_url=values["DOWNSTREAM_BASE_URL"].rstrip("/"),
            timeout_seconds=DOWNSTREAM_TIMEOUT_SECONDS,
            ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
        ),
    )

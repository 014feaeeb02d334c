"""Timing windows and thresholds consumed by the reconciliation engine."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import timedelta
from typing import Final

from .env import optional_env_int, optional_env_var

DEFAULT_LOCAL_TIMEZONE: Final[str] = "Asia/Seoul"

_MS_OVERRIDES: Final[dict[str, str]] = {
    "snapshot_ttl": "BOOKBRIDGE_SNAPSHOT_TTL_MS",
    "customer_match_window": "BOOKBRIDGE_CUSTOMER_MATCH_WINDOW_MS",
    "customer_update_freshness": "BOOKBRIDGE_CUSTOMER_UPDATE_FRESHNESS_MS",
    "pending_validity": "BOOKBRIDGE_PENDING_VALIDITY_MS",
    "correlation_delay": "BOOKBRIDGE_CORRELATION_DELAY_MS",
    "customer_cooldown": "BOOKBRIDGE_CUSTOMER_COOLDOWN_MS",
    "customer_update_retention": "BOOKBRIDGE_CUSTOMER_UPDATE_RETENTION_MS",
    "maintenance_interval": "BOOKBRIDGE_MAINTENANCE_INTERVAL_MS",
}


@dataclass(frozen=True, slots=True)
class ReconciliationConfig:
    snapshot_ttl: timedelta = timedelta(milliseconds=60_000)
    customer_match_window: timedelta = timedelta(milliseconds=60_000)
    customer_update_freshness: timedelta = timedelta(milliseconds=30_000)
    pending_validity: timedelta = timedelta(milliseconds=10_000)
    correlation_delay: timedelta = timedelta(milliseconds=10_000)
    customer_cooldown: timedelta = timedelta(milliseconds=60_000)
    customer_update_retention: timedelta = timedelta(minutes=5)
    maintenance_interval: timedelta = timedelta(minutes=5)
    dedup_threshold: int = 1_000
    local_timezone: str = DEFAULT_LOCAL_TIMEZONE
    canceled_by: str = "App User"
    source_site: str = "KimCaddie"
    default_hole: str = "9"


def get_reconciliation_config() -> ReconciliationConfig:
    """Return defaults with any ``BOOKBRIDGE_*`` environment overrides applied."""

    config = ReconciliationConfig()
    overrides: dict[str, object] = {}
    for field_name, env_name in _MS_OVERRIDES.items():
        value = optional_env_int(env_name)
        if value is not None:
            overrides[field_name] = timedelta(milliseconds=value)

    threshold = optional_env_int("BOOKBRIDGE_DEDUP_THRESHOLD")
    if threshold is not None:
        overrides["dedup_threshold"] = threshold

    timezone_name = optional_env_var("BOOKBRIDGE_LOCAL_TIMEZONE")
    if timezone_name is not None:
        overrides["local_timezone"] = timezone_name

    return replace(config, **overrides) if overrides else config

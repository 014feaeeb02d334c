"""Application configuration helpers."""

from __future__ import annotations

from .downstream import DownstreamConfig, get_downstream_config
from .env import optional_env_int, optional_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .listing import ListingConfig, get_listing_config
from .logging import configure_logging
from .reconciliation import ReconciliationConfig, get_reconciliation_config

__all__ = [
    "ConfigurationError",
    "DownstreamConfig",
    "ListingConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ReconciliationConfig",
    "ResilienceConfig",
    "RetryPolicy",
    "configure_logging",
    "get_downstream_config",
    "get_listing_config",
    "get_reconciliation_config",
    "optional_env_int",
    "optional_env_var",
    "require_env_vars",
]

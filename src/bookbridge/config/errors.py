"""Errors raised while reading bookbridge settings from the environment."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """A setting is present but unusable, e.g. a negative window override."""


class MissingConfigurationError(ConfigurationError):
    """One or more required endpoint settings are unset or blank."""

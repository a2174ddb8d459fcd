"""Errors raised while reading CouchDB connection settings."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """The environment describes an unusable CouchDB connection."""


class MissingConfigurationError(ConfigurationError):
    """A required environment variable is unset or blank."""

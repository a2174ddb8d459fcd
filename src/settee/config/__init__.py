"""Application configuration helpers."""

from __future__ import annotations

from .couchdb import (
    DEFAULT_COUCHDB_URL,
    CouchDBConfig,
    full_url_to_database,
    get_couchdb_config,
)
from .env import optional_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import ResilienceConfig, RetryPolicy
from .logging import configure_logging

__all__ = [
    "DEFAULT_COUCHDB_URL",
    "ConfigurationError",
    "CouchDBConfig",
    "MissingConfigurationError",
    "ResilienceConfig",
    "RetryPolicy",
    "configure_logging",
    "full_url_to_database",
    "get_couchdb_config",
    "optional_env_var",
    "require_env_vars",
]

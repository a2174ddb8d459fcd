"""CouchDB connection settings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .env import optional_env_var, require_env_vars
from .http_resilience import ResilienceConfig

DEFAULT_COUCHDB_URL: Final[str] = "http://127.0.0.1:5984"
COUCHDB_TIMEOUT_SECONDS: Final[float] = 30.0


@dataclass(frozen=True, slots=True)
class CouchDBConfig:
    """Where the database lives and how to talk to it."""

    database_url: str
    resilience: ResilienceConfig

    @property
    def database_name(self) -> str:
        return self.database_url.rstrip("/").rsplit("/", 1)[-1]


def full_url_to_database(database: str, *, server_url: str = DEFAULT_COUCHDB_URL) -> str:
    """Expand a bare database name into a URL; full URLs are returned unchanged."""

    if database.startswith(("http://", "https://")):
        return database
    return f"{server_url.rstrip('/')}/{database}"


def get_couchdb_config(*, resilience: ResilienceConfig | None = None) -> CouchDBConfig:
    values = require_env_vars(("COUCHDB_DATABASE",))
    server_url = optional_env_var("COUCHDB_URL", DEFAULT_COUCHDB_URL) or DEFAULT_COUCHDB_URL
    database_url = full_url_to_database(values["COUCHDB_DATABASE"], server_url=server_url)

    user = optional_env_var("COUCHDB_USER")
    password = optional_env_var("COUCHDB_PASSWORD")
    auth = (user, password) if user is not None and password is not None else None

    return CouchDBConfig(
        database_url=database_url,
        resilience=resilience
        or ResilienceConfig(
            name="couchdb",
            base_url=database_url,
            timeout_seconds=COUCHDB_TIMEOUT_SECONDS,
            auth=auth,
            default_headers={"Accept": "application/json"},
        ),
    )
